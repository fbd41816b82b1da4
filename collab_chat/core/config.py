"""
Collab Chat Backend Configuration

환경 변수를 통한 설정 관리
"""

from typing import List, Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()  # .env 파일 로드


class Settings(BaseSettings):
    """Collab Chat 설정"""

    # Application
    app_name: str = "Collab Chat Service"
    version: str = "1.0.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Store - redis (운영) 또는 memory (로컬/테스트)
    store_backend: Literal["redis", "memory"] = "redis"

    # Database - Redis
    redis_url: str = "redis://localhost:6379/0"
    redis_max_connections: int = 20
    redis_retry_on_timeout: bool = True
    redis_socket_keepalive: bool = True
    redis_scan_count: int = 500  # SCAN 1회당 힌트 개수

    # Notifications
    public_base_url: str = "http://localhost:8080"  # 알림 링크 생성용
    simulate_default_count: int = 2

    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]

    # Logging
    log_dir: str = "logs"
    log_to_file: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # 추가 환경변수 무시


settings = Settings()
