"""
Collab Chat Service - FastAPI Application

1:1 채팅방, 메시지, 사용자 리소스를 키-값 저장소에 매핑하고
폴링 기반 변경 알림을 제공하는 서비스
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from collab_chat import api
from collab_chat.core.config import Settings, settings as default_settings
from collab_chat.core.logging import get_logger, setup_logging
from collab_chat.database import close_store, init_store
from collab_chat.middleware.error_handler import ErrorHandlerMiddleware, create_http_exception_handler
from collab_chat.middleware.logging_middleware import LoggingMiddleware

logger = get_logger(__name__)


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """애플리케이션 팩토리"""
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifecycle management"""
        # Startup
        logger.info(f"{config.app_name} starting up...")
        app.state.store = await init_store(config)

        yield

        # Shutdown
        logger.info(f"{config.app_name} shutting down...")
        await close_store(app.state.store)

    app = FastAPI(
        title=config.app_name,
        version=config.version,
        lifespan=lifespan
    )
    app.state.settings = config

    # Error handling / logging (나중에 추가된 미들웨어가 바깥쪽에서 실행됨)
    app.add_middleware(ErrorHandlerMiddleware, debug=config.debug)
    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(HTTPException, create_http_exception_handler())

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    api.include_routers(app, "api", api.__path__)

    # Prometheus metrics
    Instrumentator().instrument(app).expose(app)

    @app.get("/")
    async def root():
        return {
            "service": config.app_name,
            "version": config.version,
            "status": "running"
        }

    return app


setup_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "collab_chat.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug
    )
