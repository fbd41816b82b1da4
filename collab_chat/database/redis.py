"""
Redis 연결 설정 및 키-값 저장소 어댑터

리소스 레코드를 Redis 해시(HSET/HGET/HGETALL)로 저장하고 SCAN으로 접두사 조회를 수행합니다.
"""

import asyncio
import re
import time
from typing import Any, Dict, Mapping, Optional, Set

import redis.asyncio as redis
from redis.asyncio import ConnectionPool
from redis.exceptions import ConnectionError

from collab_chat.core.config import Settings
from collab_chat.core.logging import get_logger, log_store_operation
from collab_chat.database.base import KeyValueStore, encode_fields

logger = get_logger(__name__)

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def escape_glob(prefix: str) -> str:
    """SCAN MATCH 패턴에서 접두사를 리터럴로 취급하도록 이스케이프"""
    return _GLOB_SPECIAL.sub(r"\\\1", prefix)


def create_redis_pool(config: Settings) -> ConnectionPool:
    """Redis 연결 풀 생성"""
    try:
        pool = ConnectionPool.from_url(
            config.redis_url,
            max_connections=config.redis_max_connections,
            retry_on_timeout=config.redis_retry_on_timeout,
            socket_keepalive=config.redis_socket_keepalive,
            decode_responses=True,  # 자동으로 bytes를 string으로 디코딩
            encoding='utf-8'
        )

        logger.info(f"Redis connection pool created with max {config.redis_max_connections} connections")
        return pool

    except Exception as e:
        logger.error(f"Failed to create Redis connection pool: {e}")
        raise


class RedisStore(KeyValueStore):
    """Redis 해시 기반 키-값 저장소"""

    def __init__(self, client: redis.Redis, scan_count: int = 500, pool: Optional[ConnectionPool] = None):
        self.client = client
        self.scan_count = scan_count
        # connection_pool을 직접 넘긴 클라이언트는 aclose() 시 풀을 닫지 않음
        self.pool = pool

    @classmethod
    async def connect(cls, config: Settings) -> "RedisStore":
        """Redis 연결 초기화"""
        pool = create_redis_pool(config)
        client = redis.Redis(connection_pool=pool)

        try:
            # 연결 테스트
            await client.ping()

            info = await client.info()
            logger.info("Redis connection initialized successfully")
            logger.info(f"Redis server version: {info.get('redis_version', 'unknown')}")

        except ConnectionError as e:
            logger.error(f"Redis connection failed: {e}")
            await client.aclose()
            await pool.aclose()
            raise

        return cls(client, scan_count=config.redis_scan_count, pool=pool)

    async def put(self, key: str, fields: Mapping[str, Any]) -> None:
        start_time = time.time()
        mapping = encode_fields(fields)
        if not mapping:
            return

        await self.client.hset(key, mapping=mapping)
        log_store_operation(
            logger, "put", key,
            duration_ms=(time.time() - start_time) * 1000,
            field_count=len(mapping)
        )

    async def get_field(self, key: str, name: str) -> Optional[str]:
        return await self.client.hget(key, name)

    async def get_record(self, key: str) -> Dict[str, str]:
        start_time = time.time()
        record = await self.client.hgetall(key)
        log_store_operation(
            logger, "get_record", key,
            duration_ms=(time.time() - start_time) * 1000,
            hit=bool(record)
        )
        return dict(record)

    async def scan_keys(self, prefix: str) -> Set[str]:
        # KEYS 대신 SCAN 사용 (서버 블로킹 방지), 결과는 전체 키 공간 순회 O(N)
        start_time = time.time()
        keys = set()
        async for key in self.client.scan_iter(match=f"{escape_glob(prefix)}*", count=self.scan_count):
            keys.add(key)

        log_store_operation(
            logger, "scan", prefix,
            duration_ms=(time.time() - start_time) * 1000,
            key_count=len(keys)
        )
        return keys

    async def ping(self) -> bool:
        return bool(await self.client.ping())

    async def close(self) -> None:
        """Redis 연결 종료"""
        try:
            await self.client.aclose()
            logger.info("Redis client closed")

            if self.pool is not None:
                await self.pool.aclose()
                logger.info("Redis connection pool closed")

        except Exception as e:
            logger.error(f"Error closing Redis connections: {e}")
        finally:
            self.pool = None

    async def health_check(self) -> dict:
        """Redis 헬스 체크"""
        try:
            # 연결 테스트
            start_time = asyncio.get_running_loop().time()
            await self.client.ping()
            ping_time = (asyncio.get_running_loop().time() - start_time) * 1000

            # 서버 정보 조회
            info = await self.client.info()

            return {
                "status": "healthy",
                "backend": "redis",
                "ping_ms": round(ping_time, 2),
                "version": info.get("redis_version", "unknown"),
                "used_memory": info.get("used_memory_human", "unknown"),
                "connected_clients": info.get("connected_clients", 0)
            }

        except Exception as e:
            logger.error(f"Redis health check failed: {e}")
            return {
                "status": "unhealthy",
                "backend": "redis",
                "error": str(e)
            }
