import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from collab_chat.core.config import Settings
from collab_chat.database.memory import InMemoryStore
from collab_chat.database.redis import RedisStore, escape_glob


class TestInMemoryStore:
    """인메모리 저장소 테스트"""

    @pytest.mark.asyncio
    async def test_put_and_get(self):
        store = InMemoryStore()
        await store.put("USER:1", {"userid": "USER:1", "lastmodified": 10, "flag": True, "skip": None})

        assert await store.get_record("USER:1") == {"userid": "USER:1", "lastmodified": "10", "flag": "true"}
        assert await store.get_field("USER:1", "lastmodified") == "10"
        assert await store.get_field("USER:1", "skip") is None

    @pytest.mark.asyncio
    async def test_absent_key(self):
        store = InMemoryStore()
        assert await store.get_record("USER:missing") == {}
        assert await store.get_field("USER:missing", "userid") is None

    @pytest.mark.asyncio
    async def test_put_merges_fields(self):
        """필드 단위 덮어쓰기 (마지막 쓰기가 남음)"""
        store = InMemoryStore()
        await store.put("k", {"a": "1", "b": "2"})
        await store.put("k", {"b": "3"})

        assert await store.get_record("k") == {"a": "1", "b": "3"}

    @pytest.mark.asyncio
    async def test_get_record_returns_copy(self):
        store = InMemoryStore()
        await store.put("k", {"a": "1"})

        record = await store.get_record("k")
        record["a"] = "changed"

        assert await store.get_field("k", "a") == "1"

    @pytest.mark.asyncio
    async def test_scan_keys_by_prefix(self):
        store = InMemoryStore()
        for key in ("USER:1", "USER:2", "CHATROOM:1", "MESSAGE:CHATROOM:1:a", "MESSAGE:CHATROOM:12:b"):
            await store.put(key, {"x": "1"})

        assert await store.scan_keys("USER:") == {"USER:1", "USER:2"}
        assert await store.scan_keys("MESSAGE:CHATROOM:1:") == {"MESSAGE:CHATROOM:1:a"}
        assert await store.scan_keys("NOTHING:") == set()

    @pytest.mark.asyncio
    async def test_health(self):
        store = InMemoryStore()
        assert await store.ping() is True
        assert (await store.health_check())["status"] == "healthy"


class TestRedisStore:
    """Redis 해시 어댑터 테스트 (클라이언트 모킹)"""

    @pytest.fixture
    def redis_client(self):
        client = MagicMock()
        client.hset = AsyncMock(return_value=1)
        client.hget = AsyncMock(return_value="10")
        client.hgetall = AsyncMock(return_value={"userid": "USER:1"})
        client.ping = AsyncMock(return_value=True)
        client.aclose = AsyncMock()
        return client

    @pytest.mark.asyncio
    async def test_put_uses_hset_mapping(self, redis_client):
        store = RedisStore(redis_client)
        await store.put("USER:1", {"userid": "USER:1", "lastmodified": 10, "readreceipt": False, "skip": None})

        redis_client.hset.assert_awaited_once_with(
            "USER:1", mapping={"userid": "USER:1", "lastmodified": "10", "readreceipt": "false"}
        )

    @pytest.mark.asyncio
    async def test_put_empty_mapping_is_skipped(self, redis_client):
        store = RedisStore(redis_client)
        await store.put("USER:1", {"skip": None})

        redis_client.hset.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_field_and_record(self, redis_client):
        store = RedisStore(redis_client)

        assert await store.get_field("USER:1", "lastmodified") == "10"
        redis_client.hget.assert_awaited_once_with("USER:1", "lastmodified")

        assert await store.get_record("USER:1") == {"userid": "USER:1"}
        redis_client.hgetall.assert_awaited_once_with("USER:1")

    @pytest.mark.asyncio
    async def test_scan_keys_uses_escaped_match(self, redis_client):
        seen = {}

        async def scan_iter(match=None, count=None):
            seen["match"] = match
            seen["count"] = count
            for key in ("USER:1", "USER:2", "USER:1"):
                yield key

        redis_client.scan_iter = scan_iter
        store = RedisStore(redis_client, scan_count=100)

        assert await store.scan_keys("USER:") == {"USER:1", "USER:2"}
        assert seen == {"match": "USER:*", "count": 100}

    @pytest.mark.asyncio
    async def test_ping_and_close(self, redis_client):
        pool = MagicMock()
        pool.aclose = AsyncMock()
        store = RedisStore(redis_client, pool=pool)

        assert await store.ping() is True
        await store.close()
        redis_client.aclose.assert_awaited_once()
        pool.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connect_then_close_releases_pool(self, redis_client):
        """connect()로 만든 풀은 close() 시 함께 종료"""
        pool = MagicMock()
        pool.aclose = AsyncMock()
        redis_client.info = AsyncMock(return_value={"redis_version": "7.2.0"})

        with patch("collab_chat.database.redis.create_redis_pool", return_value=pool), \
                patch("collab_chat.database.redis.redis.Redis", return_value=redis_client) as redis_cls:
            store = await RedisStore.connect(Settings(store_backend="redis", redis_scan_count=50))

        redis_cls.assert_called_once_with(connection_pool=pool)
        assert store.scan_count == 50

        await store.close()

        redis_client.aclose.assert_awaited_once()
        pool.aclose.assert_awaited_once()

    def test_escape_glob(self):
        assert escape_glob("USER:") == "USER:"
        assert escape_glob("a*b?[c]") == r"a\*b\?\[c\]"
