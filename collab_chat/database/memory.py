"""
In-memory key-value store.

Deterministic local adapter for development runs and tests. Values are
stringified exactly like the Redis backend so mappers see identical records.
"""

from typing import Any, Dict, Mapping, Optional, Set

from collab_chat.database.base import KeyValueStore, encode_fields


class InMemoryStore(KeyValueStore):
    def __init__(self) -> None:
        self._records: Dict[str, Dict[str, str]] = {}

    async def put(self, key: str, fields: Mapping[str, Any]) -> None:
        mapping = encode_fields(fields)
        if not mapping:
            return
        self._records.setdefault(key, {}).update(mapping)

    async def get_field(self, key: str, name: str) -> Optional[str]:
        return self._records.get(key, {}).get(name)

    async def get_record(self, key: str) -> Dict[str, str]:
        # 복사본 반환 (호출자가 저장소 상태를 직접 변경하지 못하도록)
        return dict(self._records.get(key, {}))

    async def scan_keys(self, prefix: str) -> Set[str]:
        return {key for key in self._records if key.startswith(prefix)}

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self._records.clear()

    async def health_check(self) -> dict:
        return {
            "status": "healthy",
            "backend": "memory",
            "key_count": len(self._records)
        }
