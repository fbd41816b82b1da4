"""
Key-value store adapter interface.

The 'KeyValueStore' ABC is the single persistence seam of the service. Every
record is a flat mapping of string field names to string values stored under
one key, and kinds of records are enumerated by key prefix. Concrete backends
('RedisStore', 'InMemoryStore') are interchangeable at construction time.

Consistency model: last writer wins per field, no transactions across keys and
no optimistic concurrency token. Concurrent read-modify-write sequences on the
same key can interleave; callers accept that race.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Set


def encode_value(value: Any) -> str:
    """Redis 해시 직렬화 규칙과 동일하게 값을 문자열로 변환"""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_fields(fields: Mapping[str, Any]) -> Dict[str, str]:
    return {name: encode_value(value) for name, value in fields.items() if value is not None}


class KeyValueStore(ABC):
    """Abstract keyed-record store addressed by exact key or key prefix."""

    @abstractmethod
    async def put(self, key: str, fields: Mapping[str, Any]) -> None:
        """Write (or overwrite) the given fields of the record under 'key'."""

    @abstractmethod
    async def get_field(self, key: str, name: str) -> Optional[str]:
        """Return a single field value, or None when the key or field is absent."""

    @abstractmethod
    async def get_record(self, key: str) -> Dict[str, str]:
        """Return every field of the record; an empty dict when the key is absent."""

    @abstractmethod
    async def scan_keys(self, prefix: str) -> Set[str]:
        """Return all keys starting with the literal 'prefix'."""

    @abstractmethod
    async def ping(self) -> bool:
        pass

    @abstractmethod
    async def close(self) -> None:
        pass

    @abstractmethod
    async def health_check(self) -> dict:
        """Return a status dict with at least 'status' and 'backend' keys."""
