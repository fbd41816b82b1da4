"""
레코드 공통 헬퍼

레코드는 저장소의 평탄한 표현입니다 (필드명 -> 문자열 값).
리소스 참조는 객체가 아닌 ID로만 보관합니다.
"""

from typing import Any, Dict, List, Mapping, Optional

from collab_chat.core.errors import CorruptRecordException
from collab_chat.database.base import encode_value

Record = Dict[str, str]

LAST_MODIFIED = "lastmodified"


def compact(fields: Mapping[str, Optional[Any]]) -> Record:
    """None 값을 제외하고 문자열 레코드로 변환"""
    return {name: encode_value(value) for name, value in fields.items() if value is not None}


def require_field(key: str, record: Mapping[str, str], name: str) -> str:
    """식별 필드 조회 - 없으면 기본값으로 대체하지 않고 CorruptRecord 발생"""
    value = record.get(name)
    if value is None or value == "":
        raise CorruptRecordException(key, name)
    return value


def require_millis(key: str, record: Mapping[str, str], name: str = LAST_MODIFIED) -> int:
    value = require_field(key, record, name)
    try:
        return int(value)
    except ValueError:
        raise CorruptRecordException(key, name, details={"key": key, "field": name, "value": value})


def parse_bool(value: Optional[str]) -> bool:
    return value is not None and value.lower() == "true"


def ignored_changes(existing: Mapping[str, str], attempted: Mapping[str, Optional[Any]]) -> List[str]:
    """수정 불가 필드에 대해 기존 값과 다른 값이 들어온 필드명 목록"""
    return [
        name for name, value in attempted.items()
        if value is not None and encode_value(value) != existing.get(name)
    ]
