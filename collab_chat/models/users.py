from typing import List, Mapping, Tuple

from collab_chat.schemas.user import User, UserInput
from collab_chat.utils.identifiers import USER, new_id
from .base import LAST_MODIFIED, Record, compact, ignored_changes, require_field

USER_ID = "userid"
FIRST_NAME = "firstname"
LAST_NAME = "lastname"
NICKNAME = "nickname"


class UserMapper:
    """User 리소스 <-> USER:<uuid> 해시 레코드 변환"""

    @staticmethod
    def to_record(user_input: UserInput, timestamp: int) -> Record:
        """생성용 레코드 (입력의 userID는 무시하고 새로 발급)"""
        return compact({
            USER_ID: new_id(USER),
            FIRST_NAME: user_input.first_name,
            LAST_NAME: user_input.last_name,
            NICKNAME: user_input.nickname,
            LAST_MODIFIED: timestamp,
        })

    @staticmethod
    def apply_update(existing: Mapping[str, str], user_input: UserInput, timestamp: int) -> Tuple[Record, List[str]]:
        """nickname만 반영, 나머지 변경 시도는 무시 목록으로 반환"""
        ignored = ignored_changes(existing, {
            USER_ID: user_input.user_id,
            FIRST_NAME: user_input.first_name,
            LAST_NAME: user_input.last_name,
        })

        record = dict(existing)
        if user_input.nickname is not None:
            record[NICKNAME] = user_input.nickname
        record[LAST_MODIFIED] = str(timestamp)
        return record, ignored

    @staticmethod
    def from_record(key: str, record: Mapping[str, str]) -> User:
        return User(
            user_id=require_field(key, record, USER_ID),
            first_name=record.get(FIRST_NAME),
            last_name=record.get(LAST_NAME),
            nickname=record.get(NICKNAME),
        )
