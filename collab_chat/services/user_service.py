"""
User repository.

Handles creation, lookup, nickname updates and full scans of USER records.
"""

from typing import Dict, List, Optional

from collab_chat.core.errors import user_not_found_error
from collab_chat.core.logging import get_logger
from collab_chat.database.base import KeyValueStore
from collab_chat.models.users import UserMapper, USER_ID
from collab_chat.schemas.user import User, UserInput
from collab_chat.utils.identifiers import USER, kind_of, kind_prefix
from collab_chat.utils.time_utils import now_millis

logger = get_logger(__name__)


class UserRepository:
    """사용자 레코드 저장소"""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def _get_record(self, user_id: str) -> Dict[str, str]:
        if kind_of(user_id) != USER:
            raise user_not_found_error(user_id)

        record = await self.store.get_record(user_id)
        if not record:
            raise user_not_found_error(user_id)
        return record

    async def create(self, user_input: UserInput) -> User:
        """사용자 생성 후 저장된 레코드를 다시 읽어 반환"""
        record = UserMapper.to_record(user_input, now_millis())
        user_id = record[USER_ID]

        await self.store.put(user_id, record)
        logger.info(f"User created: {user_id}")

        return await self.retrieve(user_id)

    async def retrieve(self, user_id: str) -> User:
        """사용자 ID로 조회 (없으면 ResourceNotFound)"""
        record = await self._get_record(user_id)
        return UserMapper.from_record(user_id, record)

    async def find(self, user_id: str) -> Optional[User]:
        """사용자 ID로 조회 (없으면 None)"""
        if kind_of(user_id) != USER:
            return None

        record = await self.store.get_record(user_id)
        if not record:
            return None
        return UserMapper.from_record(user_id, record)

    async def update(self, user_id: str, user_input: UserInput) -> User:
        """nickname 수정 (다른 필드의 변경 시도는 무시)"""
        existing = await self._get_record(user_id)
        record, ignored = UserMapper.apply_update(existing, user_input, now_millis())

        if ignored:
            logger.info(
                f"Ignoring immutable user fields for {user_id}: {', '.join(ignored)}",
                extra={"event_type": "ignored_mutation", "key": user_id, "fields": ignored}
            )

        # 동일 키에 덮어쓰기 (격리 없음 - 동시 수정 시 마지막 쓰기가 남음)
        await self.store.put(user_id, record)

        return await self.retrieve(user_id)

    async def list_all(self) -> List[User]:
        """전체 사용자 조회 (USER: 접두사 전체 스캔)"""
        keys = await self.store.scan_keys(kind_prefix(USER))
        return [await self.retrieve(key) for key in sorted(keys)]

    async def create_test_users(self, count: int) -> List[User]:
        """테스트용 사용자 일괄 생성"""
        return [
            await self.create(UserInput(
                first_name=f"Test User First Name{i}",
                last_name=f"Test User Last Name{i}",
                nickname=f"Test User NickName{i}",
            ))
            for i in range(count)
        ]
