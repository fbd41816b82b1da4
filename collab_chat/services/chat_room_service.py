"""
Chat room repository.

1:1 채팅방 레코드를 관리하고, 조회 시 참여자와 메시지를 ID로 다시 읽어
완전한 ChatRoom 리소스를 구성합니다.
"""

from typing import Dict, List, Optional

from collab_chat.core.errors import (
    BusinessLogicException,
    IntegrityFaultException,
    chat_room_not_found_error,
    user_not_found_error,
)
from collab_chat.core.logging import get_logger
from collab_chat.database.base import KeyValueStore
from collab_chat.models.chat_rooms import ChatRoomMapper, CHAT_ROOM_ID
from collab_chat.schemas.chat_room import ChatRoom, ChatRoomInput
from collab_chat.schemas.message import ChatMessage
from collab_chat.schemas.user import User
from collab_chat.services.message_service import ChatMessageRepository
from collab_chat.services.user_service import UserRepository
from collab_chat.utils.identifiers import CHATROOM, kind_of, kind_prefix
from collab_chat.utils.time_utils import now_millis

logger = get_logger(__name__)


class ChatRoomRepository:
    """채팅방 레코드 저장소"""

    def __init__(self, store: KeyValueStore, users: UserRepository, messages: ChatMessageRepository):
        self.store = store
        self.users = users
        self.messages = messages

    # =========================================================================
    # Resolver (ChatRoomMapper.from_record 에서 사용)
    # =========================================================================

    async def resolve_participant(self, chat_room_id: str, user_id: str) -> User:
        """참여자 조회 - 참조된 사용자가 없으면 무결성 오류"""
        user = await self.users.find(user_id)
        if user is None:
            logger.error(f"Chat room {chat_room_id} references missing user {user_id}")
            raise IntegrityFaultException(chat_room_id, user_id)
        return user

    async def list_messages(self, chat_room_id: str) -> List[ChatMessage]:
        return await self.messages.list_all(chat_room_id)

    # =========================================================================
    # Helper Functions
    # =========================================================================

    async def _get_record(self, chat_room_id: str) -> Dict[str, str]:
        if kind_of(chat_room_id) != CHATROOM:
            raise chat_room_not_found_error(chat_room_id)

        record = await self.store.get_record(chat_room_id)
        if not record:
            raise chat_room_not_found_error(chat_room_id)
        return record

    async def resolve_chat_room(self, chat_room_id: str) -> ChatRoom:
        """레코드를 읽어 참여자/메시지까지 포함한 ChatRoom 구성"""
        record = await self._get_record(chat_room_id)
        return await ChatRoomMapper.from_record(chat_room_id, record, self)

    async def other_participant_id(self, chat_room_id: str, user_id: str) -> str:
        """상대방 사용자 ID 조회 (채팅방 멤버가 아니면 BusinessLogicException)"""
        creator_id, participant_id = await self.messages.chat_room_members(chat_room_id)
        if user_id == creator_id:
            return participant_id
        if user_id == participant_id:
            return creator_id
        raise BusinessLogicException(
            "User is not a participant of this chat room",
            details={"chat_room_id": chat_room_id, "user_id": user_id}
        )

    # =========================================================================
    # Chat Room CRUD Operations
    # =========================================================================

    async def create(self, room_input: ChatRoomInput) -> ChatRoom:
        """
        채팅방 생성

        첫 번째 참여자가 생성자, 두 번째 참여자가 초대된 사용자입니다.
        """
        creator_id, participant_id = ChatRoomMapper.participant_ids(room_input)

        if creator_id == participant_id:
            raise BusinessLogicException("Cannot create chat room with yourself")

        for user_id in (creator_id, participant_id):
            if await self.users.find(user_id) is None:
                raise user_not_found_error(user_id)

        if room_input.messages:
            logger.info("Ignoring messages supplied with chat room creation")

        record = ChatRoomMapper.to_record(room_input, now_millis())
        chat_room_id = record[CHAT_ROOM_ID]

        await self.store.put(chat_room_id, record)
        logger.info(f"Chat room created: {chat_room_id} ({creator_id} <-> {participant_id})")

        return await self.resolve_chat_room(chat_room_id)

    async def retrieve(self, chat_room_id: str) -> ChatRoom:
        return await self.resolve_chat_room(chat_room_id)

    async def update(self, chat_room_id: str, room_input: ChatRoomInput) -> ChatRoom:
        """topic 수정 (참여자/ID/메시지 변경 시도는 무시)"""
        existing = await self._get_record(chat_room_id)
        record, ignored = ChatRoomMapper.apply_update(existing, room_input, now_millis())

        if ignored:
            logger.info(
                f"Ignoring immutable chat room fields for {chat_room_id}: {', '.join(ignored)}",
                extra={"event_type": "ignored_mutation", "key": chat_room_id, "fields": ignored}
            )

        await self.store.put(chat_room_id, record)

        return await self.resolve_chat_room(chat_room_id)

    async def list_all(self, user_id: Optional[str] = None) -> List[ChatRoom]:
        """
        채팅방 목록 조회

        user_id가 주어지면 해당 사용자가 생성자 또는 참여자인 채팅방만 반환합니다.
        """
        keys = await self.store.scan_keys(kind_prefix(CHATROOM))

        chat_rooms = []
        for key in sorted(keys):
            record = await self._get_record(key)
            if user_id is not None and user_id not in ChatRoomMapper.member_ids(key, record):
                continue
            chat_rooms.append(await ChatRoomMapper.from_record(key, record, self))

        return chat_rooms
