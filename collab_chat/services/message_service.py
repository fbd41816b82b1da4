"""
Chat message repository.

Messages live under MESSAGE:<chatRoomID>:<uuid>, so listing a room's messages
is a prefix scan that never crosses into another room.
"""

from typing import Dict, List, Optional, Tuple

from collab_chat.core.errors import (
    BusinessLogicException,
    ValidationException,
    ValidationError,
    chat_message_not_found_error,
    chat_room_not_found_error,
)
from collab_chat.core.logging import get_logger
from collab_chat.database.base import KeyValueStore
from collab_chat.models.chat_rooms import ChatRoomMapper
from collab_chat.models.messages import ChatMessageMapper, CHAT_MESSAGE_ID, READ_RECEIPT
from collab_chat.schemas.message import ChatMessage, ChatMessageInput
from collab_chat.utils.identifiers import (
    CHATROOM, MESSAGE, belongs_to_chat_room, kind_of, message_key_prefix
)
from collab_chat.utils.time_utils import now_millis

logger = get_logger(__name__)


class ChatMessageRepository:
    """채팅 메시지 레코드 저장소"""

    def __init__(self, store: KeyValueStore):
        self.store = store

    # =========================================================================
    # Helper Functions
    # =========================================================================

    async def chat_room_members(self, chat_room_id: str) -> Tuple[str, str]:
        """채팅방 존재 확인 후 (생성자 ID, 참여자 ID) 반환"""
        if kind_of(chat_room_id) != CHATROOM:
            raise chat_room_not_found_error(chat_room_id)

        record = await self.store.get_record(chat_room_id)
        if not record:
            raise chat_room_not_found_error(chat_room_id)
        return ChatRoomMapper.member_ids(chat_room_id, record)

    async def _get_record(self, chat_message_id: str) -> Dict[str, str]:
        if kind_of(chat_message_id) != MESSAGE:
            raise chat_message_not_found_error(chat_message_id)

        record = await self.store.get_record(chat_message_id)
        if not record:
            raise chat_message_not_found_error(chat_message_id)
        return record

    # =========================================================================
    # Chat Message CRUD Operations
    # =========================================================================

    async def create(self, chat_room_id: str, message_input: ChatMessageInput) -> ChatMessage:
        """메시지 생성 후 저장된 레코드를 다시 읽어 반환"""
        if not message_input.from_participant_id:
            raise ValidationException(
                "fromParticipantID is required",
                validation_errors=[
                    ValidationError(field="fromParticipantID", message="This field is required")
                ]
            )

        members = await self.chat_room_members(chat_room_id)
        if message_input.from_participant_id not in members:
            raise BusinessLogicException(
                "Sender is not a participant of this chat room",
                details={"chat_room_id": chat_room_id, "user_id": message_input.from_participant_id}
            )

        if message_input.chat_room_id and message_input.chat_room_id != chat_room_id:
            logger.info(f"Ignoring chatRoomID {message_input.chat_room_id} in body, using {chat_room_id}")

        if message_input.read_receipt:
            logger.info(
                "Ignoring readReceipt on chat message creation, new messages start unread",
                extra={"event_type": "ignored_mutation", "key": chat_room_id, "fields": [READ_RECEIPT]}
            )

        record = ChatMessageMapper.to_record(message_input, chat_room_id, now_millis())
        chat_message_id = record[CHAT_MESSAGE_ID]

        await self.store.put(chat_message_id, record)
        logger.info(f"Chat message created: {chat_message_id}")

        return await self.retrieve(chat_message_id)

    async def retrieve(self, chat_message_id: str, chat_room_id: Optional[str] = None) -> ChatMessage:
        """메시지 ID로 조회 (chat_room_id가 주어지면 해당 채팅방 소속인지 확인)"""
        if chat_room_id is not None and not belongs_to_chat_room(chat_message_id, chat_room_id):
            raise chat_message_not_found_error(chat_message_id)

        record = await self._get_record(chat_message_id)
        return ChatMessageMapper.from_record(chat_message_id, record)

    async def update(
        self,
        chat_message_id: str,
        message_input: ChatMessageInput,
        chat_room_id: Optional[str] = None
    ) -> ChatMessage:
        """
        읽음 표시 수정

        readReceipt만 반영되며 true -> false 요청은 성공 처리하되 값은 유지합니다.
        """
        if chat_room_id is not None and not belongs_to_chat_room(chat_message_id, chat_room_id):
            raise chat_message_not_found_error(chat_message_id)

        existing = await self._get_record(chat_message_id)
        record, ignored = ChatMessageMapper.apply_update(existing, message_input)

        if ignored:
            logger.info(
                f"Ignoring immutable message fields for {chat_message_id}: {', '.join(ignored)}",
                extra={"event_type": "ignored_mutation", "key": chat_message_id, "fields": ignored}
            )

        await self.store.put(chat_message_id, record)

        return await self.retrieve(chat_message_id)

    async def list_all(self, chat_room_id: str) -> List[ChatMessage]:
        """채팅방의 전체 메시지 조회 (MESSAGE:<chatRoomID>: 접두사 스캔, 작성 시각순)"""
        keys = await self.store.scan_keys(message_key_prefix(chat_room_id))
        messages = [await self.retrieve(key) for key in keys]
        return sorted(messages, key=lambda m: (m.last_modified, m.chat_message_id))
