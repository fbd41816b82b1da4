from typing import List, Mapping, Protocol, Tuple

from collab_chat.core.errors import participant_count_error
from collab_chat.schemas.chat_room import ChatRoom, ChatRoomInput
from collab_chat.schemas.message import ChatMessage
from collab_chat.schemas.user import User
from collab_chat.utils.identifiers import CHATROOM, new_id
from .base import LAST_MODIFIED, Record, compact, ignored_changes, require_field

CHAT_ROOM_ID = "chatroomid"
TOPIC = "topic"
CREATOR_USER_ID = "chatroomcreatoruserid"
PARTICIPANT_ID = "chatroomparticipantid"


class ChatRoomResolver(Protocol):
    """채팅방 재구성 시 하위 리소스를 ID로 조회하는 기능"""

    async def resolve_participant(self, chat_room_id: str, user_id: str) -> User:
        ...

    async def list_messages(self, chat_room_id: str) -> List[ChatMessage]:
        ...


class ChatRoomMapper:
    """
    ChatRoom 리소스 <-> CHATROOM:<uuid> 해시 레코드 변환

    레코드에는 참여자 ID만 저장합니다 (참여자 정보 중복 및 오래된 사본 방지).
    participants, messages는 조회 시 resolver를 통해 구성합니다.
    """

    @staticmethod
    def participant_ids(room_input: ChatRoomInput) -> Tuple[str, str]:
        """(생성자 ID, 초대된 참여자 ID) - 정확히 두 명만 허용"""
        participants = room_input.participants or []
        if len(participants) != 2:
            raise participant_count_error(len(participants))
        return participants[0].user_id, participants[1].user_id

    @staticmethod
    def to_record(room_input: ChatRoomInput, timestamp: int) -> Record:
        """생성용 레코드 (입력의 chatRoomID는 무시하고 새로 발급)"""
        creator_id, participant_id = ChatRoomMapper.participant_ids(room_input)
        return compact({
            CHAT_ROOM_ID: new_id(CHATROOM),
            TOPIC: room_input.topic,
            CREATOR_USER_ID: creator_id,
            PARTICIPANT_ID: participant_id,
            LAST_MODIFIED: timestamp,
        })

    @staticmethod
    def apply_update(existing: Mapping[str, str], room_input: ChatRoomInput, timestamp: int) -> Tuple[Record, List[str]]:
        """topic만 반영"""
        attempted = {CHAT_ROOM_ID: room_input.chat_room_id}
        if room_input.participants is not None:
            attempted[CREATOR_USER_ID] = room_input.participants[0].user_id if room_input.participants else ""
            attempted[PARTICIPANT_ID] = room_input.participants[1].user_id if len(room_input.participants) > 1 else ""
        ignored = ignored_changes(existing, attempted)
        if room_input.messages:
            ignored.append("messages")

        record = dict(existing)
        if room_input.topic is not None:
            record[TOPIC] = room_input.topic
        record[LAST_MODIFIED] = str(timestamp)
        return record, ignored

    @staticmethod
    def member_ids(key: str, record: Mapping[str, str]) -> Tuple[str, str]:
        return (
            require_field(key, record, CREATOR_USER_ID),
            require_field(key, record, PARTICIPANT_ID),
        )

    @staticmethod
    async def from_record(key: str, record: Mapping[str, str], resolver: ChatRoomResolver) -> ChatRoom:
        chat_room_id = require_field(key, record, CHAT_ROOM_ID)
        creator_id, participant_id = ChatRoomMapper.member_ids(key, record)

        participants = [
            await resolver.resolve_participant(chat_room_id, creator_id),
            await resolver.resolve_participant(chat_room_id, participant_id),
        ]
        messages = await resolver.list_messages(chat_room_id)

        return ChatRoom(
            chat_room_id=chat_room_id,
            topic=record.get(TOPIC),
            participants=participants,
            messages=messages,
        )
