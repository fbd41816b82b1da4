from typing import List, Mapping, Tuple

from collab_chat.schemas.message import ChatMessage, ChatMessageInput
from collab_chat.utils.identifiers import MESSAGE, new_id
from .base import (
    LAST_MODIFIED, Record, compact, ignored_changes, parse_bool, require_field, require_millis
)

CHAT_MESSAGE_ID = "chatmessageid"
CHAT_ROOM_ID = "chatroomid"
FROM_PARTICIPANT_ID = "fromparticipantid"
MESSAGE_BODY = "message"
READ_RECEIPT = "readreceipt"


class ChatMessageMapper:
    """
    ChatMessage 리소스 <-> MESSAGE:<chatRoomID>:<uuid> 해시 레코드 변환

    readreceipt 외 모든 필드는 생성 후 변경 불가 (메시지 내용, 발신자, 타임스탬프).
    readreceipt는 false -> true 방향으로만 변경됩니다.
    """

    @staticmethod
    def to_record(message_input: ChatMessageInput, chat_room_id: str, timestamp: int) -> Record:
        """생성용 레코드 (입력의 chatMessageID, lastModified, readReceipt는 무시)"""
        return compact({
            CHAT_MESSAGE_ID: new_id(MESSAGE, parent=chat_room_id),
            CHAT_ROOM_ID: chat_room_id,
            FROM_PARTICIPANT_ID: message_input.from_participant_id,
            MESSAGE_BODY: message_input.message,
            LAST_MODIFIED: timestamp,
            # 존재하지 않던 메시지는 상대방이 읽었을 수 없음
            READ_RECEIPT: False,
        })

    @staticmethod
    def apply_update(existing: Mapping[str, str], message_input: ChatMessageInput) -> Tuple[Record, List[str]]:
        ignored = ignored_changes(existing, {
            CHAT_MESSAGE_ID: message_input.chat_message_id,
            CHAT_ROOM_ID: message_input.chat_room_id,
            FROM_PARTICIPANT_ID: message_input.from_participant_id,
            MESSAGE_BODY: message_input.message,
            LAST_MODIFIED: message_input.last_modified,
        })

        record = dict(existing)
        already_read = parse_bool(existing.get(READ_RECEIPT))
        if message_input.read_receipt is True:
            record[READ_RECEIPT] = "true"
        elif message_input.read_receipt is False:
            if already_read:
                # 읽음 -> 안읽음 역행 요청은 no-op
                ignored.append(READ_RECEIPT)
            else:
                record[READ_RECEIPT] = "false"

        return record, ignored

    @staticmethod
    def from_record(key: str, record: Mapping[str, str]) -> ChatMessage:
        return ChatMessage(
            chat_message_id=require_field(key, record, CHAT_MESSAGE_ID),
            chat_room_id=require_field(key, record, CHAT_ROOM_ID),
            from_participant_id=require_field(key, record, FROM_PARTICIPANT_ID),
            message=record.get(MESSAGE_BODY),
            last_modified=require_millis(key, record),
            read_receipt=parse_bool(record.get(READ_RECEIPT)),
        )
