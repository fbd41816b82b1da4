"""
리소스 식별자 생성 유틸리티

식별자는 저장소 키로도 그대로 사용되므로 형식 자체가 공개 계약입니다.

    USER:<uuid>
    CHATROOM:<uuid>
    MESSAGE:<chatRoomID>:<uuid>

메시지 식별자는 소속 채팅방 ID 아래에 위치하므로 ``MESSAGE:<chatRoomID>:``
접두사 스캔으로 해당 채팅방의 메시지만 열거할 수 있습니다.
"""

import uuid
from typing import Optional

USER = "USER"
CHATROOM = "CHATROOM"
MESSAGE = "MESSAGE"

RESOURCE_KINDS = (USER, CHATROOM, MESSAGE)

SEPARATOR = ":"


def new_id(kind: str, parent: Optional[str] = None) -> str:
    """새 식별자 발급 (호출자가 전달한 ID는 절대 재사용하지 않음)"""
    if kind not in RESOURCE_KINDS:
        raise ValueError(f"Unknown resource kind: {kind}")

    if kind == MESSAGE:
        if not parent:
            raise ValueError("MESSAGE identifiers require the owning chat room id")
        return f"{message_key_prefix(parent)}{uuid.uuid4()}"

    return f"{kind}{SEPARATOR}{uuid.uuid4()}"


def kind_prefix(kind: str) -> str:
    """종류별 전체 스캔용 접두사"""
    return f"{kind}{SEPARATOR}"


def message_key_prefix(chat_room_id: str) -> str:
    """채팅방 메시지 스캔용 접두사 (끝의 ':'로 다른 채팅방과 분리)"""
    return f"{MESSAGE}{SEPARATOR}{chat_room_id}{SEPARATOR}"


def kind_of(identifier: str) -> Optional[str]:
    """식별자에서 리소스 종류 추출"""
    head = identifier.split(SEPARATOR, 1)[0]
    return head if head in RESOURCE_KINDS else None


def belongs_to_chat_room(chat_message_id: str, chat_room_id: str) -> bool:
    return chat_message_id.startswith(message_key_prefix(chat_room_id))
