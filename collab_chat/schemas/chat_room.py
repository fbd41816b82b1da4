from typing import Any, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .message import ChatMessage
from .user import User


class ChatRoom(BaseModel):
    """1:1 채팅방 리소스 스키마 (참여자와 메시지는 조회 시점에 구성)"""
    model_config = ConfigDict(populate_by_name=True)

    chat_room_id: str = Field(..., alias="chatRoomID", description="채팅방 ID (CHATROOM:<uuid>)")
    topic: Optional[str] = Field(None, description="채팅방 주제")
    participants: List[User] = Field(default_factory=list, description="[생성자, 초대된 참여자]")
    messages: List[ChatMessage] = Field(default_factory=list, description="채팅방 메시지 목록")


class ParticipantRef(BaseModel):
    """참여자 참조 (userID 외 필드는 무시)"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(..., alias="userID", description="사용자 ID")


class ChatRoomInput(BaseModel):
    """
    1:1 채팅방 생성/수정 입력 스키마

    - 생성: participants 두 명(첫 번째가 생성자)과 topic 사용, chatRoomID 무시
    - 수정: topic만 반영, 나머지 필드 무시
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    chat_room_id: Optional[str] = Field(None, alias="chatRoomID", description="무시됨 (시스템 발급)")
    topic: Optional[str] = Field(None, description="채팅방 주제")
    participants: Optional[List[ParticipantRef]] = Field(None, description="참여자 목록")
    messages: Optional[List[Any]] = Field(None, description="무시됨 (메시지는 별도 리소스)")
