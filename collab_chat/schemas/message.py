from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class ChatMessage(BaseModel):
    """채팅 메시지 리소스 스키마"""
    model_config = ConfigDict(populate_by_name=True)

    chat_message_id: str = Field(..., alias="chatMessageID", description="메시지 ID (MESSAGE:<chatRoomID>:<uuid>)")
    chat_room_id: str = Field(..., alias="chatRoomID", description="소속 채팅방 ID")
    from_participant_id: str = Field(..., alias="fromParticipantID", description="발신자 사용자 ID")
    message: Optional[str] = Field(None, description="메시지 내용")
    last_modified: int = Field(..., alias="lastModified", description="서버 생성 타임스탬프 (epoch ms)")
    read_receipt: bool = Field(False, alias="readReceipt", description="상대방 읽음 여부 (false -> true 단방향)")


class ChatMessageInput(BaseModel):
    """
    메시지 생성/수정 입력 스키마

    chatMessageID, lastModified는 항상 무시됩니다.
    수정 시에는 readReceipt만 반영됩니다.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    chat_message_id: Optional[str] = Field(None, alias="chatMessageID", description="무시됨 (시스템 발급)")
    chat_room_id: Optional[str] = Field(None, alias="chatRoomID", description="채팅방 ID")
    from_participant_id: Optional[str] = Field(None, alias="fromParticipantID", description="발신자 사용자 ID")
    message: Optional[str] = Field(None, description="메시지 내용")
    last_modified: Optional[int] = Field(None, alias="lastModified", description="무시됨 (서버 생성)")
    read_receipt: Optional[bool] = Field(None, alias="readReceipt", description="읽음 여부")
