from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class User(BaseModel):
    """사용자 리소스 스키마"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userID", description="시스템 발급 사용자 ID (USER:<uuid>)")
    first_name: Optional[str] = Field(None, alias="firstName", description="이름")
    last_name: Optional[str] = Field(None, alias="lastName", description="성")
    nickname: Optional[str] = Field(None, description="닉네임 (수정 가능한 유일한 필드)")


class UserInput(BaseModel):
    """
    사용자 생성/수정 입력 스키마

    userID는 생성 시 무시되고, 수정 시에는 nickname만 반영됩니다.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: Optional[str] = Field(None, alias="userID", description="무시됨 (시스템 발급)")
    first_name: Optional[str] = Field(None, alias="firstName", description="이름")
    last_name: Optional[str] = Field(None, alias="lastName", description="성")
    nickname: Optional[str] = Field(None, description="닉네임")
