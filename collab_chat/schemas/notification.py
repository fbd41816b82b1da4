from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict


class Notification(BaseModel):
    """
    변경 알림 스키마 (저장되지 않음)

    페이로드 대신 변경된 리소스를 가리키는 주소 정보만 담습니다.
    클라이언트는 links로 후속 GET을 수행합니다.
    """
    model_config = ConfigDict(populate_by_name=True)

    timestamp: int = Field(..., description="변경된 레코드의 lastmodified (epoch ms)")
    parent_resource_id: str = Field(..., alias="parentResourceID", description="변경된 상위 리소스 ID")
    sub_resource_id: Optional[str] = Field(None, alias="subResourceID", description="변경된 하위 리소스 ID (메시지)")
    links: List[str] = Field(default_factory=list, description="리소스 링크")
