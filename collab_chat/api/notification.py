from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from collab_chat.api.dependencies import get_notification_service
from collab_chat.core.errors import ValidationException, ValidationError
from collab_chat.core.logging import get_logger
from collab_chat.schemas.notification import Notification
from collab_chat.services.notification_service import NotificationService
from collab_chat.utils.time_utils import now_millis

logger = get_logger(__name__)

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[Notification])
async def get_notifications(
    since: Optional[int] = Query(default=None, ge=0, description="마지막으로 관찰한 시각 (epoch ms)"),
    chatroomID: Optional[str] = Query(default=None, description="테스트 메시지를 생성할 채팅방 ID"),
    test: bool = Query(default=False, description="true면 상대방 활동을 흉내낸 알림 생성"),
    num: int = Query(default=1, ge=0, description="생성할 테스트 메시지 수"),
    userid: Optional[str] = Query(default=None, description="호출자 ID (상대방 명의로 메시지 생성)"),
    notifications: NotificationService = Depends(get_notification_service)
) -> List[Notification]:
    """
    변경 알림 폴링

    - **since**: 이 시각 이후 변경된 리소스의 알림 반환 (생략 시 현재 시각 기준)
    - **chatroomID**, **test=true**: 해당 채팅방에 상대방 메시지를 생성하고 알림 반환

    알림은 변경된 리소스의 ID와 링크만 담습니다. 가장 큰 timestamp를
    다음 요청의 since로 사용하면 됩니다.
    """
    if test:
        if not chatroomID:
            raise ValidationException(
                "chatroomID is required when test=true",
                validation_errors=[ValidationError(field="chatroomID", message="This field is required")]
            )
        logger.info(f"Creating test notifications for chat room {chatroomID}")
        return await notifications.simulate_activity(chatroomID, num, caller_id=userid)

    watermark = since if since is not None else now_millis()
    return await notifications.check_for_new_events(watermark)
