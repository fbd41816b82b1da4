"""
Polling-based change notification.

푸시 채널 없이 클라이언트가 마지막으로 관찰한 시각(watermark) 이후 변경된
리소스를 조회합니다. 응답은 페이로드가 아닌 리소스 주소(ID, 링크)만 담고,
클라이언트는 링크로 후속 GET을 수행합니다.

"변경 없음" 응답 직후 다른 클라이언트의 쓰기가 발생하는 경쟁은 허용합니다
(다음 폴링에서 발견됨).
"""

from typing import List, Optional

from collab_chat.core.errors import CorruptRecordException, ValidationException
from collab_chat.core.logging import get_logger
from collab_chat.database.base import KeyValueStore
from collab_chat.models.base import LAST_MODIFIED
from collab_chat.models.messages import CHAT_ROOM_ID
from collab_chat.schemas.message import ChatMessageInput
from collab_chat.schemas.notification import Notification
from collab_chat.services.chat_room_service import ChatRoomRepository
from collab_chat.services.message_service import ChatMessageRepository
from collab_chat.utils.identifiers import CHATROOM, MESSAGE, RESOURCE_KINDS, USER, kind_prefix

logger = get_logger(__name__)


def build_links(base_url: str, kind: str, parent_resource_id: str, sub_resource_id: Optional[str] = None) -> List[str]:
    """리소스 종류별 조회 링크"""
    base = base_url.rstrip("/")
    if kind == USER:
        return [f"{base}/users/{parent_resource_id}"]
    if kind == CHATROOM:
        return [f"{base}/chatrooms/{parent_resource_id}"]
    return [f"{base}/chatrooms/{parent_resource_id}/chatmessages/{sub_resource_id}"]


class NotificationService:
    """변경 알림 서비스"""

    def __init__(
        self,
        store: KeyValueStore,
        chat_rooms: ChatRoomRepository,
        messages: ChatMessageRepository,
        base_url: str
    ):
        self.store = store
        self.chat_rooms = chat_rooms
        self.messages = messages
        self.base_url = base_url

    def _notification(
        self,
        kind: str,
        timestamp: int,
        parent_resource_id: str,
        sub_resource_id: Optional[str] = None
    ) -> Notification:
        return Notification(
            timestamp=timestamp,
            parent_resource_id=parent_resource_id,
            sub_resource_id=sub_resource_id,
            links=build_links(self.base_url, kind, parent_resource_id, sub_resource_id),
        )

    async def _required_field(self, key: str, name: str) -> str:
        value = await self.store.get_field(key, name)
        if value is None or value == "":
            raise CorruptRecordException(key, name)
        return value

    async def check_for_new_events(self, since: int) -> List[Notification]:
        """
        since 이후 변경된 모든 리소스의 알림 목록

        - 리소스 종류별 전체 접두사 스캔 (O(전체 키 수))
        - timestamp는 레코드의 lastmodified 값 (다음 폴링의 watermark로 사용)
        - 메시지는 parent=채팅방 ID, sub=메시지 ID
        - 메시지 lastmodified는 생성 후 변경되지 않으므로 읽음 표시 변경은
          알림에 나타나지 않음 (메시지/채팅방 재조회로만 확인 가능)
        """
        notifications = []

        for kind in RESOURCE_KINDS:
            for key in await self.store.scan_keys(kind_prefix(kind)):
                raw = await self._required_field(key, LAST_MODIFIED)
                try:
                    modified = int(raw)
                except ValueError:
                    raise CorruptRecordException(key, LAST_MODIFIED)

                if modified <= since:
                    continue

                if kind == MESSAGE:
                    chat_room_id = await self._required_field(key, CHAT_ROOM_ID)
                    notifications.append(self._notification(kind, modified, chat_room_id, key))
                else:
                    notifications.append(self._notification(kind, modified, key))

        notifications.sort(key=lambda n: (n.timestamp, n.parent_resource_id, n.sub_resource_id or ""))

        logger.debug(f"Polling since {since}: {len(notifications)} change(s)")
        return notifications

    async def simulate_activity(
        self,
        chat_room_id: str,
        count: int,
        caller_id: Optional[str] = None
    ) -> List[Notification]:
        """
        상대방의 메시지 전송을 흉내내는 테스트 트리거

        caller_id가 없으면 초대된 참여자, 있으면 caller의 상대방 명의로
        읽지 않은 메시지를 count개 생성합니다.
        """
        if count < 0:
            raise ValidationException("num must not be negative")

        creator_id, participant_id = await self.messages.chat_room_members(chat_room_id)
        if caller_id is None:
            from_participant_id = participant_id
        else:
            from_participant_id = await self.chat_rooms.other_participant_id(chat_room_id, caller_id)

        notifications = []
        for i in range(count):
            message = await self.messages.create(chat_room_id, ChatMessageInput(
                from_participant_id=from_participant_id,
                message=f"Test Message {i} for chatroom id: {chat_room_id}",
                read_receipt=False,
            ))
            notifications.append(self._notification(
                MESSAGE, message.last_modified, chat_room_id, message.chat_message_id
            ))

        logger.info(f"Simulated {count} message(s) in {chat_room_id} from {from_participant_id}")
        return notifications
