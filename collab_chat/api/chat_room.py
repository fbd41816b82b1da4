from typing import List, Optional, Union
from fastapi import APIRouter, Depends, Query, status

from collab_chat.api.dependencies import (
    get_chat_room_repository,
    get_message_repository,
    get_notification_service,
    get_settings,
)
from collab_chat.core.config import Settings
from collab_chat.core.logging import get_logger
from collab_chat.schemas.chat_room import ChatRoom, ChatRoomInput
from collab_chat.schemas.message import ChatMessage, ChatMessageInput
from collab_chat.services.chat_room_service import ChatRoomRepository
from collab_chat.services.message_service import ChatMessageRepository
from collab_chat.services.notification_service import NotificationService

logger = get_logger(__name__)

router = APIRouter(prefix="/chatrooms", tags=["Chat Rooms"])


# =============================================================================
# Chat Rooms
# =============================================================================

@router.get("", response_model=List[ChatRoom])
async def list_chat_rooms(
    userid: Optional[str] = Query(default=None, description="해당 사용자가 참여한 채팅방만 조회"),
    chat_rooms: ChatRoomRepository = Depends(get_chat_room_repository)
) -> List[ChatRoom]:
    """채팅방 목록 조회 (참여자, 메시지 포함)"""
    return await chat_rooms.list_all(user_id=userid)


@router.post("", response_model=ChatRoom, status_code=status.HTTP_201_CREATED)
async def create_chat_room(
    room_input: ChatRoomInput,
    chat_rooms: ChatRoomRepository = Depends(get_chat_room_repository)
) -> ChatRoom:
    """
    1:1 채팅방 생성

    - **topic**: 채팅방 주제
    - **participants**: `[{"userID": 생성자}, {"userID": 상대방}]`

    chatRoomID는 시스템이 발급하며 요청 본문의 messages는 무시됩니다.
    """
    return await chat_rooms.create(room_input)


@router.get("/{chat_room_id}", response_model=ChatRoom)
async def get_chat_room(
    chat_room_id: str,
    chat_rooms: ChatRoomRepository = Depends(get_chat_room_repository)
) -> ChatRoom:
    """채팅방 상세 조회 (참여자와 메시지를 조회 시점에 구성)"""
    return await chat_rooms.retrieve(chat_room_id)


@router.put("/{chat_room_id}", response_model=ChatRoom)
async def update_chat_room(
    chat_room_id: str,
    room_input: ChatRoomInput,
    chat_rooms: ChatRoomRepository = Depends(get_chat_room_repository)
) -> ChatRoom:
    """
    채팅방 수정

    - **topic**: 수정 가능한 유일한 필드
    """
    return await chat_rooms.update(chat_room_id, room_input)


# =============================================================================
# Chat Messages
# =============================================================================

@router.get("/{chat_room_id}/chatmessages", response_model=List[ChatMessage])
async def list_chat_messages(
    chat_room_id: str,
    messages: ChatMessageRepository = Depends(get_message_repository)
) -> List[ChatMessage]:
    """채팅방의 전체 메시지 조회 (작성 시각순, 페이징 없음)"""
    await messages.chat_room_members(chat_room_id)
    return await messages.list_all(chat_room_id)


@router.post(
    "/{chat_room_id}/chatmessages",
    response_model=Union[ChatMessage, List[ChatMessage]],
    status_code=status.HTTP_201_CREATED
)
async def create_chat_message(
    chat_room_id: str,
    message_input: Optional[ChatMessageInput] = None,
    test: bool = Query(default=False, description="true면 상대방 명의의 테스트 메시지 생성"),
    num: Optional[int] = Query(default=None, ge=0, description="생성할 테스트 메시지 수"),
    messages: ChatMessageRepository = Depends(get_message_repository),
    notifications: NotificationService = Depends(get_notification_service),
    config: Settings = Depends(get_settings)
) -> Union[ChatMessage, List[ChatMessage]]:
    """
    메시지 전송

    - **fromParticipantID**: 발신자 ID (채팅방 참여자여야 함)
    - **message**: 메시지 내용
    - **readReceipt**: 무시됨 (새 메시지는 항상 안읽음 상태)

    `?test=true&num=N` 이면 초대된 참여자 명의로 테스트 메시지 N개를 생성합니다.
    """
    if test:
        count = num if num is not None else config.simulate_default_count
        logger.info(f"Test parameter set. Creating {count} test messages in {chat_room_id}")
        created = await notifications.simulate_activity(chat_room_id, count)
        return [
            await messages.retrieve(notification.sub_resource_id)
            for notification in created
        ]

    return await messages.create(chat_room_id, message_input or ChatMessageInput())


@router.get("/{chat_room_id}/chatmessages/{chat_message_id}", response_model=ChatMessage)
async def get_chat_message(
    chat_room_id: str,
    chat_message_id: str,
    messages: ChatMessageRepository = Depends(get_message_repository)
) -> ChatMessage:
    """메시지 조회"""
    return await messages.retrieve(chat_message_id, chat_room_id=chat_room_id)


@router.put("/{chat_room_id}/chatmessages/{chat_message_id}", response_model=ChatMessage)
async def update_chat_message(
    chat_room_id: str,
    chat_message_id: str,
    message_input: ChatMessageInput,
    messages: ChatMessageRepository = Depends(get_message_repository)
) -> ChatMessage:
    """
    읽음 표시

    - **readReceipt**: true만 반영 (읽음 -> 안읽음 요청은 무시되고 현재 상태 반환)
    """
    return await messages.update(chat_message_id, message_input, chat_room_id=chat_room_id)
