"""
Request-scoped dependencies.

저장소 핸들은 lifespan에서 생성되어 app.state에 보관되고,
요청마다 저장소 객체에 명시적으로 전달됩니다.
"""

from fastapi import Depends, Request

from collab_chat.core.config import Settings, settings as default_settings
from collab_chat.core.errors import StoreUnavailableException
from collab_chat.database.base import KeyValueStore
from collab_chat.services.chat_room_service import ChatRoomRepository
from collab_chat.services.message_service import ChatMessageRepository
from collab_chat.services.notification_service import NotificationService
from collab_chat.services.user_service import UserRepository


def get_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", default_settings)


def get_store(request: Request) -> KeyValueStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreUnavailableException("Key-value store is not initialized")
    return store


def get_user_repository(store: KeyValueStore = Depends(get_store)) -> UserRepository:
    return UserRepository(store)


def get_message_repository(store: KeyValueStore = Depends(get_store)) -> ChatMessageRepository:
    return ChatMessageRepository(store)


def get_chat_room_repository(
    store: KeyValueStore = Depends(get_store),
    users: UserRepository = Depends(get_user_repository),
    messages: ChatMessageRepository = Depends(get_message_repository)
) -> ChatRoomRepository:
    return ChatRoomRepository(store, users, messages)


def get_notification_service(
    store: KeyValueStore = Depends(get_store),
    chat_rooms: ChatRoomRepository = Depends(get_chat_room_repository),
    messages: ChatMessageRepository = Depends(get_message_repository),
    config: Settings = Depends(get_settings)
) -> NotificationService:
    return NotificationService(store, chat_rooms, messages, config.public_base_url)
