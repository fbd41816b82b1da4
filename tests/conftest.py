import os

# 테스트는 인메모리 저장소 사용, 로그 파일 생성 안함
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
import pytest_asyncio
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport

from collab_chat.main import app
from collab_chat.api.dependencies import get_store
from collab_chat.database.memory import InMemoryStore
from collab_chat.schemas.chat_room import ChatRoom, ChatRoomInput, ParticipantRef
from collab_chat.schemas.user import User, UserInput
from collab_chat.services.chat_room_service import ChatRoomRepository
from collab_chat.services.message_service import ChatMessageRepository
from collab_chat.services.notification_service import NotificationService
from collab_chat.services.user_service import UserRepository


TEST_BASE_URL = "http://test"


@pytest.fixture
def store() -> InMemoryStore:
    """테스트용 인메모리 키-값 저장소"""
    return InMemoryStore()


@pytest.fixture
def user_repository(store) -> UserRepository:
    return UserRepository(store)


@pytest.fixture
def message_repository(store) -> ChatMessageRepository:
    return ChatMessageRepository(store)


@pytest.fixture
def chat_room_repository(store, user_repository, message_repository) -> ChatRoomRepository:
    return ChatRoomRepository(store, user_repository, message_repository)


@pytest.fixture
def notification_service(store, chat_room_repository, message_repository) -> NotificationService:
    return NotificationService(store, chat_room_repository, message_repository, TEST_BASE_URL)


@pytest_asyncio.fixture
async def test_user_1(user_repository) -> User:
    """테스트용 사용자 1 (채팅방 생성자)"""
    return await user_repository.create(UserInput(first_name="Alice", last_name="Kim", nickname="alice"))


@pytest_asyncio.fixture
async def test_user_2(user_repository) -> User:
    """테스트용 사용자 2 (초대된 참여자)"""
    return await user_repository.create(UserInput(first_name="Bob", last_name="Lee", nickname="bob"))


@pytest_asyncio.fixture
async def test_user_3(user_repository) -> User:
    """테스트용 사용자 3 (채팅방 외부인)"""
    return await user_repository.create(UserInput(first_name="Carol", last_name="Park", nickname="carol"))


@pytest_asyncio.fixture
async def test_chat_room(chat_room_repository, test_user_1, test_user_2) -> ChatRoom:
    """테스트용 1:1 채팅방 (user_1 -> user_2)"""
    return await chat_room_repository.create(ChatRoomInput(
        topic="t1",
        participants=[
            ParticipantRef(user_id=test_user_1.user_id),
            ParticipantRef(user_id=test_user_2.user_id),
        ]
    ))


@pytest_asyncio.fixture
async def client(store) -> AsyncGenerator[AsyncClient, None]:
    """테스트용 비동기 HTTP 클라이언트"""
    app.dependency_overrides[get_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=TEST_BASE_URL) as client:
        yield client

    app.dependency_overrides.clear()


def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )
