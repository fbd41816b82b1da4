import logging

import pytest

from collab_chat.core.errors import ResourceNotFoundException
from collab_chat.schemas.user import UserInput


class TestUserRepository:
    """사용자 저장소 테스트"""

    @pytest.mark.asyncio
    async def test_create_then_retrieve(self, user_repository):
        """생성 결과와 재조회 결과가 동일"""
        created = await user_repository.create(
            UserInput(user_id="USER:mine", first_name="Alice", last_name="Kim", nickname="alice")
        )

        assert created.user_id != "USER:mine"
        assert created.user_id.startswith("USER:")
        assert await user_repository.retrieve(created.user_id) == created

    @pytest.mark.asyncio
    async def test_retrieve_not_found(self, user_repository):
        with pytest.raises(ResourceNotFoundException):
            await user_repository.retrieve("USER:does-not-exist")

    @pytest.mark.asyncio
    async def test_retrieve_wrong_kind(self, user_repository, test_chat_room):
        """다른 종류의 ID로는 사용자 조회 불가"""
        with pytest.raises(ResourceNotFoundException):
            await user_repository.retrieve(test_chat_room.chat_room_id)

    @pytest.mark.asyncio
    async def test_update_nickname_only(self, user_repository, test_user_1, caplog):
        """nickname 외 변경은 무시되고 INFO 로그만 남김"""
        with caplog.at_level(logging.INFO):
            updated = await user_repository.update(
                test_user_1.user_id,
                UserInput(user_id="USER:other", first_name="Changed", nickname="ally")
            )

        assert updated.user_id == test_user_1.user_id
        assert updated.first_name == "Alice"
        assert updated.nickname == "ally"
        assert "Ignoring immutable user fields" in caplog.text

    @pytest.mark.asyncio
    async def test_update_is_idempotent(self, user_repository, test_user_1):
        first = await user_repository.update(test_user_1.user_id, UserInput(nickname="ally"))
        second = await user_repository.update(test_user_1.user_id, UserInput(nickname="ally"))

        assert first == second

    @pytest.mark.asyncio
    async def test_update_not_found(self, user_repository):
        with pytest.raises(ResourceNotFoundException):
            await user_repository.update("USER:missing", UserInput(nickname="x"))

    @pytest.mark.asyncio
    async def test_list_all(self, user_repository, test_user_1, test_user_2):
        users = await user_repository.list_all()

        assert {u.user_id for u in users} == {test_user_1.user_id, test_user_2.user_id}

    @pytest.mark.asyncio
    async def test_find_returns_none(self, user_repository):
        assert await user_repository.find("USER:missing") is None
        assert await user_repository.find("not-an-id") is None

    @pytest.mark.asyncio
    async def test_create_test_users(self, user_repository):
        users = await user_repository.create_test_users(3)

        assert len(users) == 3
        assert users[0].first_name == "Test User First Name0"
        assert len({u.user_id for u in users}) == 3
        assert len(await user_repository.list_all()) == 3
