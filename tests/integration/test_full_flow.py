import pytest
from httpx import AsyncClient
from fastapi import status


async def create_user(client: AsyncClient, first_name: str, nickname: str) -> dict:
    response = await client.post("/users", json={"firstName": first_name, "lastName": "Test", "nickname": nickname})
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


class TestFullChatFlow:
    """전체 채팅 플로우 통합 테스트"""

    @pytest.mark.asyncio
    async def test_complete_chat_flow(self, client: AsyncClient):
        """
        완전한 채팅 플로우 테스트:
        1. 사용자 A, B 생성
        2. A가 B와 채팅방 생성
        3. A가 메시지 전송 (안읽음)
        4. 읽음 표시 후 안읽음 요청 -> 읽음 유지
        5. 폴링으로 변경 사항 확인
        """

        # 1. 사용자 A, B 생성
        user_a = await create_user(client, "Alice", "alice")
        user_b = await create_user(client, "Bob", "bob")
        assert user_a["userID"].startswith("USER:")

        # 2. 채팅방 생성
        response = await client.post("/chatrooms", json={
            "chatRoomID": "CHATROOM:client-made",
            "topic": "t1",
            "participants": [{"userID": user_a["userID"]}, {"userID": user_b["userID"]}]
        })
        assert response.status_code == status.HTTP_201_CREATED
        room = response.json()
        room_id = room["chatRoomID"]
        assert room_id != "CHATROOM:client-made"
        assert [p["userID"] for p in room["participants"]] == [user_a["userID"], user_b["userID"]]
        assert room["messages"] == []

        # 3. 메시지 전송
        response = await client.post(f"/chatrooms/{room_id}/chatmessages", json={
            "fromParticipantID": user_a["userID"],
            "message": "hi"
        })
        assert response.status_code == status.HTTP_201_CREATED
        message = response.json()
        message_id = message["chatMessageID"]
        assert message_id.startswith(f"MESSAGE:{room_id}:")
        assert message["readReceipt"] is False

        # 4. 읽음 표시 -> 안읽음 요청
        url = f"/chatrooms/{room_id}/chatmessages/{message_id}"
        response = await client.put(url, json={"readReceipt": True})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["readReceipt"] is True

        response = await client.put(url, json={"readReceipt": False})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["readReceipt"] is True

        response = await client.get(url)
        assert response.json()["readReceipt"] is True
        assert response.json()["lastModified"] == message["lastModified"]

        # 채팅방 재조회 시 메시지 포함
        response = await client.get(f"/chatrooms/{room_id}")
        assert [m["chatMessageID"] for m in response.json()["messages"]] == [message_id]

        # 5. 폴링
        response = await client.get("/notifications", params={"since": 0})
        assert response.status_code == status.HTTP_200_OK
        notifications = response.json()
        assert len(notifications) == 4
        message_notifications = [n for n in notifications if n["subResourceID"] == message_id]
        assert message_notifications[0]["parentResourceID"] == room_id
        assert message_notifications[0]["links"][0].endswith(f"/chatrooms/{room_id}/chatmessages/{message_id}")

        watermark = max(n["timestamp"] for n in notifications)
        response = await client.get("/notifications", params={"since": watermark})
        assert response.json() == []


class TestUserAPI:
    """사용자 API 테스트"""

    @pytest.mark.asyncio
    async def test_update_nickname_only(self, client: AsyncClient):
        user = await create_user(client, "Alice", "alice")

        response = await client.put(f"/users/{user['userID']}", json={
            "userID": "USER:other",
            "firstName": "Changed",
            "nickname": "ally"
        })

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["userID"] == user["userID"]
        assert data["firstName"] == "Alice"
        assert data["nickname"] == "ally"

    @pytest.mark.asyncio
    async def test_get_user_not_found(self, client: AsyncClient):
        response = await client.get("/users/USER:missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"] == "resource_not_found"
        assert "not found" in response.json()["message"].lower()

    @pytest.mark.asyncio
    async def test_create_test_users(self, client: AsyncClient):
        response = await client.post("/users", params={"test": "true", "num": 3})

        assert response.status_code == status.HTTP_201_CREATED
        assert len(response.json()) == 3

        response = await client.get("/users")
        assert len(response.json()) == 3


class TestChatRoomAPI:
    """채팅방 API 테스트"""

    @pytest.mark.asyncio
    async def test_create_with_one_participant(self, client: AsyncClient):
        user = await create_user(client, "Alice", "alice")

        response = await client.post("/chatrooms", json={"topic": "t1", "participants": [{"userID": user["userID"]}]})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_create_with_unknown_user(self, client: AsyncClient):
        user = await create_user(client, "Alice", "alice")

        response = await client.post("/chatrooms", json={
            "topic": "t1",
            "participants": [{"userID": user["userID"]}, {"userID": "USER:nobody"}]
        })

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_list_filtered_by_user_and_update_topic(self, client: AsyncClient):
        user_a = await create_user(client, "Alice", "alice")
        user_b = await create_user(client, "Bob", "bob")
        user_c = await create_user(client, "Carol", "carol")

        response = await client.post("/chatrooms", json={
            "topic": "t1",
            "participants": [{"userID": user_a["userID"]}, {"userID": user_b["userID"]}]
        })
        room_id = response.json()["chatRoomID"]

        response = await client.get("/chatrooms", params={"userid": user_c["userID"]})
        assert response.json() == []

        response = await client.get("/chatrooms", params={"userid": user_b["userID"]})
        assert [r["chatRoomID"] for r in response.json()] == [room_id]

        response = await client.put(f"/chatrooms/{room_id}", json={"topic": "t2"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["topic"] == "t2"

    @pytest.mark.asyncio
    async def test_message_from_outsider(self, client: AsyncClient):
        user_a = await create_user(client, "Alice", "alice")
        user_b = await create_user(client, "Bob", "bob")
        user_c = await create_user(client, "Carol", "carol")

        response = await client.post("/chatrooms", json={
            "topic": "t1",
            "participants": [{"userID": user_a["userID"]}, {"userID": user_b["userID"]}]
        })
        room_id = response.json()["chatRoomID"]

        response = await client.post(f"/chatrooms/{room_id}/chatmessages", json={
            "fromParticipantID": user_c["userID"],
            "message": "hi"
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"] == "business_logic_error"

    @pytest.mark.asyncio
    async def test_messages_of_missing_room(self, client: AsyncClient):
        response = await client.get("/chatrooms/CHATROOM:missing/chatmessages")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestNotificationAPI:
    """알림 API 테스트"""

    @pytest.mark.asyncio
    async def test_simulated_activity(self, client: AsyncClient):
        user_a = await create_user(client, "Alice", "alice")
        user_b = await create_user(client, "Bob", "bob")
        response = await client.post("/chatrooms", json={
            "topic": "t1",
            "participants": [{"userID": user_a["userID"]}, {"userID": user_b["userID"]}]
        })
        room_id = response.json()["chatRoomID"]

        response = await client.get("/notifications", params={"chatroomID": room_id, "test": "true", "num": 2})
        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()) == 2

        response = await client.post(f"/chatrooms/{room_id}/chatmessages", params={"test": "true", "num": 1})
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()[0]["fromParticipantID"] == user_b["userID"]

        response = await client.get(f"/chatrooms/{room_id}/chatmessages")
        assert len(response.json()) == 3

    @pytest.mark.asyncio
    async def test_test_mode_requires_room(self, client: AsyncClient):
        response = await client.get("/notifications", params={"test": "true"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_no_changes_without_watermark(self, client: AsyncClient):
        response = await client.get("/notifications")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []


class TestHealthAPI:

    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.json()["status"] == "healthy"

        response = await client.get("/health/ready")
        assert response.json() == {"status": "ready"}
