"""Integration tests for the chat and contact HTTP endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from messaging.api import chat_router, contact_router
from messaging.realtime import get_hub
from shared.http import register_exception_handlers


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(chat_router)
    app.include_router(contact_router)
    return TestClient(app)


def _start_chat(client, sender_id="buyer-1", product_id="prod-1"):
    response = client.post("/chats", json={"senderId": sender_id, "productId": product_id})
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


class TestChatEndpoints:
    def test_start_chat(self, client):
        response = client.post("/chats", json={"senderId": "buyer-1", "productId": "prod-1"})

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["participants"] == ["buyer-1", "admin"]
        assert body["data"]["messages"] == []

    def test_start_chat_requires_product(self, client):
        response = client.post("/chats", json={"senderId": "buyer-1"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_send_message_with_caller_header(self, client):
        chat_id = _start_chat(client)

        response = client.post(
            "/chats/messages",
            json={"chatId": chat_id, "content": "Is this still available?"},
            headers={"X-User-Id": "buyer-1"},
        )

        assert response.status_code == 200
        messages = response.json()["data"]["messages"]
        assert [m["content"] for m in messages] == ["Is this still available?"]
        assert messages[0]["sender_id"] == "buyer-1"

    def test_send_message_without_sender_is_401(self, client):
        chat_id = _start_chat(client)
        response = client.post("/chats/messages", json={"chatId": chat_id, "content": "hello"})
        assert response.status_code == 401

    def test_outsider_cannot_post(self, client):
        chat_id = _start_chat(client)
        response = client.post(
            "/chats/messages",
            json={"chatId": chat_id, "senderId": "stranger", "content": "hello"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Only participants can post in this chat"

    def test_unknown_chat_is_404(self, client):
        assert client.get("/chats/missing").status_code == 404

    def test_list_for_product_and_user(self, client):
        _start_chat(client, product_id="prod-1")
        _start_chat(client, product_id="prod-1")
        _start_chat(client, product_id="prod-2")

        response = client.get("/chats", params={"productId": "prod-1", "userId": "buyer-1", "limit": 1})

        data = response.json()["data"]
        assert data["total"] == 2
        assert len(data["sessions"]) == 1

    def test_list_for_user(self, client):
        _start_chat(client, sender_id="buyer-1")
        _start_chat(client, sender_id="buyer-2")

        data = client.get("/chats/user/buyer-1").json()["data"]
        assert len(data) == 1

    def test_inbox_and_read_receipt(self, client):
        chat_id = _start_chat(client)
        client.post("/chats/messages", json={"chatId": chat_id, "senderId": "admin", "content": "Hi!"})

        inbox = client.get("/chats/inbox/buyer-1").json()["data"]
        assert inbox[0]["unread_count"] == 1
        assert inbox[0]["counterpart_id"] == "admin"

        receipt = client.post(f"/chats/{chat_id}/read", headers={"X-User-Id": "buyer-1"})
        assert receipt.json()["data"] == {"session_id": chat_id, "read_count": 1}
        assert client.get("/chats/inbox/buyer-1").json()["data"][0]["unread_count"] == 0

    def test_read_receipt_requires_caller(self, client):
        chat_id = _start_chat(client)
        assert client.post(f"/chats/{chat_id}/read").status_code == 401


class TestChatSocket:
    def test_message_is_delivered_live(self, client):
        chat_id = _start_chat(client)

        with client.websocket_connect("/chats/ws") as socket:
            socket.send_json({"event": "user_connected", "data": "admin"})
            assert socket.receive_json() == {"event": "connected", "data": {"user_id": "admin"}}

            client.post(
                "/chats/messages",
                json={"chatId": chat_id, "content": "Do you ship abroad?"},
                headers={"X-User-Id": "buyer-1"},
            )

            frame = socket.receive_json()
            assert frame["event"] == "receive-message"
            assert frame["data"]["session_id"] == chat_id
            assert frame["data"]["message"]["content"] == "Do you ship abroad?"

    def test_join_and_leave_are_acknowledged(self, client):
        with client.websocket_connect("/chats/ws") as socket:
            socket.send_json({"event": "join-session", "data": "chat-1"})
            assert socket.receive_json() == {"event": "joined", "data": {"session_id": "chat-1"}}

            socket.send_json({"event": "leave-session", "data": "chat-1"})
            assert socket.receive_json() == {"event": "left", "data": {"session_id": "chat-1"}}

    def test_unknown_frame_gets_error(self, client):
        with client.websocket_connect("/chats/ws") as socket:
            socket.send_json({"event": "shout", "data": "hi"})
            assert socket.receive_json()["event"] == "error"

    def test_malformed_frame_keeps_socket_open(self, client):
        with client.websocket_connect("/chats/ws") as socket:
            socket.send_text("not json")
            assert socket.receive_json() == {"event": "error", "data": {"message": "Frames must be JSON objects"}}

            socket.send_json({"event": "user_connected", "data": "buyer-1"})
            assert socket.receive_json() == {"event": "connected", "data": {"user_id": "buyer-1"}}

    def test_closed_socket_is_unregistered(self, client):
        with client.websocket_connect("/chats/ws") as socket:
            socket.send_json({"event": "user_connected", "data": "buyer-1"})
            socket.receive_json()
            assert get_hub().connection_count == 1

        assert get_hub().connection_count == 0


class TestContactEndpoints:
    def test_submit_and_list(self, client):
        response = client.post(
            "/contacts",
            json={"name": "Lan Nguyen", "email": "lan@example.com", "message": "Bulk discounts?"},
            headers={"X-User-Id": "user-7"},
        )

        assert response.status_code == 201
        assert response.json()["data"]["user_id"] == "user-7"

        listed = client.get("/contacts").json()["data"]
        assert [c["email"] for c in listed] == ["lan@example.com"]

    def test_invalid_email_is_400(self, client):
        response = client.post(
            "/contacts",
            json={"name": "Lan", "email": "nope", "message": "Hello"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Email address is not valid"
