"""Pydantic request/response schemas for the Messaging API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Request Schemas ---


class StartChatRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"sender_id": "user-123", "product_id": "prod-456"}]},
        "populate_by_name": True,
    }

    sender_id: str = Field(..., alias="senderId")
    recipient_id: str | None = Field(None, alias="recipientId")
    product_id: str = Field(..., alias="productId")


class SendMessageRequest(BaseModel):
    model_config = {
        "json_schema_extra": {"examples": [{"chat_id": "chat-001", "content": "Is this still available?"}]},
        "populate_by_name": True,
    }

    chat_id: str = Field(..., alias="chatId")
    sender_id: str | None = Field(None, alias="senderId")
    content: str | None = None


class SubmitContactRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Lan Nguyen",
                    "email": "lan@example.com",
                    "phone": "+84 90 000 0000",
                    "title": "Wholesale order",
                    "message": "Do you offer discounts for orders over 50 units?",
                }
            ]
        }
    }

    name: str = Field(..., max_length=150)
    email: str = Field(..., max_length=254)
    phone: str | None = Field(None, max_length=30)
    title: str | None = Field(None, max_length=255)
    message: str
    user_id: str | None = None


# --- Response Schemas ---


class MessageResponse(BaseModel):
    id: str
    sender_id: str
    content: str
    sent_at: datetime
    is_read: bool = False


class ChatSessionResponse(BaseModel):
    id: str
    participants: list[str]
    buyer_id: str
    recipient_id: str
    product_id: str
    messages: list[MessageResponse] = Field(default_factory=list)
    created_at: datetime | None = None
    last_message_at: datetime | None = None


class ChatPageResponse(BaseModel):
    sessions: list[ChatSessionResponse] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 20


class InboxEntryResponse(BaseModel):
    session_id: str
    counterpart_id: str
    product_id: str
    last_message: str | None = None
    last_sender_id: str | None = None
    last_message_at: datetime | None = None
    message_count: int = 0
    unread_count: int = 0


class ReadReceiptResponse(BaseModel):
    session_id: str
    read_count: int


class ContactResponse(BaseModel):
    id: str
    user_id: str | None = None
    name: str
    email: str
    phone: str | None = None
    title: str | None = None
    message: str
    created_at: datetime | None = None
