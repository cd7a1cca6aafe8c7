"""FastAPI routes for the Messaging domain.

REST endpoints persist and read chat history; ``/chats/ws`` is the live
channel. Clients reconcile from ``GET /chats/user/{user_id}`` whenever they
(re)connect, since live frames may be missed.
"""

import asyncio
import contextlib

import structlog
from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from protean.utils.globals import current_domain

from messaging.api.schemas import (
    ChatPageResponse,
    ChatSessionResponse,
    ContactResponse,
    InboxEntryResponse,
    MessageResponse,
    ReadReceiptResponse,
    SendMessageRequest,
    StartChatRequest,
    SubmitContactRequest,
)
from messaging.chat.sending import MarkSessionRead, SendMessage
from messaging.chat.session import ChatSession
from messaging.chat.starting import StartChatSession
from messaging.contact.contact_message import ContactMessage
from messaging.contact.submission import SubmitContactMessage
from messaging.projections.chat_inbox import ChatInbox
from messaging.realtime import get_hub
from shared.http import AuthenticationError, Envelope, current_user_id, ok, require_user_id

logger = structlog.get_logger(__name__)

chat_router = APIRouter(prefix="/chats", tags=["chats"])
contact_router = APIRouter(prefix="/contacts", tags=["contacts"])


def _session_response(session: ChatSession) -> ChatSessionResponse:
    return ChatSessionResponse(
        id=str(session.id),
        participants=session.participants,
        buyer_id=str(session.buyer_id),
        recipient_id=str(session.recipient_id),
        product_id=str(session.product_id),
        messages=[
            MessageResponse(
                id=str(m.id),
                sender_id=str(m.sender_id),
                content=m.content,
                sent_at=m.sent_at,
                is_read=bool(m.is_read),
            )
            for m in session.ordered_messages()
        ],
        created_at=session.created_at,
        last_message_at=session.last_message_at,
    )


def _load_session(session_id: str) -> ChatSessionResponse:
    return _session_response(current_domain.repository_for(ChatSession).get(session_id))


# ---------------------------------------------------------------------------
# Chat sessions
# ---------------------------------------------------------------------------
@chat_router.post("", status_code=201, response_model=Envelope[ChatSessionResponse])
async def start_chat(body: StartChatRequest) -> dict:
    command = StartChatSession(
        sender_id=body.sender_id,
        recipient_id=body.recipient_id,
        product_id=body.product_id,
    )
    session_id = current_domain.process(command, asynchronous=False)
    return ok(_load_session(session_id), "Chat started")


@chat_router.get("", response_model=Envelope[ChatPageResponse])
async def list_chats_for_product(
    product_id: str = Query(..., alias="productId"),
    user_id: str = Query(..., alias="userId"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> dict:
    """Sessions about one product that the user takes part in, newest activity first."""
    sessions = current_domain.repository_for(ChatSession).for_product_and_user(product_id, user_id)
    offset = (page - 1) * limit
    return ok(
        ChatPageResponse(
            sessions=[_session_response(s) for s in sessions[offset : offset + limit]],
            total=len(sessions),
            page=page,
            limit=limit,
        ),
        "Chats fetched",
    )


@chat_router.post("/messages", response_model=Envelope[ChatSessionResponse])
async def send_message(body: SendMessageRequest, caller_id: str | None = Depends(current_user_id)) -> dict:
    sender_id = caller_id or body.sender_id
    if not sender_id:
        raise AuthenticationError()

    command = SendMessage(session_id=body.chat_id, sender_id=sender_id, content=body.content)
    current_domain.process(command, asynchronous=False)
    return ok(_load_session(body.chat_id), "Message sent")


@chat_router.get("/user/{user_id}", response_model=Envelope[list[ChatSessionResponse]])
async def list_chats_for_user(user_id: str) -> dict:
    sessions = current_domain.repository_for(ChatSession).for_user(user_id)
    return ok([_session_response(s) for s in sessions], "Chats fetched")


@chat_router.get("/inbox/{user_id}", response_model=Envelope[list[InboxEntryResponse]])
async def inbox(user_id: str) -> dict:
    entries = current_domain.repository_for(ChatInbox)._dao.query.filter(user_id=user_id).all().items
    entries = sorted(entries, key=lambda e: e.last_message_at or e.started_at, reverse=True)
    return ok(
        [
            InboxEntryResponse(
                session_id=str(e.session_id),
                counterpart_id=str(e.counterpart_id),
                product_id=str(e.product_id),
                last_message=e.last_message,
                last_sender_id=str(e.last_sender_id) if e.last_sender_id else None,
                last_message_at=e.last_message_at,
                message_count=e.message_count or 0,
                unread_count=e.unread_count or 0,
            )
            for e in entries
        ],
        "Inbox fetched",
    )


@chat_router.get("/{session_id}", response_model=Envelope[ChatSessionResponse])
async def get_chat(session_id: str) -> dict:
    return ok(_load_session(session_id), "Chat fetched")


@chat_router.post("/{session_id}/read", response_model=Envelope[ReadReceiptResponse])
async def mark_read(session_id: str, reader_id: str = Depends(require_user_id)) -> dict:
    count = current_domain.process(MarkSessionRead(session_id=session_id, reader_id=reader_id), asynchronous=False)
    return ok(ReadReceiptResponse(session_id=session_id, read_count=count), "Messages marked as read")


# ---------------------------------------------------------------------------
# Live channel
# ---------------------------------------------------------------------------
async def _pump(websocket: WebSocket, queue: asyncio.Queue) -> None:
    while True:
        frame = await queue.get()
        await websocket.send_json(frame)


@chat_router.websocket("/ws")
async def chat_socket(websocket: WebSocket) -> None:
    """Frames are ``{"event": ..., "data": ...}``.

    Client events: ``user_connected`` (user id), ``join-session`` and
    ``leave-session`` (session id). Server events: ``receive-message`` plus
    an acknowledgement for each client event.
    """
    await websocket.accept()
    hub = get_hub()
    connection = hub.connect()
    sender = asyncio.create_task(_pump(websocket, connection.queue))

    try:
        while True:
            try:
                frame = await websocket.receive_json()
            except ValueError:
                hub.send(connection, "error", {"message": "Frames must be JSON objects"})
                continue
            event = frame.get("event") if isinstance(frame, dict) else None
            data = frame.get("data") if isinstance(frame, dict) else None

            if event == "user_connected" and data:
                hub.identify(connection, data)
                hub.send(connection, "connected", {"user_id": str(data)})
            elif event == "join-session" and data:
                hub.join(connection, data)
                hub.send(connection, "joined", {"session_id": str(data)})
            elif event == "leave-session" and data:
                hub.leave(connection, data)
                hub.send(connection, "left", {"session_id": str(data)})
            else:
                hub.send(connection, "error", {"message": f"Unsupported frame: {event!r}"})
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(connection)
        sender.cancel()
        with contextlib.suppress(asyncio.CancelledError, Exception):
            await sender


# ---------------------------------------------------------------------------
# Contact messages
# ---------------------------------------------------------------------------
def _contact_response(contact: ContactMessage) -> ContactResponse:
    return ContactResponse(
        id=str(contact.id),
        user_id=str(contact.user_id) if contact.user_id else None,
        name=contact.name,
        email=contact.email,
        phone=contact.phone,
        title=contact.title,
        message=contact.message,
        created_at=contact.created_at,
    )


@contact_router.post("", status_code=201, response_model=Envelope[ContactResponse])
async def submit_contact(body: SubmitContactRequest, caller_id: str | None = Depends(current_user_id)) -> dict:
    command = SubmitContactMessage(
        user_id=caller_id or body.user_id,
        name=body.name,
        email=body.email,
        phone=body.phone,
        title=body.title,
        message=body.message,
    )
    contact_id = current_domain.process(command, asynchronous=False)
    contact = current_domain.repository_for(ContactMessage).get(contact_id)
    return ok(_contact_response(contact), "Message received")


@contact_router.get("", response_model=Envelope[list[ContactResponse]])
async def list_contacts() -> dict:
    contacts = current_domain.repository_for(ContactMessage)._dao.query.all().items
    contacts = sorted(contacts, key=lambda c: c.created_at, reverse=True)
    return ok([_contact_response(c) for c in contacts], "Messages fetched")
