"""WebSocket hub: tracks live connections and fans out chat messages.

A connection registers interest by user id (``user_connected``) and by
session id (``join-session``). Each connection owns a bounded asyncio queue
drained by its socket task. Publishing may happen on any thread; frames are
handed to the connection's loop with ``call_soon_threadsafe``.
"""

import asyncio
import itertools
import threading
from dataclasses import dataclass, field

import structlog

from messaging.realtime.port import RealtimeChannel
from shared.config import config

logger = structlog.get_logger(__name__)

_ids = itertools.count(1)


@dataclass(eq=False)
class Connection:
    queue: asyncio.Queue
    loop: asyncio.AbstractEventLoop
    connection_id: int = field(default_factory=lambda: next(_ids))
    user_id: str | None = None
    sessions: set[str] = field(default_factory=set)
    dropped: int = 0

    def wants(self, session_id: str, recipient_ids: set[str]) -> bool:
        return session_id in self.sessions or (self.user_id is not None and self.user_id in recipient_ids)


class WebSocketHub(RealtimeChannel):
    def __init__(self, queue_size: int | None = None) -> None:
        self.queue_size = queue_size or config.CHAT_QUEUE_SIZE
        self._connections: set[Connection] = set()
        self._lock = threading.Lock()

    def connect(self) -> Connection:
        """Register a connection; must be called from the socket's event loop."""
        connection = Connection(queue=asyncio.Queue(maxsize=self.queue_size), loop=asyncio.get_running_loop())
        with self._lock:
            self._connections.add(connection)
        return connection

    def disconnect(self, connection: Connection) -> None:
        with self._lock:
            self._connections.discard(connection)
        logger.debug("Socket disconnected", connection_id=connection.connection_id, user_id=connection.user_id)

    def identify(self, connection: Connection, user_id: str) -> None:
        connection.user_id = str(user_id)

    def join(self, connection: Connection, session_id: str) -> None:
        connection.sessions.add(str(session_id))

    def leave(self, connection: Connection, session_id: str) -> None:
        connection.sessions.discard(str(session_id))

    @property
    def connection_count(self) -> int:
        with self._lock:
            return len(self._connections)

    def send(self, connection: Connection, event: str, data) -> bool:
        return self._offer(connection, {"event": event, "data": data})

    def publish(self, session_id: str, recipient_ids: list[str], event: str, payload: dict) -> int:
        recipients = {str(r) for r in recipient_ids}
        with self._lock:
            targets = [c for c in self._connections if c.wants(str(session_id), recipients)]

        frame = {"event": event, "data": payload}
        return sum(1 for connection in targets if self._offer(connection, frame))

    def _offer(self, connection: Connection, frame: dict) -> bool:
        try:
            connection.loop.call_soon_threadsafe(self._enqueue, connection, frame)
        except RuntimeError:
            # Loop already closed; the socket is gone
            self.disconnect(connection)
            return False
        return True

    @staticmethod
    def _enqueue(connection: Connection, frame: dict) -> None:
        try:
            connection.queue.put_nowait(frame)
        except asyncio.QueueFull:
            connection.dropped += 1
            logger.warning(
                "Dropping real-time frame, subscriber too slow",
                connection_id=connection.connection_id,
                user_id=connection.user_id,
                dropped=connection.dropped,
            )
