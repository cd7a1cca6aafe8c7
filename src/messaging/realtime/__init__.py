"""Real-time channel factory.

Provides get_channel() / set_channel() to swap implementations:
- WebSocketHub serving the /chats/ws endpoint (default)
- RecordingChannel for tests
"""

from messaging.realtime.hub import WebSocketHub
from messaging.realtime.port import RealtimeChannel

_hub: WebSocketHub | None = None
_current_channel: RealtimeChannel | None = None


def get_hub() -> WebSocketHub:
    """Return the process-wide WebSocket hub."""
    global _hub
    if _hub is None:
        _hub = WebSocketHub()
    return _hub


def get_channel() -> RealtimeChannel:
    """Return the current channel. Defaults to the WebSocket hub."""
    return _current_channel or get_hub()


def set_channel(channel: RealtimeChannel) -> None:
    """Override the active channel (useful for tests)."""
    global _current_channel
    _current_channel = channel


def reset_channel() -> None:
    """Reset to the default hub, dropping every registered connection."""
    global _current_channel, _hub
    _current_channel = None
    _hub = None
