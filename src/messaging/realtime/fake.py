"""In-memory channel that records what would have been pushed."""

from messaging.realtime.port import RealtimeChannel


class RecordingChannel(RealtimeChannel):
    def __init__(self) -> None:
        self.published: list[dict] = []

    def publish(self, session_id: str, recipient_ids: list[str], event: str, payload: dict) -> int:
        self.published.append(
            {
                "session_id": session_id,
                "recipient_ids": list(recipient_ids),
                "event": event,
                "payload": payload,
            }
        )
        return len(recipient_ids)

    def for_session(self, session_id: str) -> list[dict]:
        return [p for p in self.published if p["session_id"] == str(session_id)]
