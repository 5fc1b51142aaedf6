from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from enum import StrEnum

# Connection lifecycle states
class ConnectionState(StrEnum):
    IDLE       = "IDLE"
    CONNECTING = "CONNECTING"
    OPEN       = "OPEN"
    CLOSING    = "CLOSING"
    CLOSED     = "CLOSED"

class LifecycleKind(StrEnum):
    OPEN  = "open"
    CLOSE = "close"
    ERROR = "error"

@dataclass(frozen=True)
class Frame:
    """
    One WebSocket message: 4-byte routing header + payload bytes
    """
    recipient_id: int            # u32: peer id, broadcast (own id) or control channel
    payload: bytes = b""         # text payloads are carried as their UTF-8 bytes

    def text(self, errors: str = "strict") -> str:
        return self.payload.decode("utf-8", errors)

@dataclass(frozen=True)
class LifecycleEvent:
    kind: LifecycleKind
    detail: Optional[Exception] = None   # TransportError for ERROR events
