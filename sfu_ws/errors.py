"""Error taxonomy for the SFU WebSocket transport."""
from __future__ import annotations


class SfuError(RuntimeError):
    """Base class for every error raised by ``sfu_ws``."""


class EncodeError(SfuError):
    """Payload (or recipient id) that cannot be put on the wire."""


class DecodeError(SfuError):
    """Inbound message shorter than the fixed 4-byte header."""


class TransportError(SfuError):
    """Socket-level failure: network loss, handshake rejection, abnormal close.

    Only ever delivered as the ``detail`` of an ``error`` lifecycle event.
    """

    def __init__(self, message: str, *, code: int | None = None, reason: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.reason = reason


class InvalidStateError(SfuError):
    """Operation attempted in a state that forbids it."""
