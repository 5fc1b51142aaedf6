from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable

from .errors import TransportError

OpenCallback    = Callable[[], None]
ReceiveCallback = Callable[[bytes], None]
CloseCallback   = Callable[[], None]
ErrorCallback   = Callable[[TransportError], None]

class Transport(ABC):
    """
    One persistent, message-oriented socket, event-driven like a browser WebSocket.
    - error is always followed by close
    - close fires exactly once per connect()
    """

    @abstractmethod
    def connect(self, uri: str) -> None:
        """Start opening; returns immediately."""
        raise NotImplementedError

    @abstractmethod
    def send(self, data: bytes) -> None:
        """Send one binary message. Messages leave in call order."""
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        """Request close; returns immediately."""
        raise NotImplementedError

    @abstractmethod
    def on_open(self, cb: OpenCallback) -> None:
        raise NotImplementedError

    @abstractmethod
    def on_receive(self, cb: ReceiveCallback) -> None:
        raise NotImplementedError

    @abstractmethod
    def on_close(self, cb: CloseCallback) -> None:
        raise NotImplementedError

    @abstractmethod
    def on_error(self, cb: ErrorCallback) -> None:
        raise NotImplementedError
