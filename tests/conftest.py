from __future__ import annotations
from typing import List, Optional

import pytest

from sfu_ws.client import Client
from sfu_ws.config import ClientSettings
from sfu_ws.errors import TransportError
from sfu_ws.transport import Transport


class FakeTransport(Transport):
    """In-memory transport: records what the connection asks for, events fired by hand."""

    def __init__(self, settings: Optional[ClientSettings] = None):
        self.settings = settings
        self.connected_to: Optional[str] = None
        self.sent: List[bytes] = []
        self.close_calls = 0
        self._open = self._receive = self._close = self._error = None

    def connect(self, uri: str) -> None:
        self.connected_to = uri

    def send(self, data: bytes) -> None:
        self.sent.append(data)

    def close(self) -> None:
        self.close_calls += 1

    def on_open(self, cb):
        self._open = cb

    def on_receive(self, cb):
        self._receive = cb

    def on_close(self, cb):
        self._close = cb

    def on_error(self, cb):
        self._error = cb

    # ---- test drivers ----
    def fire_open(self):
        self._open()

    def fire_receive(self, data: bytes):
        self._receive(data)

    def fire_close(self):
        self._close()

    def fire_error(self, message: str = "network down"):
        self._error(TransportError(message))


class TransportRecorder:
    """Transport factory that keeps every transport it made."""

    def __init__(self):
        self.made: List[FakeTransport] = []

    def __call__(self, settings: ClientSettings) -> FakeTransport:
        t = FakeTransport(settings)
        self.made.append(t)
        return t

    @property
    def last(self) -> FakeTransport:
        return self.made[-1]


@pytest.fixture
def transports() -> TransportRecorder:
    return TransportRecorder()


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(host="HOST")


@pytest.fixture
def client(settings, transports) -> Client:
    return Client(settings, transport_factory=transports)
