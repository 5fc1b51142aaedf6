"""Connection lifecycle over one transport socket."""
from __future__ import annotations

import logging
from typing import Optional

from .config import ClientSettings
from .dispatcher import Dispatcher
from .errors import DecodeError, InvalidStateError, TransportError
from .handshake import HandshakeDescriptor, build_uri
from .message import ConnectionState, LifecycleEvent, LifecycleKind
from .transport import Transport
from .wire import unpack_frame


logger = logging.getLogger(__name__)


class Connection:
    """Owns exactly one transport and walks IDLE -> CONNECTING -> OPEN -> CLOSING -> CLOSED.

    Single use: once CLOSED it stays CLOSED. Nothing outside this class writes
    to or closes the transport.
    """

    def __init__(self, transport: Transport, dispatcher: Dispatcher, settings: ClientSettings) -> None:
        self.settings = settings
        self.dispatcher = dispatcher
        self.state = ConnectionState.IDLE
        self.descriptor: Optional[HandshakeDescriptor] = None
        self.uri: Optional[str] = None
        self.frames_sent = 0
        self.frames_received = 0
        self.frames_dropped = 0

        self._transport: Optional[Transport] = transport
        transport.on_open(self._handle_open)
        transport.on_receive(self._handle_receive)
        transport.on_close(self._handle_close)
        transport.on_error(self._handle_error)

    @property
    def transport(self) -> Optional[Transport]:
        return self._transport

    def detach(self) -> None:
        """Stop reporting to the shared dispatcher; the socket still winds down."""
        self.dispatcher = Dispatcher()

    def open(self, descriptor: HandshakeDescriptor) -> None:
        if self.state is not ConnectionState.IDLE or self._transport is None:
            raise InvalidStateError(f"connection cannot be opened in state {self.state}")
        self.descriptor = descriptor
        self.uri = build_uri(descriptor, self.settings)
        self.state = ConnectionState.CONNECTING
        logger.info("connecting to %s", self.uri)
        self._transport.connect(self.uri)

    def send(self, data: bytes) -> bool:
        """Hand one encoded frame to the socket; dropped unless OPEN."""
        if self.state is not ConnectionState.OPEN or self._transport is None:
            self.frames_dropped += 1
            logger.warning("send while %s: dropping %d-byte frame", self.state, len(data))
            return False
        self._transport.send(data)
        self.frames_sent += 1
        logger.debug("sent %d-byte frame", len(data))
        return True

    def close(self) -> None:
        if self.state in (ConnectionState.CLOSING, ConnectionState.CLOSED):
            return
        if self.state is ConnectionState.IDLE:
            self.state = ConnectionState.CLOSED
            self._transport = None
            return
        logger.info("closing connection (%s)", self.state)
        self.state = ConnectionState.CLOSING
        self._transport.close()

    # ---- transport events ----
    def _handle_open(self) -> None:
        if self.state is not ConnectionState.CONNECTING:
            logger.debug("open event ignored in state %s", self.state)
            return
        self.state = ConnectionState.OPEN
        logger.info("connection open")
        self.dispatcher.dispatch_lifecycle(LifecycleEvent(LifecycleKind.OPEN))

    def _handle_receive(self, data: bytes) -> None:
        try:
            frame = unpack_frame(data)
        except DecodeError as exc:
            logger.warning("discarding malformed frame: %s", exc)
            return
        self.frames_received += 1
        logger.debug("received frame for %d (%d bytes payload)", frame.recipient_id, len(frame.payload))
        self.dispatcher.dispatch_frame(frame)

    def _handle_error(self, err: TransportError) -> None:
        logger.warning("transport error: %s", err)
        self.dispatcher.dispatch_lifecycle(LifecycleEvent(LifecycleKind.ERROR, err))

    def _handle_close(self) -> None:
        if self.state is ConnectionState.CLOSED:
            return
        self.state = ConnectionState.CLOSED
        self._transport = None
        logger.info("connection closed")
        self.dispatcher.dispatch_lifecycle(LifecycleEvent(LifecycleKind.CLOSE))
