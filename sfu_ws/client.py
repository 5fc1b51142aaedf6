from __future__ import annotations
from typing import Any, Callable, Mapping, Optional, Union
import logging

from .codecs import ObjectHandler, PayloadCodec, get_codec, object_handler
from .config import ClientSettings
from .connection import Connection
from .dispatcher import Dispatcher, FrameHandler, LifecycleHandler
from .errors import InvalidStateError
from .handshake import HandshakeDescriptor
from .message import ConnectionState
from .transport import Transport
from .transports.websocket import WebSocketTransport
from .wire import Payload, pack_frame

logger = logging.getLogger(__name__)

TransportFactory = Callable[[ClientSettings], Transport]


class Client:

    # Notes:
    # - join/send/close is the whole contract the page relies on
    # - send while not OPEN is dropped and logged, never raised or queued
    # - transport failures arrive as error+close lifecycle events; recovery is a new join()
    # - one fresh Connection per join; the dispatcher outlives connections

    def __init__(self, settings: Optional[ClientSettings] = None, *,
                 transport_factory: TransportFactory = WebSocketTransport,
                 dispatcher: Optional[Dispatcher] = None):
        self.settings = settings or ClientSettings()
        self.transport_factory = transport_factory
        self.dispatcher = dispatcher or Dispatcher()
        self.connection: Optional[Connection] = None

    @property
    def state(self) -> ConnectionState:
        return self.connection.state if self.connection else ConnectionState.IDLE

    @property
    def descriptor(self) -> Optional[HandshakeDescriptor]:
        return self.connection.descriptor if self.connection else None

    @property
    def uri(self) -> Optional[str]:
        return self.connection.uri if self.connection else None

    def on_frame(self, handler: FrameHandler) -> FrameHandler:
        return self.dispatcher.on_frame(handler)

    def on_lifecycle(self, handler: LifecycleHandler) -> LifecycleHandler:
        return self.dispatcher.on_lifecycle(handler)

    def join(self, descriptor: Union[HandshakeDescriptor, Mapping[str, Any]]) -> None:
        """Open a new connection parameterized by ``descriptor``."""
        if self.state in (ConnectionState.CONNECTING, ConnectionState.OPEN):
            raise InvalidStateError(f"join while {self.state}; close() first")
        desc = HandshakeDescriptor.coerce(descriptor)
        if self.connection is not None:
            # a CLOSING predecessor must not report its close after the new OPEN
            self.connection.detach()
        self.connection = Connection(self.transport_factory(self.settings), self.dispatcher, self.settings)
        self.connection.open(desc)

    def send(self, message: Payload, recipient_id: int) -> bool:
        """Send text or bytes to ``recipient_id``. Returns False when dropped."""
        frame = pack_frame(recipient_id, message)
        if self.connection is None:
            logger.warning("send before join: dropping frame for %d", recipient_id)
            return False
        return self.connection.send(frame)

    def send_object(self, obj: Any, recipient_id: int, codec: Union[str, PayloadCodec] = "json") -> bool:
        """Serialize ``obj`` with a payload codec and send it."""
        return self.send(get_codec(codec).dumps(obj), recipient_id)

    def on_object(self, handler: ObjectHandler, codec: Union[str, PayloadCodec] = "json",
                  recipient_id: Optional[int] = None) -> FrameHandler:
        """Register ``handler(obj, frame)``; frames that do not decode are logged and skipped.

        Returns the frame handler to pass to ``dispatcher.remove_frame_handler``.
        """
        on_frame = object_handler(codec, handler)
        if recipient_id is None:
            return self.dispatcher.on_frame(on_frame)
        return self.dispatcher.on_recipient(recipient_id, on_frame)

    def broadcast(self, message: Payload) -> bool:
        """Send to the whole stream group.

        The forwarding unit fans a frame out to everyone when its header is the
        sender's own user id.
        """
        desc = self.descriptor
        if desc is None or desc.user_id is None:
            raise InvalidStateError("broadcast needs a joined descriptor with a user_id")
        return self.send(message, desc.user_id)

    def close(self) -> None:
        """Fire-and-forget; closing twice is a no-op."""
        if self.connection is not None:
            self.connection.close()
