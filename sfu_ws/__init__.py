"""
Public API:
- Client: facade (join / send / close) over one SFU WebSocket connection
- SfuClient: one-liner factory returning a configured Client
- Connection: lifecycle state machine owning one transport
- Dispatcher: delivers frames and lifecycle events to handlers
- Frame, ConnectionState, LifecycleEvent, LifecycleKind: data model
- pack_frame, unpack_frame: 4-byte little-endian recipient header + payload
- HandshakeDescriptor, HandshakeBuilder, build_uri: base64(JSON) in the URI path
- Transport, WebSocketTransport: socket contract and its websockets implementation
- ClientSettings: configuration (file / env overrides)
- PayloadCodec, get_codec: json / msgpack objects packed into and read out of frames
"""

# Facade
from .client import Client
from .factory import SfuClient

# Lifecycle & dispatch
from .connection import Connection
from .dispatcher import Dispatcher

# Data model & errors
from .message import (
    ConnectionState,
    Frame,
    LifecycleEvent,
    LifecycleKind,
)
from .errors import (
    DecodeError,
    EncodeError,
    InvalidStateError,
    SfuError,
    TransportError,
)

# Framing helpers
from .wire import pack_frame, unpack_frame

# Handshake, config, payload codecs
from .handshake import HandshakeBuilder, HandshakeDescriptor, build_uri
from .config import ClientSettings, ConfigValidationError
from .codecs import JSONPayload, MsgPackPayload, PayloadCodec, get_codec
from .logging_setup import configure_logging

# Transport contract
from .transport import Transport
from .transports.websocket import WebSocketTransport

__all__ = [
    "Client",
    "SfuClient",
    "Connection",
    "Dispatcher",
    "ConnectionState",
    "Frame",
    "LifecycleEvent",
    "LifecycleKind",
    "DecodeError",
    "EncodeError",
    "InvalidStateError",
    "SfuError",
    "TransportError",
    "pack_frame",
    "unpack_frame",
    "HandshakeBuilder",
    "HandshakeDescriptor",
    "build_uri",
    "ClientSettings",
    "ConfigValidationError",
    "PayloadCodec",
    "JSONPayload",
    "MsgPackPayload",
    "get_codec",
    "configure_logging",
    "Transport",
    "WebSocketTransport",
]

__version__ = "0.1.0"
