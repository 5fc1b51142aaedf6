"""Structured objects carried as frame payloads.

A payload codec turns an object into the bytes after the routing header and
back. ``pack`` builds the whole frame for a recipient; ``unpack`` reads a
decoded ``Frame`` and raises ``DecodeError`` when the payload is not a valid
object, so bad frames are handled like truncated ones.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Union

import msgpack

from .errors import DecodeError
from .message import Frame
from .wire import pack_frame

logger = logging.getLogger(__name__)

ObjectHandler = Callable[[Any, Frame], Any]


class PayloadCodec(ABC):
    name: str

    @abstractmethod
    def dumps(self, obj: Any) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def loads(self, data: bytes) -> Any:
        raise NotImplementedError

    def pack(self, recipient_id: int, obj: Any) -> bytes:
        return pack_frame(recipient_id, self.dumps(obj))

    def unpack(self, frame: Frame) -> Any:
        if not frame.payload:
            raise DecodeError(f"empty {self.name} payload for {frame.recipient_id}")
        try:
            return self.loads(frame.payload)
        except (ValueError, msgpack.UnpackException) as exc:
            raise DecodeError(f"invalid {self.name} payload for {frame.recipient_id}: {exc}") from exc


class JSONPayload(PayloadCodec):
    """Compact UTF-8 JSON, the format the page scripts exchange."""
    name = "json"

    def dumps(self, obj: Any) -> bytes:
        return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    def loads(self, data: bytes) -> Any:
        return json.loads(data.decode("utf-8"))


class MsgPackPayload(PayloadCodec):
    """Binary-safe alternative; ``bytes`` values survive unchanged."""
    name = "msgpack"

    def dumps(self, obj: Any) -> bytes:
        return msgpack.packb(obj, use_bin_type=True)

    def loads(self, data: bytes) -> Any:
        return msgpack.unpackb(data, raw=False)


PAYLOAD_CODECS: Dict[str, PayloadCodec] = {
    "json": JSONPayload(),
    "msgpack": MsgPackPayload(),
}


def get_codec(codec: Union[str, PayloadCodec]) -> PayloadCodec:
    if isinstance(codec, PayloadCodec):
        return codec
    if codec not in PAYLOAD_CODECS:
        raise ValueError(f"Unknown payload codec: {codec}")
    return PAYLOAD_CODECS[codec]


def object_handler(codec: Union[str, PayloadCodec], handler: ObjectHandler) -> Callable[[Frame], None]:
    """Adapt ``handler(obj, frame)`` into a frame handler; undecodable frames are logged and skipped."""
    resolved = get_codec(codec)

    def _on_frame(frame: Frame) -> None:
        try:
            obj = resolved.unpack(frame)
        except DecodeError as exc:
            logger.warning("discarding frame: %s", exc)
            return
        handler(obj, frame)

    return _on_frame
