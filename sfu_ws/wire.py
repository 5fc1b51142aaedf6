from __future__ import annotations
import struct
from typing import Union

from .errors import DecodeError, EncodeError
from .message import Frame

# Header is shared with the forwarding unit: little-endian u32.
_HEADER = struct.Struct("<I")
HEADER_SIZE = _HEADER.size

MAX_RECIPIENT_ID = 2 ** 32 - 1

Payload = Union[str, bytes, bytearray, memoryview]

def pack_frame(recipient_id: int, payload: Payload) -> bytes:
    if isinstance(payload, str):
        body = payload.encode("utf-8")
    elif isinstance(payload, (bytes, bytearray, memoryview)):
        body = bytes(payload)
    else:
        raise EncodeError(f"unsupported payload type: {type(payload).__name__}")

    if isinstance(recipient_id, bool) or not isinstance(recipient_id, int):
        raise EncodeError(f"recipient id must be int, got {type(recipient_id).__name__}")
    if not 0 <= recipient_id <= MAX_RECIPIENT_ID:
        raise EncodeError(f"recipient id out of u32 range: {recipient_id}")

    return _HEADER.pack(recipient_id) + body

def unpack_frame(data: Union[bytes, bytearray, memoryview]) -> Frame:
    data = bytes(data)
    if len(data) < HEADER_SIZE:
        raise DecodeError(f"frame truncated: {len(data)} bytes, header needs {HEADER_SIZE}")
    (recipient_id,) = _HEADER.unpack_from(data)
    return Frame(recipient_id, data[HEADER_SIZE:])

# FrameCodec names
encode = pack_frame
decode = unpack_frame
