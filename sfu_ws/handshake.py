from __future__ import annotations
import base64
import json
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from .config import ClientSettings

CONNECT = "connect"

@dataclass(frozen=True)
class HandshakeDescriptor:
    """
    Key/value configuration carried base64(JSON) in the connection URI path.
    Never sent as a frame.
    """
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        # keep insertion order, freeze against later mutation by the caller
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def coerce(cls, value: Union["HandshakeDescriptor", Mapping[str, Any]]) -> "HandshakeDescriptor":
        if isinstance(value, HandshakeDescriptor):
            return value
        if isinstance(value, Mapping):
            return cls(value)
        raise TypeError(f"handshake descriptor must be a mapping, got {type(value).__name__}")

    @property
    def action(self) -> Optional[str]:
        return self.fields.get("action")

    @property
    def user_id(self) -> Optional[int]:
        return self.fields.get("user_id")

    def to_json(self) -> str:
        return json.dumps(dict(self.fields), separators=(",", ":"), ensure_ascii=False)

    def to_base64(self) -> str:
        return base64.b64encode(self.to_json().encode("utf-8")).decode("ascii")

    @classmethod
    def from_base64(cls, segment: str) -> "HandshakeDescriptor":
        return cls(json.loads(base64.b64decode(segment).decode("utf-8")))

def build_uri(descriptor: HandshakeDescriptor, settings: ClientSettings) -> str:
    """ws(s)://<host>/<route_prefix>/<action>/<base64(json(descriptor))>/"""
    action = descriptor.action or settings.default_action
    prefix = settings.route_prefix.strip("/")
    return f"{settings.scheme}://{settings.host}/{prefix}/{action}/{descriptor.to_base64()}/"

class HandshakeBuilder:
    """
    Fluent builder for the descriptor the forwarding unit's connect route reads:
    room_id, user_id, token, stream, shared_key.
     - The connect action requires room_id and user_id
    """
    def __init__(self, action: str = CONNECT):
        self._fields: Dict[str, Any] = {"action": action}

    def action(self, name: str):
        self._fields["action"] = name
        return self

    def connect(self):
        return self.action(CONNECT)

    def room(self, room_id: int):
        self._fields["room_id"] = room_id
        return self

    def user(self, user_id: int, token: Optional[int] = None):
        self._fields["user_id"] = user_id
        if token is not None:
            self._fields["token"] = token
        return self

    def stream(self, name: str):
        self._fields["stream"] = name
        return self

    def shared_key(self, key: str):
        self._fields["shared_key"] = key
        return self

    def set(self, key: str, value: Any):
        self._fields[key] = value
        return self

    def build(self) -> HandshakeDescriptor:
        if self._fields.get("action") == CONNECT:
            missing = [k for k in ("room_id", "user_id") if k not in self._fields]
            if missing:
                raise ValueError(f"connect handshake requires {', '.join(missing)}")
        return HandshakeDescriptor(self._fields)
