from __future__ import annotations
from dataclasses import replace
from typing import Any, Optional, Union

from .client import Client, TransportFactory
from .config import ClientSettings
from .dispatcher import FrameHandler, LifecycleHandler
from .transports.websocket import WebSocketTransport

def SfuClient(host: Optional[str] = None,
              *,
              transport: Union[str, TransportFactory] = "websocket",
              settings: Optional[ClientSettings] = None,
              on_frame: Optional[FrameHandler] = None,
              on_lifecycle: Optional[LifecycleHandler] = None,
              **settings_overrides: Any) -> Client:
    """
    One-liner factory:
      SfuClient("sfu.example.org:7777", secure=True, on_frame=print)
      SfuClient(settings=my_settings, transport=lambda s: MyTransport(s))

    - host: "host[:port]" of the forwarding unit (overrides settings.host)
    - transport: "websocket" | callable(settings) -> Transport
    - settings: base ClientSettings (defaults if omitted)
    - on_frame / on_lifecycle: handlers registered before returning
    - **settings_overrides: ClientSettings fields, e.g. secure=True, open_timeout=5
    """
    base = settings or ClientSettings()
    if host is not None:
        settings_overrides["host"] = host
    if settings_overrides:
        base = replace(base, **settings_overrides)
    base.validate()

    # Resolve transport
    if isinstance(transport, str):
        tlabel = transport.lower()
        if tlabel == "websocket":
            factory: TransportFactory = WebSocketTransport
        else:
            raise ValueError(f"Unknown transport label: {transport}")
    elif callable(transport):
        factory = transport
    else:
        raise ValueError(f"transport must be a label or a factory, got {transport!r}")

    client = Client(base, transport_factory=factory)
    if on_frame:
        client.on_frame(on_frame)
    if on_lifecycle:
        client.on_lifecycle(on_lifecycle)
    return client
