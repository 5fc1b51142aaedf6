from __future__ import annotations
import asyncio
import contextlib
import logging
from typing import Optional

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedError, InvalidHandshake, InvalidURI

from ..config import ClientSettings
from ..errors import TransportError
from ..transport import CloseCallback, ErrorCallback, OpenCallback, ReceiveCallback, Transport

logger = logging.getLogger(__name__)

class WebSocketTransport(Transport):
    """Transport over the ``websockets`` asyncio client.

    Mapping:
    - connect() -> task that runs the opening handshake, then the read loop
    - send()    -> outbox queue drained by a single writer task (call order kept)
    - close()   -> queued behind pending sends; cancels the handshake if still opening

    Must be driven from inside a running asyncio loop. Every callback runs on
    that loop. Text messages from the server are handed over as UTF-8 bytes.
    """

    def __init__(self, settings: Optional[ClientSettings] = None):
        self.settings = settings or ClientSettings()
        self._ws: Optional[ClientConnection] = None
        self._task: Optional[asyncio.Task] = None
        self._outbox: "asyncio.Queue[Optional[bytes]]" = asyncio.Queue()
        self._closing = False
        self._close_emitted = False

        self._open_cb: Optional[OpenCallback] = None
        self._receive_cb: Optional[ReceiveCallback] = None
        self._close_cb: Optional[CloseCallback] = None
        self._error_cb: Optional[ErrorCallback] = None

    # ---- callbacks ----
    def on_open(self, cb: OpenCallback) -> None:
        self._open_cb = cb

    def on_receive(self, cb: ReceiveCallback) -> None:
        self._receive_cb = cb

    def on_close(self, cb: CloseCallback) -> None:
        self._close_cb = cb

    def on_error(self, cb: ErrorCallback) -> None:
        self._error_cb = cb

    # ---- API ----
    def connect(self, uri: str) -> None:
        if self._task is not None:
            raise RuntimeError("WebSocketTransport is single-use; create a new one per connection")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(uri), name=f"sfu-ws:{uri}")
        # close must fire even when the task is cancelled before its first step
        self._task.add_done_callback(lambda _t: self._emit_close())

    def send(self, data: bytes) -> None:
        if self._ws is None or self._closing:
            logger.debug("websocket not open, dropping %d bytes", len(data))
            return
        self._outbox.put_nowait(bytes(data))

    def close(self) -> None:
        if self._closing:
            return
        self._closing = True
        if self._ws is not None:
            self._outbox.put_nowait(None)
        elif self._task is not None and not self._task.done():
            self._task.cancel()

    @property
    def task(self) -> Optional[asyncio.Task]:
        """The connection task; awaiting it waits for the socket to be released."""
        return self._task

    # ---- loops ----
    async def _open(self, uri: str) -> ClientConnection:
        s = self.settings
        return await connect(
            uri,
            open_timeout=s.open_timeout,
            close_timeout=s.close_timeout,
            ping_interval=s.ping_interval,
            max_size=s.max_message_size,
        )

    async def _run(self, uri: str) -> None:
        # shielded so a cancel that lands after the handshake finished still
        # sees the socket and closes it
        opening = asyncio.ensure_future(self._open(uri))
        try:
            ws = await asyncio.shield(opening)
        except asyncio.CancelledError:
            logger.info("opening handshake to %s cancelled", uri)
            if not opening.done():
                opening.cancel()
            elif not opening.cancelled() and opening.exception() is None:
                await opening.result().close()
            raise
        except (OSError, TimeoutError, InvalidHandshake, InvalidURI) as exc:
            self._emit_error(TransportError(f"connect to {uri} failed: {exc}"))
            self._emit_close()
            return

        self._ws = ws
        writer = asyncio.create_task(self._write_loop(ws))
        self._emit_open()
        try:
            async for message in ws:
                if isinstance(message, str):
                    message = message.encode("utf-8")
                if self._receive_cb:
                    self._receive_cb(message)
        except ConnectionClosedError as exc:
            self._emit_error(TransportError(
                f"connection lost: {exc}",
                code=ws.close_code,
                reason=ws.close_reason or "",
            ))
        finally:
            writer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await writer
            self._ws = None
            self._emit_close()

    async def _write_loop(self, ws: ClientConnection) -> None:
        while True:
            data = await self._outbox.get()
            if data is None:
                await ws.close()
                return
            try:
                await ws.send(data)
            except ConnectionClosed:
                return

    # ---- events ----
    def _emit_open(self) -> None:
        if self._open_cb:
            self._open_cb()

    def _emit_error(self, err: TransportError) -> None:
        if self._error_cb:
            self._error_cb(err)

    def _emit_close(self) -> None:
        if self._close_emitted:
            return
        self._close_emitted = True
        if self._close_cb:
            self._close_cb()
