
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List

from .message import Frame, LifecycleEvent

logger = logging.getLogger(__name__)

FrameHandler = Callable[[Frame], Any]
LifecycleHandler = Callable[[LifecycleEvent], Any]

class Dispatcher:
    """
    Delivers decoded frames and lifecycle events to registered handlers.
    Handlers run synchronously, in registration order, on the turn that
    received the message. A raising handler is logged and skipped.
    """
    def __init__(self):
        self.frame_handlers: List[FrameHandler] = []
        self.lifecycle_handlers: List[LifecycleHandler] = []
        self.recipient_handlers: Dict[int, List[FrameHandler]] = {}

    # ---- registration ----
    def on_frame(self, handler: FrameHandler) -> FrameHandler:
        self.frame_handlers.append(handler)
        return handler

    def on_lifecycle(self, handler: LifecycleHandler) -> LifecycleHandler:
        self.lifecycle_handlers.append(handler)
        return handler

    def on_recipient(self, recipient_id: int, handler: FrameHandler) -> FrameHandler:
        """Only frames whose header equals ``recipient_id``."""
        self.recipient_handlers.setdefault(recipient_id, []).append(handler)
        return handler

    def remove_frame_handler(self, handler: FrameHandler) -> None:
        if handler in self.frame_handlers:
            self.frame_handlers.remove(handler)
        for handlers in self.recipient_handlers.values():
            if handler in handlers:
                handlers.remove(handler)

    def remove_lifecycle_handler(self, handler: LifecycleHandler) -> None:
        if handler in self.lifecycle_handlers:
            self.lifecycle_handlers.remove(handler)

    # ---- delivery ----
    def dispatch_frame(self, frame: Frame) -> None:
        handlers = list(self.frame_handlers)
        handlers += self.recipient_handlers.get(frame.recipient_id, [])
        for h in handlers:
            try:
                h(frame)
            except Exception:
                logger.exception("frame handler %r failed (recipient=%d)", h, frame.recipient_id)

    def dispatch_lifecycle(self, event: LifecycleEvent) -> None:
        for h in list(self.lifecycle_handlers):
            try:
                h(event)
            except Exception:
                logger.exception("lifecycle handler %r failed on %s", h, event.kind)
