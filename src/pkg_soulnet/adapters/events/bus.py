from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, DefaultDict, List

from ...domain.constants import SessionEvent
from ...domain.ports import EventPublisher

logger = logging.getLogger(__name__)

Handler = Callable[[SessionEvent], None]


class EventBus(EventPublisher):
    """
    In-process publish/subscribe for session events.

    Handlers run synchronously inside `publish`, in subscription order.
    A failing handler is logged and does not stop the others.
    """

    def __init__(self) -> None:
        self._handlers: DefaultDict[SessionEvent, List[Handler]] = defaultdict(list)

    def subscribe(self, event: SessionEvent, handler: Handler) -> Callable[[], None]:
        """Register `handler`; returns a callable that unregisters it."""
        self._handlers[event].append(handler)

        def unsubscribe() -> None:
            try:
                self._handlers[event].remove(handler)
            except ValueError:
                pass

        return unsubscribe

    def publish(self, event: SessionEvent) -> None:
        logger.debug("publishing %s", event.name)
        for handler in list(self._handlers[event]):
            try:
                handler(event)
            except Exception:  # noqa: BLE001
                logger.exception("session event handler failed for %s", event.name)
