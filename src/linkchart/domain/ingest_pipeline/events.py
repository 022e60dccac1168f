"""Synchronous stage-completion notifications.

Events only inform observers; stage order is fixed by the pipeline itself.
Subscribers of an event run in registration order. An event emitted from
inside a handler is queued and delivered after the current event has reached
every subscriber.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from linkchart.domain.model import PipelineWarning

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class StageEvent:
    stage: str
    data: object
    warnings: tuple[PipelineWarning, ...] = ()
    duration_ms: float = 0.0


type EventHandler = Callable[[StageEvent], None]


@dataclass(slots=True)
class EventBus:
    _subscribers: dict[str, list[EventHandler]] = field(
        default_factory=dict[str, list[EventHandler]]
    )
    _pending: deque[StageEvent] = field(default_factory=deque[StageEvent])
    _dispatching: bool = False

    def subscribe(self, stage: str, handler: EventHandler) -> Callable[[], None]:
        """Register ``handler`` for ``stage`` and return a callable that removes it."""

        self._subscribers.setdefault(stage, []).append(handler)

        def unsubscribe() -> None:
            self.unsubscribe(stage, handler)

        return unsubscribe

    def unsubscribe(self, stage: str, handler: EventHandler) -> None:
        handlers = self._subscribers.get(stage)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def subscribers(self, stage: str) -> tuple[EventHandler, ...]:
        return tuple(self._subscribers.get(stage, ()))

    def emit(self, event: StageEvent) -> None:
        self._pending.append(event)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._pending:
                current = self._pending.popleft()
                handlers = self.subscribers(current.stage)
                log.debug("Dispatching %r to %d subscribers", current.stage, len(handlers))
                for handler in handlers:
                    handler(current)
        finally:
            self._dispatching = False
            self._pending.clear()
