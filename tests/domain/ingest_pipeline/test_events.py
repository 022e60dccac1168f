from __future__ import annotations

from linkchart.domain.ingest_pipeline import EventBus, StageEvent
from linkchart.domain.model import StageName


def test_subscribers_run_in_registration_order() -> None:
    bus = EventBus()
    calls: list[str] = []
    bus.subscribe(StageName.TYPED, lambda _event: calls.append("first"))
    bus.subscribe(StageName.TYPED, lambda _event: calls.append("second"))
    bus.subscribe(StageName.NORMALIZED, lambda _event: calls.append("other"))

    bus.emit(StageEvent(stage=StageName.TYPED, data=None))

    assert calls == ["first", "second"]


def test_unsubscribe_callable_removes_handler() -> None:
    bus = EventBus()
    calls: list[object] = []
    unsubscribe = bus.subscribe(StageName.RESOLVED, lambda event: calls.append(event.data))

    bus.emit(StageEvent(stage=StageName.RESOLVED, data=1))
    unsubscribe()
    bus.emit(StageEvent(stage=StageName.RESOLVED, data=2))

    assert calls == [1]
    assert bus.subscribers(StageName.RESOLVED) == ()


def test_events_emitted_from_handlers_are_queued() -> None:
    bus = EventBus()
    calls: list[str] = []

    def on_typed(_event: StageEvent) -> None:
        calls.append("typed:first")
        bus.emit(StageEvent(stage=StageName.NORMALIZED, data=None))
        calls.append("typed:first:done")

    bus.subscribe(StageName.TYPED, on_typed)
    bus.subscribe(StageName.TYPED, lambda _event: calls.append("typed:second"))
    bus.subscribe(StageName.NORMALIZED, lambda _event: calls.append("normalized"))

    bus.emit(StageEvent(stage=StageName.TYPED, data=None))

    assert calls == ["typed:first", "typed:first:done", "typed:second", "normalized"]


def test_bus_recovers_after_failing_handler() -> None:
    bus = EventBus()
    calls: list[str] = []

    def explode(_event: StageEvent) -> None:
        raise RuntimeError("boom")

    unsubscribe = bus.subscribe(StageName.MAPPED, explode)
    bus.subscribe(StageName.MAPPED, lambda _event: calls.append("mapped"))

    try:
        bus.emit(StageEvent(stage=StageName.MAPPED, data=None))
    except RuntimeError:
        calls.append("raised")
    unsubscribe()
    bus.emit(StageEvent(stage=StageName.MAPPED, data=None))

    assert calls == ["raised", "mapped"]
