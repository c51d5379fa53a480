import pytest

from core.events.domain_events import DomainEvents
from core.events.signal import Signal


def test_signal_connect_emit_disconnect():
    signal: Signal[str] = Signal("project_changed")
    seen: list[str] = []

    def _handler(project_id: str) -> None:
        seen.append(project_id)

    signal.connect(_handler)
    signal.connect(_handler)
    assert len(signal) == 1

    signal.emit("p-1")
    signal.disconnect(_handler)
    signal.emit("p-2")

    assert seen == ["p-1"]


def test_signal_emit_prunes_dead_weak_subscribers():
    signal: Signal[str] = Signal()
    seen: list[str] = []

    class _DeadProxy:
        def __init__(self) -> None:
            self.calls = 0

        def __call__(self, _payload: str) -> None:
            self.calls += 1
            raise ReferenceError("weakly-referenced object no longer exists")

    dead = _DeadProxy()
    signal.connect(dead)
    signal.connect(seen.append)

    signal.emit("p-1")
    signal.emit("p-2")

    assert dead.calls == 1
    assert seen == ["p-1", "p-2"]


def test_signal_emit_keeps_subscriber_errors_visible():
    signal: Signal[str] = Signal()

    def _boom(_payload: str) -> None:
        raise RuntimeError("boom")

    signal.connect(_boom)
    with pytest.raises(RuntimeError, match="boom"):
        signal.emit("p-1")


def test_domain_events_disconnect_all():
    events = DomainEvents()
    events.schedule_recalculated.connect(print)
    events.phase_unlocked.connect(print)

    events.disconnect_all()

    assert len(events.schedule_recalculated) == 0
    assert len(events.phase_unlocked) == 0
