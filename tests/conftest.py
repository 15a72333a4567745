from __future__ import annotations

import os

# Qt widgets require a platform plugin.  Offscreen avoids libGL dependencies
# inside the test container.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from typing import Any, Callable, List, Optional, Tuple  # noqa: E402

import pytest  # noqa: E402

from notifications.models.notification import DisplayedNotice  # noqa: E402
from notifications.services.clock import ManualClock  # noqa: E402


class RecordingPresenter:
    """Presentation port double that logs every call."""

    def __init__(self, resolvable: bool = True) -> None:
        self.resolvable = resolvable
        self.calls: List[Tuple[str, Any]] = []
        self.live: dict[str, DisplayedNotice] = {}
        self.closers: dict[str, Optional[Callable[[], None]]] = {}
        self.position: Optional[str] = None

    def attach(self, target: Any, position: str = "bottom-center") -> bool:
        self.calls.append(("attach", target))
        self.position = position
        return self.resolvable

    def show(self, notice: DisplayedNotice, on_close: Optional[Callable[[], None]]) -> str:
        self.calls.append(("show", notice.notice_id))
        self.live[notice.notice_id] = notice
        self.closers[notice.notice_id] = on_close
        return notice.notice_id

    def reveal(self, artifact: str) -> None:
        self.calls.append(("reveal", artifact))

    def hide(self, artifact: str, preempted: bool = False) -> None:
        self.calls.append(("hide-preempted" if preempted else "hide", artifact))

    def remove(self, artifact: str) -> None:
        self.calls.append(("remove", artifact))
        self.live.pop(artifact, None)

    def detach(self) -> None:
        self.calls.append(("detach", None))
        self.live.clear()

    def count(self, name: str, artifact: Any = None) -> int:
        return sum(
            1 for call, arg in self.calls if call == name and (artifact is None or arg == artifact)
        )


@pytest.fixture(scope="session")
def qapp():
    try:
        from PySide6.QtWidgets import QApplication
    except ImportError as exc:  # pragma: no cover - environment-specific
        pytest.skip(f"PySide6 unavailable: {exc}")
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    return app


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def make_scheduler(qapp, clock, presenter):
    from notifications.services.scheduler import NotificationScheduler

    created = []

    def _make(**config: Any) -> NotificationScheduler:
        sched = NotificationScheduler(presenter=presenter, clock=clock)
        assert sched.init({"presentation_target": "notification-area", **config})
        created.append(sched)
        return sched

    yield _make
    for sched in created:
        sched.destroy()
