from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, Optional


class NoticeType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class PriorityClass(IntEnum):
    """Admission priority; higher value wins. SUCCESS and INFO share a tier."""

    INFO = 1
    SUCCESS = 1
    WARNING = 2
    ERROR = 3


class LifecycleState(str, Enum):
    QUEUED = "queued"
    ENTERING = "entering"
    VISIBLE = "visible"
    REMOVING = "removing"
    REMOVED = "removed"


TYPE_PRIORITY: dict[NoticeType, PriorityClass] = {
    NoticeType.INFO: PriorityClass.INFO,
    NoticeType.SUCCESS: PriorityClass.SUCCESS,
    NoticeType.WARNING: PriorityClass.WARNING,
    NoticeType.ERROR: PriorityClass.ERROR,
}

DEFAULT_DURATIONS_MS: dict[NoticeType, int] = {
    NoticeType.INFO: 3000,
    NoticeType.SUCCESS: 3000,
    NoticeType.WARNING: 4000,
    NoticeType.ERROR: 5000,
}

# Every tag must map to a class and a default duration.
for _name, _table in (("TYPE_PRIORITY", TYPE_PRIORITY), ("DEFAULT_DURATIONS_MS", DEFAULT_DURATIONS_MS)):
    _missing = set(NoticeType) - set(_table)
    if _missing:
        raise RuntimeError(f"{_name} has no entry for {sorted(t.value for t in _missing)}")
del _name, _table, _missing


@dataclass(frozen=True)
class NoticeAction:
    label: str
    callback: Callable[[], Any]


@dataclass(frozen=True)
class NoticeRequest:
    notice_id: str
    message: str
    type_tag: NoticeType
    priority: PriorityClass
    duration_ms: Optional[int]
    persistent: bool
    dismissible: bool
    enqueued_at: float
    sequence: int = 0
    icon: Optional[str] = None
    action: Optional[NoticeAction] = None

    @property
    def sort_key(self) -> tuple[int, float, int]:
        """Queue order: priority desc, then arrival asc."""

        return (-int(self.priority), self.enqueued_at, self.sequence)


@dataclass(eq=False)
class DisplayedNotice:
    request: NoticeRequest
    state: LifecycleState = LifecycleState.ENTERING
    artifact: Any = None
    enter_timer: Any = None
    dismiss_timer: Any = None
    removal_timer: Any = None
    preempted: bool = field(default=False)

    @property
    def notice_id(self) -> str:
        return self.request.notice_id

    @property
    def persistent(self) -> bool:
        return self.request.persistent


@dataclass(frozen=True)
class SchedulerStatus:
    queued: int
    transient_count: int
    persistent_count: int
    enabled: bool
    initialized: bool = False
    max_visible: int = 0
    max_persistent: int = 0
    position: str = ""
    animations_enabled: bool = True

    @property
    def active(self) -> int:
        return self.transient_count + self.persistent_count
