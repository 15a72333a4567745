from __future__ import annotations

from typing import Dict, List, Optional

from notifications.models.notification import (
    DisplayedNotice,
    NoticeRequest,
    NoticeType,
    PriorityClass,
)

_PREEMPTIBLE_TYPES = {NoticeType.INFO, NoticeType.SUCCESS}


class CapacityManager:
    """Tracks the transient and persistent display pools.

    Pools are insertion-ordered dicts keyed by notice id, so admission order
    doubles as the age order used for preemption.
    """

    def __init__(self, max_visible: int = 3, max_persistent: int = 2) -> None:
        self.max_visible = max_visible
        self.max_persistent = max_persistent
        self._transient: Dict[str, DisplayedNotice] = {}
        self._persistent: Dict[str, DisplayedNotice] = {}

    # ----- Queries ---------------------------------------------------------
    @property
    def transient_count(self) -> int:
        return len(self._transient)

    @property
    def persistent_count(self) -> int:
        return len(self._persistent)

    def limit(self, persistent: bool) -> int:
        return self.max_persistent if persistent else self.max_visible

    def _pool(self, persistent: bool) -> Dict[str, DisplayedNotice]:
        return self._persistent if persistent else self._transient

    def can_admit(self, req: NoticeRequest) -> bool:
        return len(self._pool(req.persistent)) < self.limit(req.persistent)

    def get(self, notice_id: str) -> Optional[DisplayedNotice]:
        return self._transient.get(notice_id) or self._persistent.get(notice_id)

    def displayed(self) -> List[DisplayedNotice]:
        return list(self._transient.values()) + list(self._persistent.values())

    def find_preemption_candidate(self, req: NoticeRequest) -> Optional[DisplayedNotice]:
        """Pick a transient notice to retire early for an ERROR request.

        First INFO/SUCCESS notice in admission order, else the oldest
        transient notice. Persistent notices are never candidates.
        """

        if req.priority != PriorityClass.ERROR or req.persistent:
            return None
        if len(self._transient) < self.max_visible:
            return None
        for notice in self._transient.values():
            if notice.request.type_tag in _PREEMPTIBLE_TYPES:
                return notice
        return next(iter(self._transient.values()), None)

    # ----- Mutation --------------------------------------------------------
    def admit(self, notice: DisplayedNotice) -> None:
        pool = self._pool(notice.persistent)
        if notice.notice_id in pool:
            return
        if len(pool) >= self.limit(notice.persistent):
            raise ValueError("display pool is full")
        pool[notice.notice_id] = notice

    def release(self, notice: DisplayedNotice) -> bool:
        return self._pool(notice.persistent).pop(notice.notice_id, None) is not None

    def clear(self) -> List[DisplayedNotice]:
        released = self.displayed()
        self._transient.clear()
        self._persistent.clear()
        return released


__all__ = ["CapacityManager"]
