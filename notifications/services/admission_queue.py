from __future__ import annotations

import bisect
import logging
from typing import Iterator, List, Optional

from notifications.models.notification import NoticeRequest

logger = logging.getLogger(__name__)


class AdmissionQueue:
    """Bounded priority queue of requests waiting for a display slot.

    Kept sorted by ``(priority desc, enqueued_at asc)`` so the head is the
    next request to admit. The eviction victim is the oldest request of the
    lowest priority tier present.
    """

    def __init__(self, max_size: int = 15) -> None:
        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self._max_size = max_size
        self._items: List[NoticeRequest] = []
        self.last_evicted: Optional[NoticeRequest] = None

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[NoticeRequest]:
        return iter(list(self._items))

    def __contains__(self, notice_id: object) -> bool:
        return any(req.notice_id == notice_id for req in self._items)

    def enqueue(self, req: NoticeRequest) -> bool:
        """Insert ``req``; when full, evict the victim only if ``req`` outranks it."""

        self.last_evicted = None
        if len(self._items) >= self._max_size:
            victim_idx = self._victim_index()
            victim = self._items[victim_idx]
            if req.priority > victim.priority:
                del self._items[victim_idx]
                self.last_evicted = victim
                logger.warning(
                    "[notifications] queue full, evicted %s notice %s",
                    victim.type_tag.value,
                    victim.notice_id,
                )
            else:
                logger.warning(
                    "[notifications] queue full, rejected %s notice %s",
                    req.type_tag.value,
                    req.notice_id,
                )
                return False
        bisect.insort(self._items, req, key=lambda r: r.sort_key)
        return True

    def peek_head(self) -> Optional[NoticeRequest]:
        return self._items[0] if self._items else None

    def dequeue(self) -> Optional[NoticeRequest]:
        return self._items.pop(0) if self._items else None

    def withdraw(self, notice_id: str) -> Optional[NoticeRequest]:
        for idx, req in enumerate(self._items):
            if req.notice_id == notice_id:
                return self._items.pop(idx)
        return None

    def _victim_index(self) -> int:
        lowest = self._items[-1].priority
        idx = len(self._items) - 1
        while idx > 0 and self._items[idx - 1].priority == lowest:
            idx -= 1
        return idx

    def resize(self, max_size: int) -> List[NoticeRequest]:
        """Change the bound, dropping victims until the queue fits."""

        if max_size < 1:
            raise ValueError("max_size must be >= 1")
        self._max_size = max_size
        dropped: List[NoticeRequest] = []
        while len(self._items) > max_size:
            dropped.append(self._items.pop(self._victim_index()))
        return dropped

    def clear(self) -> int:
        """Drop everything without running the eviction policy."""

        dropped = len(self._items)
        self._items.clear()
        return dropped


__all__ = ["AdmissionQueue"]
