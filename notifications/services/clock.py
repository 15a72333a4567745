from __future__ import annotations

import heapq
import itertools
import logging
from typing import Callable, Dict, List, Tuple

from PySide6.QtCore import QObject, QTimer

logger = logging.getLogger(__name__)


class ManualClock:
    """Virtual clock: callbacks only run when ``advance`` moves time forward.

    Callbacks due at the same instant run in scheduling order. A callback may
    schedule further callbacks; those run within the same ``advance`` call if
    they fall due before its end.
    """

    def __init__(self) -> None:
        self._now = 0
        self._ids = itertools.count(1)
        self._heap: List[Tuple[int, int]] = []
        self._callbacks: Dict[int, Callable[[], None]] = {}

    @property
    def now(self) -> int:
        return self._now

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> int:
        handle = next(self._ids)
        heapq.heappush(self._heap, (self._now + max(0, int(delay_ms)), handle))
        self._callbacks[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._callbacks.pop(handle, None)

    def pending(self) -> int:
        return len(self._callbacks)

    def advance(self, ms: int = 0) -> int:
        """Move time forward by ``ms`` and fire what falls due. Returns the fire count."""

        deadline = self._now + max(0, int(ms))
        fired = 0
        while self._heap and self._heap[0][0] <= deadline:
            due, handle = heapq.heappop(self._heap)
            callback = self._callbacks.pop(handle, None)
            if callback is None:
                continue
            self._now = due
            callback()
            fired += 1
        self._now = deadline
        return fired

    def run_until_idle(self, limit: int = 10_000) -> int:
        """Fire everything pending, jumping time as needed."""

        fired = 0
        while self._callbacks and fired < limit:
            while self._heap and self._heap[0][1] not in self._callbacks:
                heapq.heappop(self._heap)
            if not self._heap:
                break
            fired += self.advance(self._heap[0][0] - self._now)
        return fired


class QtClock(QObject):
    """Clock backed by one single-shot ``QTimer`` per callback."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._ids = itertools.count(1)
        self._timers: Dict[int, QTimer] = {}

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> int:
        handle = next(self._ids)
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda: self._fire(handle, callback))
        self._timers[handle] = timer
        timer.start(max(0, int(delay_ms)))
        return handle

    def cancel(self, handle: int) -> None:
        timer = self._timers.pop(handle, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()

    def pending(self) -> int:
        return len(self._timers)

    def cancel_all(self) -> None:
        for handle in list(self._timers):
            self.cancel(handle)

    def _fire(self, handle: int, callback: Callable[[], None]) -> None:
        timer = self._timers.pop(handle, None)
        if timer is None:
            return
        timer.deleteLater()
        try:
            callback()
        except Exception:
            # Raising out of a Qt slot only prints; keep the traceback in the log.
            logger.exception("[notifications] timer callback %s failed", handle)


__all__ = ["ManualClock", "QtClock"]
