from __future__ import annotations

import logging
from typing import Callable, Optional

from notifications.models.notification import DisplayedNotice
from .admission_queue import AdmissionQueue
from .capacity import CapacityManager
from .lifecycle import LifecycleScheduler

logger = logging.getLogger(__name__)


class Dispatcher:
    """Moves requests from the admission queue into display slots.

    ``process`` is the only place that admits or preempts. It always reads
    the live queue and pools, and a call arriving while it is already
    running (a synchronous clock, a port calling back) only flags a rerun
    for the outer loop instead of nesting.
    """

    def __init__(
        self,
        queue: AdmissionQueue,
        capacity: CapacityManager,
        lifecycle: LifecycleScheduler,
        *,
        is_active: Callable[[], bool],
        close_handler: Callable[[str], None],
        on_preempted: Optional[Callable[[DisplayedNotice], None]] = None,
    ) -> None:
        self.queue = queue
        self.capacity = capacity
        self.lifecycle = lifecycle
        self._is_active = is_active
        self._close_handler = close_handler
        self._on_preempted = on_preempted
        self._running = False
        self._rerun = False

    def process(self) -> Optional[DisplayedNotice]:
        """Admit as much of the queue as capacity allows; return the last admitted notice."""

        if self._running:
            self._rerun = True
            return None
        self._running = True
        last: Optional[DisplayedNotice] = None
        try:
            while True:
                self._rerun = False
                last = self._drain() or last
                if not self._rerun:
                    break
        finally:
            self._running = False
        return last

    def _drain(self) -> Optional[DisplayedNotice]:
        last: Optional[DisplayedNotice] = None
        while self._is_active():
            head = self.queue.peek_head()
            if head is None:
                break
            if not self.capacity.can_admit(head):
                victim = self.capacity.find_preemption_candidate(head)
                if victim is None:
                    break
                self.lifecycle.force_retire(victim, preempted=True)
                logger.debug(
                    "[notifications] %s preempted by %s", victim.notice_id, head.notice_id
                )
                if self._on_preempted is not None:
                    self._on_preempted(victim)
                if not self.capacity.can_admit(head):
                    break
            last = self._admit_head()
        return last

    def _admit_head(self) -> DisplayedNotice:
        req = self.queue.dequeue()
        assert req is not None
        notice = DisplayedNotice(request=req)
        self.capacity.admit(notice)
        notice_id = req.notice_id
        self.lifecycle.activate(notice, on_close=lambda: self._close_handler(notice_id))
        logger.debug(
            "[notifications] admitted %s notice %s (%s)",
            req.type_tag.value,
            notice_id,
            "persistent" if req.persistent else "transient",
        )
        return notice


__all__ = ["Dispatcher"]
