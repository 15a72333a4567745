"""Per-notice state machine: Entering -> Visible -> Removing -> Removed.

Every delayed step goes through the clock port, so each notice owns at most
one enter, one dismiss and one removal timer at a time. Reaching ``Removed``
releases the pool slot and hands control back to the dispatcher.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from notifications.models.notification import DisplayedNotice, LifecycleState
from .capacity import CapacityManager
from .ports import ClockPort, PresentationPort

logger = logging.getLogger(__name__)

_TIMER_ATTRS = ("enter_timer", "dismiss_timer", "removal_timer")

NoticeCallback = Callable[[DisplayedNotice], None]
RemovedCallback = Callable[[DisplayedNotice, bool], None]


class LifecycleScheduler:
    def __init__(
        self,
        clock: ClockPort,
        presenter: PresentationPort,
        capacity: CapacityManager,
        *,
        animations_enabled: bool = True,
        removal_delay_ms: int = 200,
        on_visible: Optional[NoticeCallback] = None,
        on_removed: Optional[RemovedCallback] = None,
        on_expired: Optional[NoticeCallback] = None,
    ) -> None:
        self._clock = clock
        self._presenter = presenter
        self._capacity = capacity
        self.animations_enabled = animations_enabled
        self.removal_delay_ms = removal_delay_ms
        self._on_visible = on_visible
        self._on_removed = on_removed
        self._on_expired = on_expired

    # ----- Timers ----------------------------------------------------------
    def _arm(self, notice: DisplayedNotice, attr: str, delay_ms: int, callback: Callable[[], None]) -> None:
        self._cancel(notice, attr)
        setattr(notice, attr, self._clock.schedule(delay_ms, callback))

    def _cancel(self, notice: DisplayedNotice, attr: str) -> None:
        handle = getattr(notice, attr)
        if handle is not None:
            setattr(notice, attr, None)
            self._clock.cancel(handle)

    def cancel_timers(self, notice: DisplayedNotice) -> None:
        for attr in _TIMER_ATTRS:
            self._cancel(notice, attr)

    def _port(self, method: str, *args: Any) -> Any:
        try:
            return getattr(self._presenter, method)(*args)
        except Exception:
            logger.exception("[notifications] presentation %s() failed", method)
            return None

    # ----- Transitions -----------------------------------------------------
    def activate(self, notice: DisplayedNotice, on_close: Optional[Callable[[], None]] = None) -> None:
        """Create the artifact and start the enter transition."""

        notice.state = LifecycleState.ENTERING
        artifact = self._port("show", notice, on_close if notice.request.dismissible else None)
        if notice.state is LifecycleState.REMOVED:
            # Closed from inside the port's show(); the artifact never got recorded.
            self._port("remove", artifact)
            return
        notice.artifact = artifact
        if notice.state is not LifecycleState.ENTERING:
            return
        if self.animations_enabled:
            # Two zero-delay hops give the surface a frame to lay out before the transition.
            self._arm(notice, "enter_timer", 0, lambda: self._next_frame(notice))
        else:
            self._reveal(notice)

    def _next_frame(self, notice: DisplayedNotice) -> None:
        notice.enter_timer = None
        if notice.state is LifecycleState.ENTERING:
            self._arm(notice, "enter_timer", 0, lambda: self._reveal(notice))

    def _reveal(self, notice: DisplayedNotice) -> None:
        notice.enter_timer = None
        if notice.state is not LifecycleState.ENTERING:
            return
        self._port("reveal", notice.artifact)
        notice.state = LifecycleState.VISIBLE
        if not notice.persistent and notice.request.duration_ms is not None:
            self._arm(notice, "dismiss_timer", notice.request.duration_ms, lambda: self._expire(notice))
        if self._on_visible is not None:
            self._on_visible(notice)

    def _expire(self, notice: DisplayedNotice) -> None:
        notice.dismiss_timer = None
        if self.retire(notice) and self._on_expired is not None:
            self._on_expired(notice)

    def retire(self, notice: DisplayedNotice) -> bool:
        """Start removal. Returns ``False`` if the notice is already on its way out."""

        if notice.state in (LifecycleState.REMOVING, LifecycleState.REMOVED):
            return False
        self._cancel(notice, "enter_timer")
        self._cancel(notice, "dismiss_timer")
        notice.state = LifecycleState.REMOVING
        self._port("hide", notice.artifact, False)
        delay = self.removal_delay_ms if self.animations_enabled else 0
        self._arm(notice, "removal_timer", delay, lambda: self._finish(notice))
        logger.debug("[notifications] removing %s", notice.notice_id)
        return True

    def force_retire(self, notice: DisplayedNotice, *, preempted: bool = False) -> bool:
        """Drive the notice straight to ``Removed`` without re-running the dispatcher."""

        if notice.state is LifecycleState.REMOVED:
            return False
        self.cancel_timers(notice)
        if notice.state is not LifecycleState.REMOVING:
            notice.state = LifecycleState.REMOVING
            notice.preempted = preempted
            self._port("hide", notice.artifact, preempted)
        self._finish(notice, reprocess=False)
        return True

    def _finish(self, notice: DisplayedNotice, reprocess: bool = True) -> None:
        notice.removal_timer = None
        if notice.state is LifecycleState.REMOVED:
            return
        notice.state = LifecycleState.REMOVED
        self._port("remove", notice.artifact)
        notice.artifact = None
        self._capacity.release(notice)
        logger.debug("[notifications] removed %s", notice.notice_id)
        if self._on_removed is not None:
            self._on_removed(notice, reprocess)


__all__ = ["LifecycleScheduler"]
