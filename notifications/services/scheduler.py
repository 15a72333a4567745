from __future__ import annotations

import itertools
import logging
from collections import Counter
from typing import Any, Dict, Optional

from PySide6.QtCore import QObject, Signal

from notifications.models.config import NotificationConfig, coerce_config
from notifications.models.notification import (
    DisplayedNotice,
    NoticeType,
    SchedulerStatus,
)
from .admission_queue import AdmissionQueue
from .capacity import CapacityManager
from .clock import QtClock
from .dispatcher import Dispatcher
from .lifecycle import LifecycleScheduler
from .normalizer import normalize
from .ports import ClockPort, PresentationPort

logger = logging.getLogger(__name__)


class NotificationScheduler(QObject):
    """Decides which toasts are shown, which wait, and when each one leaves.

    Nothing raises across this surface: bad input is normalised or ignored,
    a full queue yields ``None`` from ``show``, and an unusable configuration
    makes ``init`` return ``False``.
    """

    noticeShown = Signal(str)
    noticeRemoved = Signal(str)
    noticeDropped = Signal(str)

    def __init__(
        self,
        presenter: PresentationPort | None = None,
        clock: ClockPort | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        if presenter is None:
            from notifications.panels.toast_overlay import ToastOverlay

            presenter = ToastOverlay()
        self._presenter = presenter
        self._owned_clock: Optional[QtClock] = None
        if clock is None:
            clock = self._owned_clock = QtClock(self)
        self._clock = clock
        self._config = NotificationConfig()
        self._initialized = False
        self._attached = False
        self._enabled = self._config.enabled
        self._sequence = itertools.count()
        self._metrics: Counter[str] = Counter()

        self._queue = AdmissionQueue(self._config.max_queue_size)
        self._capacity = CapacityManager(self._config.max_visible, self._config.max_persistent)
        self._lifecycle = LifecycleScheduler(
            self._clock,
            self._presenter,
            self._capacity,
            animations_enabled=self._config.animations_enabled,
            removal_delay_ms=self._config.removal_delay_ms,
            on_visible=self._on_visible,
            on_removed=self._on_removed,
            on_expired=self._on_expired,
        )
        self._dispatcher = Dispatcher(
            self._queue,
            self._capacity,
            self._lifecycle,
            is_active=lambda: self._initialized and self._enabled,
            close_handler=self.dismiss,
            on_preempted=self._on_preempted,
        )

    # ---- Setup -------------------------------------------------------------
    @property
    def config(self) -> NotificationConfig:
        return self._config

    @property
    def clock(self) -> ClockPort:
        return self._clock

    def init(self, config: NotificationConfig | Dict[str, Any] | None = None) -> bool:
        """Apply ``config`` and bind to its presentation target.

        An invalid config returns ``False`` and changes nothing. An
        unresolvable target returns ``False`` and leaves the scheduler
        inactive until the next successful ``init``.
        """

        cfg = coerce_config(config)
        if cfg is None:
            return False

        # Artifacts belong to the previous target.
        self._retire_all()
        self._detach()
        self._initialized = False
        self._apply(cfg)

        try:
            attached = bool(self._presenter.attach(cfg.presentation_target, cfg.position))
        except Exception:
            logger.exception("[notifications] attaching to %r failed", cfg.presentation_target)
            attached = False
        if not attached:
            logger.warning(
                "[notifications] presentation target not found: %r", cfg.presentation_target
            )
            return False

        self._attached = True
        self._initialized = True
        self._enabled = cfg.enabled
        logger.debug("[notifications] initialised (%s)", cfg.position)
        self._dispatcher.process()
        return True

    def _apply(self, cfg: NotificationConfig) -> None:
        self._config = cfg
        self._capacity.max_visible = cfg.max_visible
        self._capacity.max_persistent = cfg.max_persistent
        self._lifecycle.animations_enabled = cfg.animations_enabled
        self._lifecycle.removal_delay_ms = cfg.removal_delay_ms
        for req in self._queue.resize(cfg.max_queue_size):
            self._drop(req.notice_id)

    # ---- Public API --------------------------------------------------------
    def show(self, message: Any, type_or_options: Any = NoticeType.INFO, duration: Any = None) -> Optional[str]:
        """Queue a notice and admit what fits.

        Accepts ``show(message, type, duration)`` or ``show(message, options)``.
        Returns the notice id, or ``None`` when the full queue rejected it.
        """

        req = normalize(
            message,
            type_or_options,
            duration,
            durations=self._config.durations,
            sequence=next(self._sequence),
        )
        if not self._queue.enqueue(req):
            self._drop(req.notice_id)
            return None
        self._metrics["notification.queued"] += 1
        evicted = self._queue.last_evicted
        if evicted is not None:
            self._drop(evicted.notice_id)
        self._dispatcher.process()
        return req.notice_id

    def _typed(self, type_tag: NoticeType, message: Any, duration_or_options: Any) -> Optional[str]:
        if isinstance(duration_or_options, dict):
            return self.show(message, {**duration_or_options, "type": type_tag})
        if isinstance(duration_or_options, (int, float)) and not isinstance(duration_or_options, bool):
            return self.show(message, type_tag, duration_or_options)
        return self.show(message, type_tag)

    def success(self, message: Any, duration_or_options: Any = None) -> Optional[str]:
        return self._typed(NoticeType.SUCCESS, message, duration_or_options)

    def error(self, message: Any, duration_or_options: Any = None) -> Optional[str]:
        return self._typed(NoticeType.ERROR, message, duration_or_options)

    def warning(self, message: Any, duration_or_options: Any = None) -> Optional[str]:
        return self._typed(NoticeType.WARNING, message, duration_or_options)

    def info(self, message: Any, duration_or_options: Any = None) -> Optional[str]:
        return self._typed(NoticeType.INFO, message, duration_or_options)

    def dismiss(self, handle: Any) -> None:
        """Close a notice early. Unknown or already closing handles are ignored."""

        notice_id = getattr(handle, "notice_id", handle)
        if not isinstance(notice_id, str):
            return
        if self._queue.withdraw(notice_id) is not None:
            logger.debug("[notifications] withdrew queued %s", notice_id)
            return
        notice = self._capacity.get(notice_id)
        if notice is not None and self._lifecycle.retire(notice):
            self._metrics["notification.dismissed.manual"] += 1

    def clear_all(self) -> None:
        """Empty the queue and retire every displayed notice at once."""

        self._queue.clear()
        self._retire_all()

    def enable(self) -> None:
        self._enabled = True
        logger.debug("[notifications] enabled")
        self._dispatcher.process()

    def disable(self) -> None:
        self._enabled = False
        logger.debug("[notifications] disabled")

    def destroy(self) -> None:
        """Cancel all timers, drop every notice and detach from the target."""

        self.clear_all()
        self._detach()
        if self._owned_clock is not None:
            self._owned_clock.cancel_all()
        self._initialized = False
        self._enabled = False
        logger.info("[notifications] destroyed")

    def get_status(self) -> SchedulerStatus:
        return SchedulerStatus(
            queued=len(self._queue),
            transient_count=self._capacity.transient_count,
            persistent_count=self._capacity.persistent_count,
            enabled=self._enabled,
            initialized=self._initialized,
            max_visible=self._config.max_visible,
            max_persistent=self._config.max_persistent,
            position=self._config.position,
            animations_enabled=self._config.animations_enabled,
        )

    def metrics(self) -> Dict[str, int]:
        return dict(self._metrics)

    def clear_metrics(self) -> None:
        self._metrics.clear()

    def notice(self, notice_id: str) -> Optional[DisplayedNotice]:
        """Displayed notice for ``notice_id``; ``None`` if queued or gone."""

        return self._capacity.get(notice_id)

    def queued_ids(self) -> list[str]:
        """Ids still waiting for a slot, in admission order."""

        return [req.notice_id for req in self._queue]

    # ---- Internals ---------------------------------------------------------
    def _detach(self) -> None:
        if self._attached:
            self._attached = False
            self._presenter.detach()

    def _retire_all(self) -> None:
        for notice in self._capacity.displayed():
            self._lifecycle.force_retire(notice)

    def _drop(self, notice_id: str) -> None:
        self._metrics["notification.dropped"] += 1
        self.noticeDropped.emit(notice_id)

    def _on_visible(self, notice: DisplayedNotice) -> None:
        self._metrics[f"notification.shown.{notice.request.type_tag.value}"] += 1
        self.noticeShown.emit(notice.notice_id)

    def _on_expired(self, notice: DisplayedNotice) -> None:
        self._metrics["notification.dismissed.auto"] += 1

    def _on_preempted(self, notice: DisplayedNotice) -> None:
        self._metrics["notification.preempted"] += 1

    def _on_removed(self, notice: DisplayedNotice, reprocess: bool) -> None:
        self.noticeRemoved.emit(notice.notice_id)
        if reprocess:
            self._dispatcher.process()


__all__ = ["NotificationScheduler"]
