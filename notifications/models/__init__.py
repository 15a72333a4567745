from .config import NotificationConfig, load_notification_config
from .notification import (
    DEFAULT_DURATIONS_MS,
    TYPE_PRIORITY,
    DisplayedNotice,
    LifecycleState,
    NoticeAction,
    NoticeRequest,
    NoticeType,
    PriorityClass,
    SchedulerStatus,
)

__all__ = [
    "DEFAULT_DURATIONS_MS",
    "TYPE_PRIORITY",
    "DisplayedNotice",
    "LifecycleState",
    "NoticeAction",
    "NoticeRequest",
    "NoticeType",
    "NotificationConfig",
    "PriorityClass",
    "SchedulerStatus",
    "load_notification_config",
]
