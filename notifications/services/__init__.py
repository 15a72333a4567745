from .admission_queue import AdmissionQueue
from .capacity import CapacityManager
from .clock import ManualClock, QtClock
from .dispatcher import Dispatcher
from .lifecycle import LifecycleScheduler
from .normalizer import normalize, resolve_type
from .ports import ClockPort, PresentationPort
from .scheduler import NotificationScheduler

__all__ = [
    "AdmissionQueue",
    "CapacityManager",
    "ClockPort",
    "Dispatcher",
    "LifecycleScheduler",
    "ManualClock",
    "NotificationScheduler",
    "PresentationPort",
    "QtClock",
    "normalize",
    "resolve_type",
]
