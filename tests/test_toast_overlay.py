from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtTest import QTest
from PySide6.QtWidgets import QWidget

from notifications.models.notification import LifecycleState
from notifications.panels.toast_overlay import ToastOverlay, ToastWidget
from notifications.services.clock import ManualClock, QtClock
from notifications.services.scheduler import NotificationScheduler


def _host(name: str = "notification-area") -> QWidget:
    host = QWidget()
    host.setObjectName(name)
    return host


def test_attach_resolves_widget_or_object_name(qapp) -> None:
    host = _host("toast-host")
    overlay = ToastOverlay()
    assert overlay.attach(host) is True
    assert overlay.container is host

    other = ToastOverlay()
    assert other.attach("#toast-host", "top-right") is True
    assert other.container is host
    assert host.property("toastPosition") == "top-right"

    assert ToastOverlay().attach("#no-such-widget") is False
    assert ToastOverlay().attach(None) is False
    host.deleteLater()


def test_scheduler_renders_and_removes_toasts(qapp) -> None:
    host = _host()
    clock = ManualClock()
    overlay = ToastOverlay()
    sched = NotificationScheduler(presenter=overlay, clock=clock)
    assert sched.init({"presentation_target": host, "max_visible": 2})

    nid = sched.error("Disk <b>full</b>", {"icon": "!"})
    sticky = sched.info("Syncing", {"persistent": True, "dismissible": False})
    [toast, sticky_toast] = overlay.toasts()
    assert isinstance(toast, ToastWidget)
    assert toast.notice_id == nid
    assert toast.message_label.text() == "Disk <b>full</b>"
    assert toast.message_label.textFormat() == Qt.TextFormat.PlainText
    assert toast.state == "entering"
    assert sticky_toast.close_button is None

    clock.advance(0)
    assert toast.state == "visible"

    toast.close_button.click()
    assert sched.notice(nid).state is LifecycleState.REMOVING
    assert toast.state == "removing"

    clock.advance(200)
    assert overlay.toasts() == [sticky_toast]
    sched.destroy()
    assert overlay.toasts() == []
    assert overlay.container is None
    host.deleteLater()


def test_preempted_toast_slides_up(qapp) -> None:
    host = _host()
    overlay = ToastOverlay()
    sched = NotificationScheduler(presenter=overlay, clock=ManualClock())
    assert sched.init({"presentation_target": host, "max_visible": 1, "animations_enabled": False})

    sched.info("old")
    [old] = overlay.toasts()
    sched.error("new")

    assert old.state == "sliding-up"
    assert [t.message_label.text() for t in overlay.toasts()] == ["new"]
    sched.destroy()
    host.deleteLater()


def test_action_button_invokes_callback(qapp) -> None:
    host = _host()
    overlay = ToastOverlay()
    sched = NotificationScheduler(presenter=overlay, clock=ManualClock())
    assert sched.init({"presentation_target": host})
    fired: list[int] = []

    sched.success("Deleted", {"action": {"label": "Undo", "callback": lambda: fired.append(1)}})
    [toast] = overlay.toasts()
    assert toast.action_button is not None
    toast.action_button.click()
    assert fired == [1]
    sched.destroy()
    host.deleteLater()


def test_qt_clock_drives_full_lifecycle(qapp) -> None:
    host = _host()
    overlay = ToastOverlay()
    sched = NotificationScheduler(presenter=overlay, clock=QtClock())
    assert sched.init({"presentation_target": host, "removal_delay_ms": 10})
    removed: list[str] = []
    sched.noticeRemoved.connect(removed.append)

    nid = sched.info("quick", 30)
    QTest.qWait(300)

    assert removed == [nid]
    assert overlay.toasts() == []
    assert sched.get_status().transient_count == 0
    sched.destroy()
    host.deleteLater()


def test_destroy_cancels_timers_of_its_own_clock(qapp) -> None:
    host = _host()
    sched = NotificationScheduler(presenter=ToastOverlay())
    assert sched.init({"presentation_target": host})
    sched.info("pending")
    sched.clock.schedule(60_000, lambda: None)
    assert sched.clock.pending() > 0

    sched.destroy()
    assert sched.clock.pending() == 0
    host.deleteLater()
