"""Qt widgets that render toasts for ``NotificationScheduler``."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from PySide6.QtCore import QObject, Qt, Signal
from PySide6.QtWidgets import (
    QApplication,
    QBoxLayout,
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from notifications.models.notification import DisplayedNotice, NoticeRequest

logger = logging.getLogger(__name__)

# Severity colours ---------------------------------------------------------
TOAST_COLORS = {
    "info": "#0288d1",
    "success": "#388e3c",
    "warning": "#F6C85B",
    "error": "#F45B69",
}

TOAST_STYLESHEET = "\n".join(
    [
        "QFrame[toast=\"true\"] { background: #1f1f23; border: 1px solid #2a2a2e;"
        " border-radius: 8px; color: #e0e0e0; }",
        "QFrame[toast=\"true\"][toastState=\"entering\"] { border-color: #2a2a2e; }",
        "QFrame[toast=\"true\"][toastState=\"removing\"],"
        " QFrame[toast=\"true\"][toastState=\"sliding-up\"] { color: #888888; }",
    ]
    + [
        f"QFrame[toast=\"true\"][toastType=\"{kind}\"][toastState=\"visible\"]"
        f" {{ border-left: 4px solid {color}; }}"
        for kind, color in TOAST_COLORS.items()
    ]
)

_VERTICAL = {
    "top": Qt.AlignmentFlag.AlignTop,
    "bottom": Qt.AlignmentFlag.AlignBottom,
}
_HORIZONTAL = {
    "left": Qt.AlignmentFlag.AlignLeft,
    "center": Qt.AlignmentFlag.AlignHCenter,
    "right": Qt.AlignmentFlag.AlignRight,
}


class ToastWidget(QFrame):
    """A single toast: optional icon, plain-text message, action and close button."""

    closeRequested = Signal()

    def __init__(self, request: NoticeRequest, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.notice_id = request.notice_id
        self.setObjectName(f"toast_{request.type_tag.value}")
        self.setProperty("toast", True)
        self.setProperty("toastType", request.type_tag.value)
        self.setProperty("toastState", "entering")
        self.setStyleSheet(TOAST_STYLESHEET)

        row = QHBoxLayout(self)
        row.setContentsMargins(10, 6, 6, 6)
        row.setSpacing(8)

        if request.icon:
            icon = QLabel(request.icon)
            icon.setObjectName("toast_icon")
            row.addWidget(icon)

        self.message_label = QLabel(request.message)
        self.message_label.setObjectName("toast_message")
        self.message_label.setTextFormat(Qt.TextFormat.PlainText)
        self.message_label.setWordWrap(True)
        row.addWidget(self.message_label, 1)

        self.action_button: Optional[QPushButton] = None
        if request.action is not None:
            self.action_button = QPushButton(request.action.label)
            self.action_button.setObjectName("toast_action")
            callback = request.action.callback
            self.action_button.clicked.connect(lambda *_: callback())
            row.addWidget(self.action_button)

        self.close_button: Optional[QPushButton] = None
        if request.dismissible:
            self.close_button = QPushButton("×")
            self.close_button.setObjectName("toast_close")
            self.close_button.setFlat(True)
            self.close_button.setToolTip("Close")
            self.close_button.setAccessibleName("Close notification")
            self.close_button.clicked.connect(lambda *_: self.closeRequested.emit())
            row.addWidget(self.close_button)

    @property
    def state(self) -> str:
        return str(self.property("toastState"))

    def set_state(self, state: str) -> None:
        self.setProperty("toastState", state)
        self.style().unpolish(self)
        self.style().polish(self)


def _resolve_target(target: Any) -> Optional[QWidget]:
    if isinstance(target, QWidget):
        return target
    if not isinstance(target, str) or not target:
        return None
    if QApplication.instance() is None:
        return None
    name = target.lstrip("#")
    for widget in QApplication.allWidgets():
        if widget.objectName() == name:
            return widget
    return None


class ToastOverlay(QObject):
    """Presentation port that stacks ``ToastWidget``s inside a host widget."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._container: Optional[QWidget] = None
        self._layout: Optional[QBoxLayout] = None
        self._h_align = Qt.AlignmentFlag.AlignHCenter
        self._toasts: List[ToastWidget] = []

    # ----- Port ------------------------------------------------------------
    def attach(self, target: Any, position: str = "bottom-center") -> bool:
        container = _resolve_target(target)
        if container is None:
            return False
        layout = container.layout()
        if layout is None:
            layout = QVBoxLayout(container)
            layout.setContentsMargins(8, 8, 8, 8)
            layout.setSpacing(6)
        elif not isinstance(layout, QBoxLayout):
            logger.warning("[notifications] %r has a non-box layout", container.objectName())
            return False

        vertical, _, horizontal = position.partition("-")
        layout.setAlignment(_VERTICAL.get(vertical, Qt.AlignmentFlag.AlignBottom))
        self._h_align = _HORIZONTAL.get(horizontal, Qt.AlignmentFlag.AlignHCenter)
        container.setProperty("toastPosition", position)
        self._container = container
        self._layout = layout
        return True

    def show(self, notice: DisplayedNotice, on_close: Optional[Callable[[], None]]) -> ToastWidget:
        if self._container is None or self._layout is None:
            raise RuntimeError("ToastOverlay is not attached")
        widget = ToastWidget(notice.request, self._container)
        if on_close is not None:
            widget.closeRequested.connect(on_close)
        self._layout.addWidget(widget, 0, self._h_align)
        widget.show()
        self._toasts.append(widget)
        return widget

    def reveal(self, artifact: ToastWidget) -> None:
        if artifact is not None:
            artifact.set_state("visible")

    def hide(self, artifact: ToastWidget, preempted: bool = False) -> None:
        if artifact is None:
            return
        artifact.set_state("sliding-up" if preempted else "removing")
        artifact.setEnabled(False)

    def remove(self, artifact: ToastWidget) -> None:
        if artifact is None or artifact not in self._toasts:
            return
        self._toasts.remove(artifact)
        if self._layout is not None:
            self._layout.removeWidget(artifact)
        artifact.hide()
        artifact.deleteLater()

    def detach(self) -> None:
        for widget in list(self._toasts):
            self.remove(widget)
        self._container = None
        self._layout = None

    # ----- Introspection ---------------------------------------------------
    @property
    def container(self) -> Optional[QWidget]:
        return self._container

    def toasts(self) -> List[ToastWidget]:
        return list(self._toasts)


__all__ = ["TOAST_COLORS", "ToastOverlay", "ToastWidget"]
