"""Collaborators the toast scheduler drives but does not own."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

from notifications.models.notification import DisplayedNotice


class ClockPort(Protocol):
    """Delayed callback service."""

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        """Run ``callback`` once after ``delay_ms`` and return a cancel handle."""

    def cancel(self, handle: Any) -> None:
        """Cancel a pending callback. Unknown or spent handles are ignored."""


class PresentationPort(Protocol):
    """Creates and destroys the visible artifact for a notice."""

    def attach(self, target: Any, position: str = "bottom-center") -> bool:
        """Bind to the display surface; ``False`` if it cannot be resolved."""

    def show(
        self,
        notice: DisplayedNotice,
        on_close: Optional[Callable[[], None]],
    ) -> Any:
        """Create the artifact. ``on_close`` is ``None`` for non-dismissible notices."""

    def reveal(self, artifact: Any) -> None:
        """Apply the enter transition."""

    def hide(self, artifact: Any, preempted: bool = False) -> None:
        """Start the exit transition."""

    def remove(self, artifact: Any) -> None:
        """Destroy the artifact."""

    def detach(self) -> None:
        """Forget the surface and drop any artifacts still on it."""


__all__ = ["ClockPort", "PresentationPort"]
