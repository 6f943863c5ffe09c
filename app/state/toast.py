"""
==============================================================================
Toast Notifier
==============================================================================

Single-slot notification shared by the whole process.

A new toast replaces the current one and cancels its pending auto-dismiss
timer. A duration of 0 keeps the toast visible until hide() is called.

Timers come from a scheduler with the shape of
``asyncio.AbstractEventLoop.call_later``: ``call_later(delay_seconds,
callback)`` returning a handle with ``cancel()``. The default scheduler uses
the running event loop.

==============================================================================
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Union


# Module logger
logger = logging.getLogger(__name__)


class ToastKind(str, enum.Enum):
    """Severity of a toast."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"

    def __str__(self) -> str:
        return self.value


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


def loop_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    """Schedule ``callback`` on the running event loop."""
    return asyncio.get_running_loop().call_later(delay, callback)


@dataclass
class Toast:
    """The current notification."""

    message: str = ""
    kind: ToastKind = ToastKind.SUCCESS
    visible: bool = False
    duration_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


class ToastNotifier:
    """
    Owner of the single toast slot.

    Example:
        >>> notifier = ToastNotifier()
        >>> notifier.show("Producto guardado", "success", 3000)
        >>> notifier.toast.visible
        True
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        default_duration_ms: int = 3000
    ) -> None:
        self._scheduler = scheduler or loop_scheduler
        self._default_duration_ms = default_duration_ms
        self._timer: Optional[TimerHandle] = None
        self.toast = Toast()

    def show(
        self,
        message: str,
        kind: Union[ToastKind, str] = ToastKind.SUCCESS,
        duration_ms: Optional[int] = None
    ) -> Toast:
        """
        Replace the current toast and arm its auto-dismiss timer.

        Args:
            message: Text to display
            kind: success, error or info
            duration_ms: Auto-dismiss delay; 0 keeps it until hide()

        Returns:
            The toast now displayed
        """
        if duration_ms is None:
            duration_ms = self._default_duration_ms
        if duration_ms < 0:
            raise ValueError("duration_ms cannot be negative")

        self._cancel_timer()
        self.toast = Toast(
            message=message,
            kind=ToastKind(kind),
            visible=True,
            duration_ms=duration_ms,
        )

        if duration_ms:
            self._timer = self._scheduler(duration_ms / 1000, self._expire)

        logger.debug(f"Toast shown ({self.toast.kind}): {message}")
        return self.toast

    def hide(self) -> None:
        """Hide the toast now, whatever timer is pending."""
        self._cancel_timer()
        self.toast.visible = False

    def _expire(self) -> None:
        self._timer = None
        self.toast.visible = False

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
