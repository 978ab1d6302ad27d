"""
Transient status line.

Holds one user-facing status string that falls back to an idle label after a
delay. It is UX state, not a log: overlapping reports do not queue, the last
report's timer wins.
"""

import asyncio

from notestream.utils.logger import get_logger

logger = get_logger(__name__)


class StatusReporter:
    """Auto-expiring status line driven by the running event loop."""

    def __init__(self, idle_label: str = "Ready", default_duration_ms: int = 3000):
        """
        Initialize the reporter.

        Args:
            idle_label: Status shown when nothing has been reported recently
            default_duration_ms: Expiry used when `report` gets no duration
        """
        self.idle_label = idle_label
        self.default_duration_ms = default_duration_ms
        self._current = idle_label
        self._reset_handle: asyncio.TimerHandle | None = None

    @property
    def current(self) -> str:
        return self._current

    def report(self, message: str, duration_ms: int | None = None) -> None:
        """
        Show a status that reverts to the idle label after `duration_ms`.

        A later call cancels the pending reset of an earlier one.
        """
        duration_ms = self.default_duration_ms if duration_ms is None else duration_ms
        self._cancel_reset()
        self._current = message
        logger.bind(duration_ms=duration_ms).debug("Status: {}", message)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop to expire on; the status stays until the next report
            logger.debug("No running event loop, status will not auto-expire")
            return
        self._reset_handle = loop.call_later(duration_ms / 1000, self._reset)

    def set(self, message: str) -> None:
        """Show a status that stays until the next `report` or `set` call."""
        self._cancel_reset()
        self._current = message
        logger.debug("Status: {}", message)

    def close(self) -> None:
        """Cancel any pending reset."""
        self._cancel_reset()

    def _reset(self) -> None:
        self._reset_handle = None
        self._current = self.idle_label

    def _cancel_reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None
