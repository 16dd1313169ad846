"""Frame-driven one-shot timer used for movement ticks and delayed restarts."""

from __future__ import annotations


class TickScheduler:
    """Fires once after *interval* seconds of accumulated frame time.

    The host's frame driver feeds elapsed time through :meth:`tick`. A due
    tick disarms the scheduler; its owner re-arms it with :meth:`start` once
    the tick's work is done. Elapsed time restarts from zero on every arm, so
    a slow frame stretches one interval instead of queueing extra ticks.
    """

    def __init__(self, interval: float) -> None:
        if interval < 0:
            raise ValueError("Scheduler interval must not be negative.")
        self.interval = interval
        self._elapsed = 0.0
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def remaining(self) -> float:
        """Seconds left until the next tick, or ``0.0`` when disarmed."""
        if not self._armed:
            return 0.0
        return max(self.interval - self._elapsed, 0.0)

    def start(self) -> None:
        """Cancel any pending tick and schedule a fresh one."""
        self._elapsed = 0.0
        self._armed = True

    def cancel(self) -> None:
        """Drop the pending tick, if any."""
        self._elapsed = 0.0
        self._armed = False

    def tick(self, delta_time: float) -> bool:
        """Advance by *delta_time* seconds. Returns True when the tick is due."""
        if delta_time < 0:
            raise ValueError("delta_time must not be negative.")
        if not self._armed:
            return False
        self._elapsed += delta_time
        if self._elapsed < self.interval:
            return False
        self.cancel()
        return True
