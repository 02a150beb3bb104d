"""Global deadline and OS-signal cancellation for a fetch run."""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import List, Optional

logger = logging.getLogger(__name__)

DEADLINE = "deadline"
SIGNAL = "signal"


class Watchdog:
    """
    A cancellation token for one run. It trips when the armed period runs
    out or when SIGINT/SIGTERM arrives; the orchestrator then cancels every
    in-flight request and returns what has been collected so far.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._timer: Optional[asyncio.Task[None]] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._signals: List[signal.Signals] = []
        self.period: float = 0
        self.reason: Optional[str] = None

    def arm(self, period: float) -> None:
        """Trip the watchdog ``period`` seconds from now.

        Must be called from within a running event loop.
        """
        if self._timer is not None:
            self._timer.cancel()
        self.period = period
        self._timer = asyncio.get_running_loop().create_task(
            self._expire(period), name="watchdog-timer")
        logger.debug("Watchdog armed for %.3f s", period)

    async def _expire(self, period: float) -> None:
        await asyncio.sleep(period)
        self.trip(DEADLINE)

    def listen_signals(self) -> None:
        """Trip on SIGINT or SIGTERM received by the process."""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.trip, SIGNAL)
            except (NotImplementedError, RuntimeError) as exc:
                logger.warning("Cannot listen for %s: %s", sig.name, exc)
                continue
            self._signals.append(sig)
        self._loop = loop

    def trip(self, reason: str) -> None:
        """Signal cancellation. Only the first reason is kept."""
        if self._event.is_set():
            return
        self.reason = reason
        logger.warning("Watchdog tripped (%s); cancelling in-flight requests", reason)
        self._event.set()

    @property
    def armed(self) -> bool:
        return self._timer is not None

    @property
    def tripped(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        """Block until the watchdog trips."""
        await self._event.wait()

    def stop(self) -> None:
        """Disarm the timer and stop listening for signals."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._loop is not None:
            for sig in self._signals:
                self._loop.remove_signal_handler(sig)
            self._signals.clear()
            self._loop = None
