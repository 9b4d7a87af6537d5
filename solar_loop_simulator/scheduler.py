"""
Scheduler Module
================
Recurring callbacks with explicit cancellation. Each scheduled job hands back
a Cancellation; once cancelled the job never fires again.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Tuple

_LOGGER = logging.getLogger(__name__)


class Cancellation:
    """Token that invalidates future firings of one job"""

    def __init__(self):
        self._event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def wait(self, timeout: float) -> bool:
        """Block up to timeout; True once cancelled"""
        return self._event.wait(timeout)


class Scheduler(ABC):
    """Base class for tick schedulers"""

    @abstractmethod
    def schedule_interval(self, interval_s: float, callback: Callable[[], None]) -> Cancellation:
        """
        Call callback every interval_s seconds until cancelled.

        Args:
            interval_s: Period between firings [s]
            callback: Zero-argument callable

        Returns:
            Cancellation token for the job
        """
        pass


class ThreadingScheduler(Scheduler):
    """Fires each job from its own daemon thread"""

    def schedule_interval(self, interval_s: float, callback: Callable[[], None]) -> Cancellation:
        if interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        token = Cancellation()
        thread = threading.Thread(
            target=self._run,
            args=(interval_s, callback, token),
            name="solar-loop-tick",
            daemon=True,
        )
        thread.start()
        return token

    @staticmethod
    def _run(interval_s: float, callback: Callable[[], None], token: Cancellation) -> None:
        while not token.wait(interval_s):
            try:
                callback()
            except Exception:
                _LOGGER.exception("Scheduled callback failed; stopping job")
                token.cancel()


class ManualScheduler(Scheduler):
    """
    Host-driven scheduler.

    Nothing fires on its own; advance() fires every live job. Used where the
    host owns the clock (tests, UI frameworks that rerun on a timer).
    """

    def __init__(self):
        self._jobs: List[Tuple[Callable[[], None], Cancellation]] = []

    def schedule_interval(self, interval_s: float, callback: Callable[[], None]) -> Cancellation:
        if interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        token = Cancellation()
        self._jobs.append((callback, token))
        return token

    @property
    def active_jobs(self) -> int:
        return sum(1 for _, token in self._jobs if not token.cancelled)

    def advance(self, periods: int = 1) -> None:
        """Fire every live job once per period"""
        for _ in range(periods):
            self._jobs = [(cb, token) for cb, token in self._jobs if not token.cancelled]
            for callback, token in list(self._jobs):
                if not token.cancelled:
                    callback()
