"""
Countdown & One-Shot Timers

Cancellable timers built on asyncio tasks. Both run on the caller's event
loop and invoke plain (non-async) callbacks.

Countdown:
    start(N) ticks N-1, N-2, ..., 0 one interval apart, then completes
    exactly once. cancel() stops future ticks and the completion.

OneShotTimer:
    start(delay) fires once after the delay unless cancelled first.

Starting either timer again cancels the previous run on that instance,
so one instance never has more than one run outstanding.

Usage:
    countdown = Countdown("pre-roll")
    countdown.start(3, on_tick=show_number, on_complete=begin_recording)

    timer = OneShotTimer("thank-you")
    timer.start(5, on_fire=return_to_idle)
"""

import asyncio
import logging
from typing import Callable, Optional

from config.settings import COUNTDOWN_TICK_SECONDS


class Countdown:
    """
    One-second (scaled) tick counter.

    Callbacks run on the event loop, one tick at a time. A callback may
    safely cancel or restart the countdown it was called from.
    """

    def __init__(self, name: str = "countdown", tick_interval: float = COUNTDOWN_TICK_SECONDS):
        """
        Args:
            name: Label used in log messages
            tick_interval: Real seconds between ticks (1.0 in production)
        """
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.tick_interval = tick_interval

        self._task: Optional[asyncio.Task] = None
        self._run_id = 0
        self._remaining: Optional[int] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def remaining(self) -> Optional[int]:
        """Last value reported (None when idle)"""
        return self._remaining if self.is_running else None

    def start(
        self,
        from_: int,
        on_tick: Callable[[int], None],
        on_complete: Callable[[], None],
    ) -> None:
        """
        Start counting down from `from_`.

        Must be called from inside a running event loop.

        Args:
            from_: Starting value (the value already on screen)
            on_tick: Called with each new remaining value, ending at 0
            on_complete: Called once after the tick for 0
        """
        self.cancel()
        self._run_id += 1
        self._remaining = from_
        self._task = asyncio.create_task(
            self._run(self._run_id, from_, on_tick, on_complete),
            name=f"countdown-{self.name}",
        )
        self.logger.debug(f"Countdown '{self.name}' started from {from_}")

    def cancel(self) -> None:
        """Stop the countdown; it will neither tick nor complete again"""
        # Bumping the id also covers cancel() called from inside a callback
        self._run_id += 1
        self._remaining = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
            self.logger.debug(f"Countdown '{self.name}' cancelled")
        self._task = None

    async def _run(self, run_id: int, from_: int, on_tick, on_complete) -> None:
        remaining = from_
        while remaining > 0:
            await asyncio.sleep(self.tick_interval)
            if run_id != self._run_id:
                return
            remaining -= 1
            self._remaining = remaining
            self._invoke(on_tick, remaining)

        if run_id != self._run_id:
            return
        self._task = None
        self._remaining = None
        self.logger.debug(f"Countdown '{self.name}' complete")
        self._invoke(on_complete)

    def _invoke(self, callback: Callable, *args) -> None:
        try:
            callback(*args)
        except Exception as e:
            self.logger.error(f"Error in countdown '{self.name}' callback: {e}", exc_info=True)


class OneShotTimer:
    """Fires a callback once after a delay (scaled), unless cancelled"""

    def __init__(self, name: str = "timer", time_scale: float = 1.0):
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.time_scale = time_scale

        self._task: Optional[asyncio.Task] = None
        self._run_id = 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, delay: float, on_fire: Callable[[], None]) -> None:
        """Arm the timer for `delay` seconds, replacing any pending run"""
        self.cancel()
        self._run_id += 1
        self._task = asyncio.create_task(
            self._run(self._run_id, delay * self.time_scale, on_fire),
            name=f"timer-{self.name}",
        )
        self.logger.debug(f"Timer '{self.name}' armed for {delay}s")

    def cancel(self) -> None:
        self._run_id += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
            self.logger.debug(f"Timer '{self.name}' cancelled")
        self._task = None

    async def _run(self, run_id: int, delay: float, on_fire) -> None:
        await asyncio.sleep(delay)
        if run_id != self._run_id:
            return
        self._task = None
        try:
            on_fire()
        except Exception as e:
            self.logger.error(f"Error in timer '{self.name}' callback: {e}", exc_info=True)
