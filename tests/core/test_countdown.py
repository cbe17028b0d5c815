"""
Countdown & Timer Tests

Tests for the cancellable timers showing:
- Tick sequence N-1..0 then exactly one completion
- Cancellation (including from inside a callback)
- Restart replacing a previous run
- One-shot timer scaling

To run:
    pytest tests/core/test_countdown.py -v
"""

import asyncio

import pytest

from core.countdown import Countdown, OneShotTimer

TICK = 0.01


@pytest.mark.unit
async def test_countdown_ticks_down_to_zero_then_completes():
    ticks = []
    completions = []
    done = asyncio.Event()

    countdown = Countdown("test", tick_interval=TICK)
    countdown.start(3, ticks.append, lambda: (completions.append(True), done.set()))

    await asyncio.wait_for(done.wait(), 1.0)
    await asyncio.sleep(TICK * 5)

    assert ticks == [2, 1, 0]
    assert completions == [True]
    assert countdown.is_running is False
    assert countdown.remaining is None


@pytest.mark.unit
async def test_countdown_from_zero_completes_without_ticks():
    ticks = []
    done = asyncio.Event()

    countdown = Countdown("zero", tick_interval=TICK)
    countdown.start(0, ticks.append, done.set)

    await asyncio.wait_for(done.wait(), 1.0)
    assert ticks == []


@pytest.mark.unit
async def test_countdown_reports_remaining_while_running():
    countdown = Countdown("remaining", tick_interval=TICK)
    countdown.start(50, lambda remaining: None, lambda: None)

    assert countdown.is_running is True
    assert countdown.remaining == 50

    await asyncio.sleep(TICK * 5)
    assert countdown.remaining < 50

    countdown.cancel()


@pytest.mark.unit
async def test_countdown_cancel_stops_ticks_and_completion():
    ticks = []
    completions = []

    countdown = Countdown("cancel", tick_interval=TICK)
    countdown.start(5, ticks.append, lambda: completions.append(True))

    await asyncio.sleep(TICK * 2.5)
    countdown.cancel()
    ticks_at_cancel = list(ticks)
    await asyncio.sleep(TICK * 10)

    assert ticks == ticks_at_cancel
    assert len(ticks) < 5
    assert completions == []
    assert countdown.is_running is False


@pytest.mark.unit
async def test_countdown_cancel_from_tick_callback_suppresses_completion():
    ticks = []
    completions = []
    countdown = Countdown("reentrant", tick_interval=TICK)

    def on_tick(remaining):
        ticks.append(remaining)
        if remaining == 0:
            countdown.cancel()

    countdown.start(2, on_tick, lambda: completions.append(True))
    await asyncio.sleep(TICK * 10)

    assert ticks == [1, 0]
    assert completions == []


@pytest.mark.unit
async def test_countdown_restart_replaces_previous_run():
    first_completions = []
    second_ticks = []
    done = asyncio.Event()

    countdown = Countdown("restart", tick_interval=TICK)
    countdown.start(10, lambda remaining: None, lambda: first_completions.append(True))
    await asyncio.sleep(TICK * 2)

    countdown.start(2, second_ticks.append, done.set)
    await asyncio.wait_for(done.wait(), 1.0)
    await asyncio.sleep(TICK * 12)

    assert second_ticks == [1, 0]
    assert first_completions == []


@pytest.mark.unit
async def test_countdown_callback_error_does_not_stop_countdown():
    done = asyncio.Event()
    countdown = Countdown("errors", tick_interval=TICK)

    def broken_tick(remaining):
        raise RuntimeError("display crashed")

    countdown.start(2, broken_tick, done.set)

    await asyncio.wait_for(done.wait(), 1.0)


# =============================================================================
# ONE-SHOT TIMER
# =============================================================================


@pytest.mark.unit
async def test_one_shot_timer_fires_once_after_scaled_delay():
    fired = []
    timer = OneShotTimer("hold", time_scale=0.01)

    timer.start(5, lambda: fired.append(True))  # 0.05s real
    assert timer.is_running is True

    await asyncio.sleep(0.02)
    assert fired == []

    await asyncio.sleep(0.1)
    assert fired == [True]
    assert timer.is_running is False


@pytest.mark.unit
async def test_one_shot_timer_cancel_prevents_firing():
    fired = []
    timer = OneShotTimer("watchdog", time_scale=0.01)

    timer.start(3, lambda: fired.append(True))
    timer.cancel()
    await asyncio.sleep(0.1)

    assert fired == []


@pytest.mark.unit
async def test_one_shot_timer_restart_resets_deadline():
    fired = []
    timer = OneShotTimer("input", time_scale=0.01)

    timer.start(10, lambda: fired.append("first"))
    await asyncio.sleep(0.06)
    timer.start(10, lambda: fired.append("second"))
    await asyncio.sleep(0.06)

    # First deadline (0.1s) has passed, but it was replaced
    assert fired == []

    await asyncio.sleep(0.15)
    assert fired == ["second"]
