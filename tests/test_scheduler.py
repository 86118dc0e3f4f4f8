import asyncio
import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock

from cogs.streams import scheduler
from cogs.streams.scheduler import StreamScheduler, interval_timer


@pytest.mark.asyncio
async def test_interval_timer_runs_first_tick_immediately():
    calls = []

    async def tick():
        calls.append(asyncio.get_running_loop().time())

    loop = interval_timer(60, tick)
    loop.start()
    await asyncio.sleep(0.05)
    loop.cancel()

    assert len(calls) == 1
    assert loop.seconds == 60


@pytest.mark.asyncio
async def test_interval_timer_delays_first_tick():
    calls = []
    ready = []

    async def tick():
        calls.append(True)

    async def before():
        ready.append(True)

    loop = interval_timer(0.2, tick, delay_first=True, before=before)
    loop.start()
    await asyncio.sleep(0.05)
    assert ready == [True]
    assert calls == []

    await asyncio.sleep(0.25)
    loop.cancel()
    assert len(calls) >= 1


def test_scheduler_starts_and_stops_every_target(monkeypatch, timers):
    monkeypatch.setattr(scheduler, 'interval_timer', timers)
    pollers = []
    for name, interval in (('Twitch', 90), ('YouTube', 120)):
        poller = MagicMock()
        poller.style = SimpleNamespace(name=name)
        poller.config = SimpleNamespace(poll_interval=interval, channel='lunar')
        pollers.append(poller)

    stream_scheduler = StreamScheduler(pollers)
    stream_scheduler.start()

    assert [timer.seconds for timer in timers.created] == [90, 120]
    assert all(timer.running for timer in timers.created)
    assert timers.created[0].callback is pollers[0].liveness_tick

    stream_scheduler.stop()

    assert not any(timer.running for timer in timers.created)
    assert stream_scheduler.loops == []
    for poller in pollers:
        poller.stop_updates.assert_called_once()
