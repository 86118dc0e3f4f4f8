import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from discord.ext import tasks

log = logging.getLogger(__name__)


def interval_timer(seconds: float, callback: Callable[[], Awaitable[None]], *, delay_first: bool = False,
                   before: Optional[Callable[[], Awaitable[None]]] = None) -> tasks.Loop:
    """Build (without starting) a fixed-interval loop running ``callback``.

    ``delay_first`` makes the first run happen one full interval after
    ``start()`` instead of immediately.
    """
    loop = tasks.loop(seconds=seconds)(callback)

    async def before_first_run():
        if before is not None:
            await before()
        if delay_first:
            await asyncio.sleep(seconds)

    loop.before_loop(before_first_run)
    return loop


class StreamScheduler:
    """Liveness loops for every configured stream poller."""

    def __init__(self, pollers: list, wait_until_ready: Optional[Callable[[], Awaitable[None]]] = None):
        self.pollers = pollers
        self.wait_until_ready = wait_until_ready
        self.loops: List[tasks.Loop] = []

    def start(self):
        for poller in self.pollers:
            loop = interval_timer(poller.config.poll_interval, poller.liveness_tick, before=self.wait_until_ready)
            loop.start()
            self.loops.append(loop)
            log.info(f"Polling {poller.style.name} every {poller.config.poll_interval}s for {poller.config.channel}")

    def stop(self):
        for loop in self.loops:
            loop.cancel()
        self.loops.clear()
        for poller in self.pollers:
            poller.stop_updates()
