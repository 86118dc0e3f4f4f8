import asyncio
import logging
from typing import Callable, Optional, Tuple

import discord
from discord.ext import tasks

from .api import APIClient
from .formatter import PlatformStyle, build_announcement, refresh_announcement
from .models import CategoryInfo, ChannelProfile, Liveness, LivenessCheck, PollState, StreamSnapshot
from .scheduler import interval_timer

log = logging.getLogger(__name__)


class StreamPoller:
    """Announces one monitored channel going live and keeps the message fresh.

    State machine per target: OFFLINE -> LIVE sends one announcement and
    starts the update timer, LIVE -> LIVE does nothing, LIVE -> OFFLINE
    cancels the timer and forgets the message. A liveness check that yields
    no data at all leaves the state untouched. A send that outlives
    ``message_timeout`` still counts as an announcement; its message is
    adopted once Discord answers.

    Subclasses implement the three platform lookups.
    """

    style: PlatformStyle

    def __init__(self, bot, client: APIClient, config, *, message_timeout: float = 15.0,
                 timer_factory: Optional[Callable[..., tasks.Loop]] = None):
        self.bot = bot
        self.client = client
        self.config = config
        self.message_timeout = message_timeout
        self.timer_factory = timer_factory or interval_timer
        self.state = PollState()

    async def check_live(self) -> LivenessCheck:
        raise NotImplementedError

    async def fetch_profile(self) -> Optional[ChannelProfile]:
        raise NotImplementedError

    async def fetch_category(self, snapshot: StreamSnapshot) -> Optional[CategoryInfo]:
        raise NotImplementedError

    async def fetch_details(self, snapshot: StreamSnapshot) -> Optional[Tuple[ChannelProfile, CategoryInfo]]:
        """Profile and category for an announcement, or None if either is missing."""
        profile = await self.fetch_profile()
        if profile is None:
            return None
        category = await self.fetch_category(snapshot)
        if category is None:
            return None
        return profile, category

    async def fetch_refresh(self) -> Optional[Tuple[StreamSnapshot, CategoryInfo]]:
        check = await self.check_live()
        if check.status is not Liveness.LIVE:
            return None
        category = await self.fetch_category(check.snapshot)
        if category is None:
            return None
        return check.snapshot, category

    async def liveness_tick(self):
        if self.state.busy:
            log.debug(f"Skipping {self.style.name} liveness check, previous tick still running")
            return
        async with self.state.lock:
            try:
                await self._poll()
            except Exception:
                log.exception(f"Unexpected error while checking {self.style.name} stream status")

    async def update_tick(self):
        if self.state.busy:
            log.debug(f"Skipping {self.style.name} announcement update, another tick is running")
            return
        async with self.state.lock:
            try:
                await self._update()
            except Exception:
                log.exception(f"Unexpected error while updating the {self.style.name} announcement")

    async def _poll(self):
        check = await self.check_live()

        if check.status is Liveness.UNKNOWN:
            return

        if check.status is Liveness.OFFLINE:
            if self.state.is_live:
                log.info(f"{self.config.channel} is no longer live on {self.style.name}")
                self.stop_updates()
                self.state.message = None
                self.state.pending_send = None
                self.state.is_live = False
            return

        if self.state.is_live:
            return

        details = await self.fetch_details(check.snapshot)
        if details is None:
            log.warning(f"Missing {self.style.name} profile or category data for {self.config.channel}, will retry")
            return
        profile, category = details

        channel = self.bot.get_channel(self.config.announcement_channel_id)
        if channel is None:
            log.error(f"Couldn't send {self.style.name} livestream announcement because the announcement channel "
                      f"{self.config.announcement_channel_id} couldn't be found.")
            return

        embed = build_announcement(check.snapshot, profile, category, self.style, self.bot.user)
        send = asyncio.ensure_future(channel.send(content=self.config.announcement_message, embed=embed))
        try:
            message = await asyncio.wait_for(asyncio.shield(send), timeout=self.message_timeout)
        except asyncio.TimeoutError:
            # Discord may still deliver it, so count the stream as announced
            log.warning(f"Sending the {self.style.name} live announcement for {self.config.channel} is taking "
                        f"longer than {self.message_timeout}s, waiting for it in the background")
            self.state.is_live = True
            self.state.pending_send = send
            send.add_done_callback(self._send_finished)
            return
        except discord.HTTPException as e:
            log.error(f"Error sending {self.style.name} live announcement for {self.config.channel}: {e!r}")
            return

        self._announced(message)

    def _announced(self, message: discord.Message):
        self.state.message = message
        self.state.is_live = True
        self.start_updates()
        log.info(f"Announced {self.config.channel} going live on {self.style.name}")

    def _send_finished(self, send: asyncio.Task):
        """Adopt the result of an announcement that outlived ``message_timeout``."""
        if self.state.pending_send is not send:
            if not send.cancelled() and send.exception() is None:
                log.info(f"Late {self.style.name} announcement for {self.config.channel} arrived after the stream ended")
            return
        self.state.pending_send = None

        if send.cancelled() or send.exception() is not None:
            error = 'cancelled' if send.cancelled() else repr(send.exception())
            log.error(f"Error sending {self.style.name} live announcement for {self.config.channel}: {error}")
            self.state.is_live = False
            return

        self._announced(send.result())

    async def _update(self):
        message = self.state.message
        if not self.state.is_live or message is None or not message.embeds:
            return

        fresh = await self.fetch_refresh()
        if fresh is None:
            return
        snapshot, category = fresh

        # the stream may have ended while the refresh was in flight
        if not self.state.is_live or self.state.message is not message:
            return

        embed = refresh_announcement(message.embeds[0], snapshot, category, self.style)
        try:
            await asyncio.wait_for(
                message.edit(content=self.config.announcement_message, embed=embed),
                timeout=self.message_timeout
            )
        except (discord.HTTPException, asyncio.TimeoutError) as e:
            log.error(f"Error updating {self.style.name} live announcement for {self.config.channel}: {e!r}")

    def start_updates(self):
        self.stop_updates()
        timer = self.timer_factory(self.config.update_interval, self.update_tick, delay_first=True)
        timer.start()
        self.state.update_timer = timer

    def stop_updates(self):
        timer = self.state.update_timer
        self.state.update_timer = None
        if timer is not None:
            timer.cancel()
