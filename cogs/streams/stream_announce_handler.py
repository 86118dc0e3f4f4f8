import logging

from discord.ext import commands

from .api import TwitchClient, YouTubeClient
from .scheduler import StreamScheduler
from .twitch import TwitchPoller
from .youtube import YouTubePoller

log = logging.getLogger(__name__)


def build_poller(bot, target, http_timeout: float, message_timeout: float):
    if target.platform == 'twitch':
        client = TwitchClient(target.client_id, target.client_secret, timeout=http_timeout)
        return TwitchPoller(bot, client, target, message_timeout=message_timeout)
    if target.platform == 'youtube':
        client = YouTubeClient(target.api_key, timeout=http_timeout)
        return YouTubePoller(bot, client, target, message_timeout=message_timeout)
    raise ValueError(f"Unknown stream platform: {target.platform}")


class StreamAnnounceHandler(commands.Cog):
    def __init__(self, bot):
        self.bot = bot
        config = bot.config
        self.pollers = [
            build_poller(bot, target, config.http_timeout, config.message_timeout)
            for target in config.stream_targets()
        ]
        self.scheduler = StreamScheduler(self.pollers, wait_until_ready=bot.wait_until_ready)

    async def cog_load(self):
        if not self.pollers:
            log.info("No stream announcements configured")
            return
        self.scheduler.start()

    async def cog_unload(self):
        self.scheduler.stop()
        for poller in self.pollers:
            await poller.client.close()
