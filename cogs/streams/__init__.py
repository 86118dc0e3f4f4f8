"""
Stream Announcements Module

Polls Twitch and YouTube for the configured channels and posts a live
announcement that keeps its statistics up to date while the stream runs.
"""

from .stream_announce_handler import StreamAnnounceHandler
from .twitch import TwitchPoller
from .youtube import YouTubePoller

__version__ = "1.0.0"


async def setup(bot):
    """Setup function for the streams module."""
    await bot.add_cog(StreamAnnounceHandler(bot))

__all__ = [
    'StreamAnnounceHandler',
    'TwitchPoller',
    'YouTubePoller',
    'setup'
]
