import pytest
from unittest.mock import AsyncMock, MagicMock

from config import StreamTargetConfig
from cogs.streams.api import Absent, AbsentReason, Present


STREAM = {
    'user_name': 'Lunar',
    'user_login': 'lunar',
    'title': 'Any% speedruns',
    'viewer_count': 42,
    'game_id': '509658',
    'thumbnail_url': 'https://static-cdn.jtvnw.net/previews-ttv/live_user_lunar-{width}x{height}.jpg',
    'started_at': '2026-10-19T12:00:00Z'
}
USER = {'display_name': 'Lunar', 'profile_image_url': 'https://static-cdn.jtvnw.net/lunar-profile.png'}
GAME = {'name': 'Just Chatting', 'box_art_url': 'https://static-cdn.jtvnw.net/ttv-boxart/509658-{width}x{height}.jpg'}

LIVE = Present({'data': [STREAM]})
EMPTY = Present({'data': []})
FAILED = Absent(AbsentReason.STATUS, '503')


class DummyClient:
    """Replays canned results per endpoint; the last result repeats."""

    def __init__(self, **responses):
        self.responses = {path: list(results) for path, results in responses.items()}
        self.calls = []

    async def call(self, path, params=None):
        self.calls.append((path, params))
        results = self.responses.get(path)
        if not results:
            return FAILED
        if len(results) > 1:
            return results.pop(0)
        return results[0]

    async def close(self):
        pass


class DummyTimer:
    def __init__(self, seconds, callback, delay_first=False):
        self.seconds = seconds
        self.callback = callback
        self.delay_first = delay_first
        self.started = False
        self.cancel_count = 0

    def start(self):
        self.started = True

    def cancel(self):
        self.cancel_count += 1

    @property
    def running(self):
        return self.started and not self.cancel_count


@pytest.fixture
def twitch_config():
    return StreamTargetConfig(
        platform='twitch',
        enabled=True,
        channel='lunar',
        announcement_channel_id=1234,
        announcement_message="@everyone We're live!",
        poll_interval=90,
        update_interval=180,
        client_id='client-id',
        client_secret='client-secret'
    )


@pytest.fixture
def timers():
    created = []

    def factory(seconds, callback, delay_first=False, before=None):
        timer = DummyTimer(seconds, callback, delay_first)
        created.append(timer)
        return timer

    factory.created = created
    return factory


@pytest.fixture
def bot():
    """Bot handle whose announcement channel records sent messages."""
    bot = MagicMock()
    bot.user.name = 'Lunar Bot'
    bot.user.display_avatar.url = 'https://cdn.discordapp.com/avatars/lunar.png'

    channel = MagicMock()
    channel.sent = []

    async def send(content=None, embed=None):
        message = MagicMock()
        message.content = content
        message.embeds = [embed]
        message.edit = AsyncMock()
        channel.sent.append(message)
        return message

    channel.send = AsyncMock(side_effect=send)
    bot.channel = channel
    bot.get_channel.return_value = channel
    return bot
