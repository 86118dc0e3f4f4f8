import logging
from typing import Optional

from .api import Absent, first_item
from .formatter import TWITCH_STYLE
from .models import CategoryInfo, ChannelProfile, LivenessCheck, StreamSnapshot, parse_timestamp
from .poller import StreamPoller

log = logging.getLogger(__name__)


class TwitchPoller(StreamPoller):
    style = TWITCH_STYLE

    async def check_live(self) -> LivenessCheck:
        result = await self.client.call('streams', {'user_login': self.config.channel})
        if isinstance(result, Absent):
            return LivenessCheck.unknown()

        stream = first_item(result)
        if stream is None:
            return LivenessCheck.offline()

        user_name = stream.get('user_name') or self.config.channel
        return LivenessCheck.live(StreamSnapshot(
            streamer_name=user_name,
            title=stream.get('title', ''),
            viewer_count=stream.get('viewer_count', 0),
            category_id=stream.get('game_id') or None,
            thumbnail_url_template=stream.get('thumbnail_url', ''),
            started_at=parse_timestamp(stream.get('started_at')),
            url=f"https://twitch.tv/{stream.get('user_login') or user_name}"
        ))

    async def fetch_profile(self) -> Optional[ChannelProfile]:
        user = first_item(await self.client.call('users', {'login': self.config.channel}))
        if user is None:
            return None
        return ChannelProfile(display_name=user['display_name'], image_url=user.get('profile_image_url'))

    async def fetch_category(self, snapshot: StreamSnapshot) -> Optional[CategoryInfo]:
        if not snapshot.category_id:
            log.debug(f"Twitch stream of {self.config.channel} has no game set")
            return None
        game = first_item(await self.client.call('games', {'id': snapshot.category_id}))
        if game is None:
            return None
        return CategoryInfo(name=game['name'], art_url_template=game.get('box_art_url', ''))
