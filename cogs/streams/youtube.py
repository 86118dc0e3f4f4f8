import logging
from typing import List, Optional

from .api import Absent, Present, first_item
from .formatter import YOUTUBE_STYLE
from .models import CategoryInfo, ChannelProfile, LivenessCheck, StreamSnapshot, parse_timestamp
from .poller import StreamPoller

log = logging.getLogger(__name__)

RECENT_UPLOADS = 5


def best_thumbnail(thumbnails: dict) -> str:
    for size in ('maxres', 'standard', 'high', 'medium', 'default'):
        if size in thumbnails:
            return thumbnails[size].get('url', '')
    return ''


def is_broadcasting(video: dict) -> bool:
    details = video.get('liveStreamingDetails', {})
    return bool(details.get('actualStartTime')) and not details.get('actualEndTime')


class YouTubePoller(StreamPoller):
    """Polls a YouTube channel for an active live broadcast.

    ``search`` costs 100 quota units a call, which a 90 second cadence would
    burn through in a few hours. Instead, while offline the newest entries
    of the channel's uploads playlist are checked for a running broadcast,
    and while live only the known video is looked up. Every request here
    costs a single unit.
    """

    style = YOUTUBE_STYLE

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.uploads_playlist: Optional[str] = None
        self.video_id: Optional[str] = None

    async def check_live(self) -> LivenessCheck:
        if self.video_id:
            return await self.check_video(self.video_id)

        playlist = await self.get_uploads_playlist()
        if playlist is None:
            return LivenessCheck.unknown()

        result = await self.client.call('playlistItems', {
            'part': 'contentDetails',
            'playlistId': playlist,
            'maxResults': RECENT_UPLOADS
        })
        if isinstance(result, Absent):
            return LivenessCheck.unknown()

        items = result.data.get('items', []) if isinstance(result.data, dict) else []
        video_ids = [item.get('contentDetails', {}).get('videoId') for item in items if isinstance(item, dict)]
        video_ids = [video_id for video_id in video_ids if video_id]
        if not video_ids:
            return LivenessCheck.offline()

        videos = await self.fetch_videos(video_ids)
        if videos is None:
            return LivenessCheck.unknown()

        for video in videos:
            if is_broadcasting(video):
                self.video_id = video.get('id')
                return self.to_check(video)
        return LivenessCheck.offline()

    async def check_video(self, video_id: str) -> LivenessCheck:
        videos = await self.fetch_videos([video_id])
        if videos is None:
            return LivenessCheck.unknown()
        if not videos or not is_broadcasting(videos[0]):
            log.debug(f"YouTube broadcast {video_id} has ended")
            self.video_id = None
            return LivenessCheck.offline()
        return self.to_check(videos[0])

    async def fetch_videos(self, video_ids: List[str]) -> Optional[List[dict]]:
        result = await self.client.call('videos', {
            'part': 'snippet,liveStreamingDetails',
            'id': ','.join(video_ids)
        })
        if not isinstance(result, Present) or not isinstance(result.data, dict):
            return None
        return [video for video in result.data.get('items', []) if isinstance(video, dict)]

    async def get_uploads_playlist(self) -> Optional[str]:
        if self.uploads_playlist is None:
            channel = first_item(
                await self.client.call('channels', {'part': 'contentDetails', 'id': self.config.channel}),
                'items'
            )
            if channel is None:
                return None
            playlist = channel.get('contentDetails', {}).get('relatedPlaylists', {}).get('uploads')
            if not playlist:
                log.error(f"YouTube channel {self.config.channel} has no uploads playlist")
                return None
            self.uploads_playlist = playlist
        return self.uploads_playlist

    def to_check(self, video: dict) -> LivenessCheck:
        video_id = video.get('id')
        snippet = video.get('snippet', {})
        details = video.get('liveStreamingDetails', {})
        return LivenessCheck.live(StreamSnapshot(
            streamer_name=snippet.get('channelTitle', ''),
            title=snippet.get('title', ''),
            viewer_count=int(details.get('concurrentViewers', 0)),
            category_id=snippet.get('categoryId'),
            thumbnail_url_template=best_thumbnail(snippet.get('thumbnails', {})),
            started_at=parse_timestamp(details.get('actualStartTime')),
            url=f"https://www.youtube.com/watch?v={video_id}",
            video_id=video_id
        ))

    async def fetch_profile(self) -> Optional[ChannelProfile]:
        channel = first_item(await self.client.call('channels', {'part': 'snippet', 'id': self.config.channel}), 'items')
        if channel is None:
            return None
        snippet = channel.get('snippet', {})
        return ChannelProfile(
            display_name=snippet.get('title', ''),
            image_url=best_thumbnail(snippet.get('thumbnails', {})) or None
        )

    async def fetch_category(self, snapshot: StreamSnapshot) -> Optional[CategoryInfo]:
        if not snapshot.category_id:
            return None
        category = first_item(
            await self.client.call('videoCategories', {'part': 'snippet', 'id': snapshot.category_id}),
            'items'
        )
        if category is None:
            return None
        return CategoryInfo(name=category.get('snippet', {}).get('title', ''))
