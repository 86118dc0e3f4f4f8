import asyncio
import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import discord
from discord.ext import tasks


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse the ISO 8601 timestamps both APIs return."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None


@dataclass
class StreamSnapshot:
    streamer_name: str
    title: str
    viewer_count: int
    category_id: Optional[str]
    thumbnail_url_template: str
    started_at: Optional[datetime]
    url: str
    video_id: Optional[str] = None


@dataclass
class ChannelProfile:
    display_name: str
    image_url: Optional[str]


@dataclass
class CategoryInfo:
    name: str
    art_url_template: str = ''


class Liveness(enum.Enum):
    LIVE = 'live'
    OFFLINE = 'offline'
    UNKNOWN = 'unknown'


@dataclass
class LivenessCheck:
    status: Liveness
    snapshot: Optional[StreamSnapshot] = None

    @classmethod
    def live(cls, snapshot: StreamSnapshot) -> 'LivenessCheck':
        return cls(Liveness.LIVE, snapshot)

    @classmethod
    def offline(cls) -> 'LivenessCheck':
        return cls(Liveness.OFFLINE)

    @classmethod
    def unknown(cls) -> 'LivenessCheck':
        return cls(Liveness.UNKNOWN)


@dataclass
class PollState:
    """Interval state for one monitored channel."""
    is_live: bool = False
    message: Optional[discord.Message] = None
    update_timer: Optional[tasks.Loop] = None
    pending_send: Optional[asyncio.Task] = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def busy(self) -> bool:
        return self.lock.locked()
