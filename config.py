import os
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

log = logging.getLogger(__name__)


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _get_int(name: str, default: Optional[int] = None) -> Optional[int]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        log.error(f"Invalid integer for {name}: {value!r}")
        return default


def _get_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def parse_reaction_roles(raw: Optional[str]) -> Dict[str, int]:
    """Parse ``emoji=role_id`` pairs separated by commas."""
    roles = {}
    if not raw:
        return roles
    for pair in raw.split(','):
        if not pair.strip():
            continue
        emoji, sep, role_id = pair.rpartition('=')
        emoji = emoji.strip()
        if not sep or not emoji or not role_id.strip().isdigit():
            log.error(f"Ignoring malformed reaction role entry: {pair!r}")
            continue
        roles[emoji] = int(role_id.strip())
    return roles


@dataclass
class StreamTargetConfig:
    """Settings for one monitored streaming channel."""
    platform: str
    enabled: bool
    channel: Optional[str]
    announcement_channel_id: Optional[int]
    announcement_message: str
    poll_interval: int
    update_interval: int
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    api_key: Optional[str] = None

    def missing_settings(self) -> list:
        missing = []
        if not self.channel:
            missing.append('channel')
        if not self.announcement_channel_id:
            missing.append('announcement channel id')
        if self.platform == 'twitch' and not self.client_id:
            missing.append('client id')
        if self.platform == 'twitch' and not self.client_secret:
            missing.append('client secret')
        if self.platform == 'youtube' and not self.api_key:
            missing.append('api key')
        return missing


@dataclass
class BotConfig:
    token: Optional[str]
    command_prefix: str = '!'
    activity: str = 'with Admin perks'
    username: Optional[str] = 'Lunar'
    avatar_path: Optional[str] = 'avatar.png'
    log_level: str = 'INFO'
    log_file: str = 'discord.log'
    http_timeout: float = 10.0
    message_timeout: float = 15.0
    welcome_channel_id: Optional[int] = None
    welcome_message: str = 'Welcome to **{server}**, {member}! Make yourself at home.'
    leave_message: str = '**{member}** has left the server. Farewell!'
    reaction_role_message_id: Optional[int] = None
    reaction_roles: Dict[str, int] = field(default_factory=dict)
    twitch: Optional[StreamTargetConfig] = None
    youtube: Optional[StreamTargetConfig] = None

    @classmethod
    def from_env(cls) -> 'BotConfig':
        twitch = StreamTargetConfig(
            platform='twitch',
            enabled=_get_bool('TWITCH_ENABLED'),
            channel=_get_str('TWITCH_USERNAME'),
            announcement_channel_id=_get_int('TWITCH_ANNOUNCEMENT_CHANNEL_ID'),
            announcement_message=_get_str('TWITCH_ANNOUNCEMENT_MESSAGE', "@everyone We're live on Twitch!"),
            poll_interval=_get_int('TWITCH_POLL_INTERVAL', 90),
            update_interval=_get_int('TWITCH_UPDATE_INTERVAL', 180),
            client_id=_get_str('TWITCH_CLIENT_ID'),
            client_secret=_get_str('TWITCH_CLIENT_SECRET'),
        )
        youtube = StreamTargetConfig(
            platform='youtube',
            enabled=_get_bool('YOUTUBE_ENABLED'),
            channel=_get_str('YOUTUBE_CHANNEL_ID'),
            announcement_channel_id=_get_int('YOUTUBE_ANNOUNCEMENT_CHANNEL_ID'),
            announcement_message=_get_str('YOUTUBE_ANNOUNCEMENT_MESSAGE', "@everyone We're live on YouTube!"),
            poll_interval=_get_int('YOUTUBE_POLL_INTERVAL', 90),
            update_interval=_get_int('YOUTUBE_UPDATE_INTERVAL', 300),
            api_key=_get_str('YOUTUBE_API_KEY'),
        )
        defaults = cls(token=None)
        return cls(
            token=_get_str('TOKEN'),
            command_prefix=_get_str('COMMAND_PREFIX', defaults.command_prefix),
            activity=_get_str('BOT_ACTIVITY', defaults.activity),
            username=_get_str('BOT_USERNAME', defaults.username),
            avatar_path=_get_str('BOT_AVATAR', defaults.avatar_path),
            log_level=_get_str('LOG_LEVEL', defaults.log_level).upper(),
            log_file=_get_str('LOG_FILE', defaults.log_file),
            http_timeout=float(_get_int('HTTP_TIMEOUT', int(defaults.http_timeout))),
            message_timeout=float(_get_int('MESSAGE_TIMEOUT', int(defaults.message_timeout))),
            welcome_channel_id=_get_int('WELCOME_CHANNEL_ID'),
            welcome_message=_get_str('WELCOME_MESSAGE', defaults.welcome_message),
            leave_message=_get_str('LEAVE_MESSAGE', defaults.leave_message),
            reaction_role_message_id=_get_int('REACTION_ROLE_MESSAGE_ID'),
            reaction_roles=parse_reaction_roles(_get_str('REACTION_ROLES')),
            twitch=twitch,
            youtube=youtube,
        )

    def stream_targets(self) -> list:
        """Enabled stream targets that carry every required setting."""
        targets = []
        for target in (self.twitch, self.youtube):
            if target is None or not target.enabled:
                continue
            missing = target.missing_settings()
            if missing:
                log.error(f"{target.platform.title()} announcements are enabled but missing: {', '.join(missing)}")
                continue
            targets.append(target)
        return targets
