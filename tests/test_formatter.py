from datetime import datetime, timezone
from unittest.mock import MagicMock

import discord

from cogs.streams.formatter import (TWITCH_STYLE, YOUTUBE_STYLE, build_announcement, fill_size,
                                    refresh_announcement)
from cogs.streams.models import CategoryInfo, ChannelProfile, StreamSnapshot, parse_timestamp


def snapshot(**overrides):
    values = dict(
        streamer_name='Lunar',
        title='Any% speedruns',
        viewer_count=42,
        category_id='509658',
        thumbnail_url_template='https://previews/live_user_lunar-{width}x{height}.jpg',
        started_at=datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc),
        url='https://twitch.tv/lunar'
    )
    values.update(overrides)
    return StreamSnapshot(**values)


PROFILE = ChannelProfile(display_name='Lunar', image_url='https://img/profile.png')
CATEGORY = CategoryInfo(name='Just Chatting', art_url_template='https://boxart/509658-{width}x{height}.jpg')


def bot_user():
    user = MagicMock()
    user.name = 'Lunar Bot'
    user.display_avatar.url = 'https://cdn/avatar.png'
    return user


def test_fill_size_substitutes_tokens():
    assert fill_size('https://x/{width}x{height}.jpg', (300, 400)) == 'https://x/300x400.jpg'
    assert fill_size('https://x/static.jpg', (300, 400)) == 'https://x/static.jpg'
    assert fill_size('', (300, 400)) is None


def test_build_twitch_announcement():
    embed = build_announcement(snapshot(), PROFILE, CATEGORY, TWITCH_STYLE, bot_user())

    assert embed.author.name == 'Lunar is now LIVE on Twitch!'
    assert embed.author.icon_url == 'https://img/profile.png'
    assert embed.title == 'Any% speedruns'
    assert embed.url == 'https://twitch.tv/lunar'
    assert embed.description == (
        '**Lunar** is playing **Just Chatting** with **42** people watching!\n\n'
        '[**Come watch the stream!**](https://twitch.tv/lunar)'
    )
    assert embed.color == discord.Color(0x6441A5)
    assert embed.thumbnail.url == 'https://boxart/509658-300x400.jpg'
    assert embed.image.url == 'https://previews/live_user_lunar-1920x1080.jpg'
    assert embed.footer.text == 'Powered by Lunar Bot'
    assert embed.footer.icon_url == 'https://cdn/avatar.png'
    assert embed.timestamp == datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def test_author_uses_profile_display_name():
    profile = ChannelProfile(display_name='LunarTV', image_url=None)

    embed = build_announcement(snapshot(), profile, CATEGORY, TWITCH_STYLE)

    assert embed.author.name == 'LunarTV is now LIVE on Twitch!'
    assert embed.description.startswith('**Lunar** is playing')

    nameless = build_announcement(snapshot(), ChannelProfile(display_name='', image_url=None), CATEGORY, TWITCH_STYLE)
    assert nameless.author.name == 'Lunar is now LIVE on Twitch!'

def test_youtube_thumbnail_falls_back_to_channel_avatar():
    embed = build_announcement(
        snapshot(thumbnail_url_template='https://i.ytimg.com/vi/abc/maxresdefault_live.jpg'),
        PROFILE, CategoryInfo(name='Gaming'), YOUTUBE_STYLE
    )

    assert embed.author.name == 'Lunar is now LIVE on YouTube!'
    assert embed.thumbnail.url == 'https://img/profile.png'
    assert embed.image.url == 'https://i.ytimg.com/vi/abc/maxresdefault_live.jpg'
    assert embed.color == discord.Color(0xFF0000)


def test_refresh_overwrites_only_changing_fields():
    original = build_announcement(snapshot(), PROFILE, CATEGORY, TWITCH_STYLE, bot_user())
    fresh = snapshot(title='Glitchless', viewer_count=900,
                     thumbnail_url_template='https://previews/other-{width}x{height}.jpg')
    category = CategoryInfo(name='Celeste', art_url_template='https://boxart/celeste-{width}x{height}.jpg')

    refreshed = refresh_announcement(original, fresh, category, TWITCH_STYLE)

    assert refreshed.title == 'Glitchless'
    assert '**Celeste** with **900** people watching' in refreshed.description
    assert refreshed.thumbnail.url == 'https://boxart/celeste-300x400.jpg'
    assert refreshed.author.name == original.author.name
    assert refreshed.author.icon_url == original.author.icon_url
    assert refreshed.image.url == original.image.url
    assert refreshed.footer.text == original.footer.text
    assert refreshed.timestamp == original.timestamp
    assert refreshed.url == original.url
    assert original.title == 'Any% speedruns'


def test_parse_timestamp():
    assert parse_timestamp('2026-10-19T12:00:00Z') == datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
    assert parse_timestamp('yesterday') is None
    assert parse_timestamp(None) is None
