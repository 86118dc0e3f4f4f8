import discord
from dataclasses import dataclass
from typing import Optional

from .models import CategoryInfo, ChannelProfile, StreamSnapshot


@dataclass(frozen=True)
class PlatformStyle:
    name: str
    color: discord.Color
    thumbnail_size: tuple = (300, 400)
    image_size: tuple = (1920, 1080)


TWITCH_STYLE = PlatformStyle(name='Twitch', color=discord.Color(0x6441A5))
YOUTUBE_STYLE = PlatformStyle(name='YouTube', color=discord.Color(0xFF0000))


def fill_size(template: Optional[str], size: tuple) -> Optional[str]:
    """Substitute the ``{width}``/``{height}`` tokens of an image URL template."""
    if not template:
        return None
    width, height = size
    return template.replace('{width}', str(width)).replace('{height}', str(height))


def describe(snapshot: StreamSnapshot, category: CategoryInfo) -> str:
    return (
        f"**{snapshot.streamer_name}** is playing **{category.name}** with "
        f"**{snapshot.viewer_count}** people watching!\n\n"
        f"[**Come watch the stream!**]({snapshot.url})"
    )


def category_thumbnail(category: CategoryInfo, profile_image: Optional[str], style: PlatformStyle) -> Optional[str]:
    # YouTube categories carry no artwork, fall back to the channel avatar
    return fill_size(category.art_url_template, style.thumbnail_size) or profile_image


def build_announcement(snapshot: StreamSnapshot, profile: ChannelProfile, category: CategoryInfo,
                       style: PlatformStyle, bot_user: Optional[discord.ClientUser] = None) -> discord.Embed:
    embed = discord.Embed(
        title=snapshot.title,
        url=snapshot.url,
        description=describe(snapshot, category),
        color=style.color,
        timestamp=snapshot.started_at
    )
    streamer = profile.display_name or snapshot.streamer_name
    embed.set_author(name=f"{streamer} is now LIVE on {style.name}!", icon_url=profile.image_url)

    thumbnail = category_thumbnail(category, profile.image_url, style)
    if thumbnail:
        embed.set_thumbnail(url=thumbnail)

    image = fill_size(snapshot.thumbnail_url_template, style.image_size)
    if image:
        embed.set_image(url=image)

    if bot_user is not None:
        embed.set_footer(text=f"Powered by {bot_user.name}", icon_url=bot_user.display_avatar.url)
    return embed


def refresh_announcement(embed: discord.Embed, snapshot: StreamSnapshot, category: CategoryInfo,
                         style: PlatformStyle) -> discord.Embed:
    """Copy of a posted announcement with fresh title, description and thumbnail."""
    refreshed = embed.copy()
    refreshed.title = snapshot.title
    refreshed.description = describe(snapshot, category)

    profile_image = refreshed.author.icon_url if refreshed.author else None
    thumbnail = category_thumbnail(category, profile_image, style)
    if thumbnail:
        refreshed.set_thumbnail(url=thumbnail)
    return refreshed
