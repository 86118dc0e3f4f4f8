import discord
from discord.ext import commands
import logging
from typing import Optional

log = logging.getLogger(__name__)


class ReactionRolesCog(commands.Cog):
    """Grants and revokes roles from reactions on one configured message.

    Uses the raw reaction events so the message doesn't need to be cached.
    """

    def __init__(self, bot) -> None:
        self.bot = bot

    def resolve(self, payload: discord.RawReactionActionEvent) -> Optional[tuple]:
        config = self.bot.config
        if not config.reaction_role_message_id or payload.message_id != config.reaction_role_message_id:
            return None
        if payload.guild_id is None:
            return None

        role_id = config.reaction_roles.get(str(payload.emoji))
        if role_id is None and payload.emoji.name:
            role_id = config.reaction_roles.get(payload.emoji.name)
        if role_id is None:
            log.debug(f"No reaction role mapped to {payload.emoji}")
            return None

        guild = self.bot.get_guild(payload.guild_id)
        if guild is None:
            return None
        role = guild.get_role(role_id)
        member = guild.get_member(payload.user_id)
        if role is None or member is None:
            log.debug(f"Reaction role {role_id} or member {payload.user_id} not found in {guild.name}")
            return None
        if member.bot:
            return None
        return member, role

    @commands.Cog.listener()
    async def on_raw_reaction_add(self, payload: discord.RawReactionActionEvent):
        resolved = self.resolve(payload)
        if resolved is None:
            return
        member, role = resolved
        try:
            await member.add_roles(role, reason='Reaction role')
        except discord.HTTPException as e:
            log.error(f"Couldn't add role {role.name} to {member}: {e}")

    @commands.Cog.listener()
    async def on_raw_reaction_remove(self, payload: discord.RawReactionActionEvent):
        resolved = self.resolve(payload)
        if resolved is None:
            return
        member, role = resolved
        try:
            await member.remove_roles(role, reason='Reaction role')
        except discord.HTTPException as e:
            log.error(f"Couldn't remove role {role.name} from {member}: {e}")


async def setup(bot) -> None:
    await bot.add_cog(ReactionRolesCog(bot))
