import discord
from discord.ext import commands
import logging

log = logging.getLogger(__name__)


class WelcomeCog(commands.Cog):
    def __init__(self, bot) -> None:
        self.bot = bot

    def format_message(self, template: str, member: discord.Member) -> str:
        return template.format(member=member.mention, name=member.display_name, server=member.guild.name)

    async def announce(self, member: discord.Member, template: str) -> None:
        channel_id = self.bot.config.welcome_channel_id
        if not channel_id:
            return
        channel = member.guild.get_channel(channel_id)
        if channel is None:
            log.error(f"Welcome channel {channel_id} couldn't be found in {member.guild.name}")
            return
        try:
            await channel.send(self.format_message(template, member))
        except discord.HTTPException as e:
            log.error(f"Error sending welcome message in {member.guild.name}: {e}")

    @commands.Cog.listener()
    async def on_member_join(self, member: discord.Member):
        await self.announce(member, self.bot.config.welcome_message)

    @commands.Cog.listener()
    async def on_member_remove(self, member: discord.Member):
        # the member is gone, a mention would not resolve
        template = self.bot.config.leave_message.replace('{member}', '{name}')
        await self.announce(member, template)


async def setup(bot) -> None:
    await bot.add_cog(WelcomeCog(bot))
