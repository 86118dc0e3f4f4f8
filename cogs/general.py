import discord
from discord.ext import commands
import logging

log = logging.getLogger(__name__)


class GeneralCog(commands.Cog):
    def __init__(self, bot) -> None:
        self.bot = bot

    async def set_lock(self, guild: discord.Guild, locked: bool, reason: str) -> int:
        """Deny or restore @everyone's Send Messages in every text channel."""
        everyone = guild.default_role
        changed = 0
        for channel in guild.text_channels:
            overwrite = channel.overwrites_for(everyone)
            wanted = False if locked else None
            if overwrite.send_messages == wanted:
                continue
            overwrite.send_messages = wanted
            try:
                await channel.set_permissions(everyone, overwrite=overwrite, reason=reason)
                changed += 1
            except discord.HTTPException as e:
                log.error(f"Couldn't update permissions in #{channel.name} ({guild.name}): {e}")
        return changed

    @commands.command(name='lock', usage='lock', help='Locks every text channel of the server')
    @commands.guild_only()
    @commands.has_permissions(manage_guild=True)
    async def lock(self, ctx) -> None:
        changed = await self.set_lock(ctx.guild, True, reason=f"Server locked by {ctx.author}")
        log.info(f"{ctx.author} locked {changed} channels in {ctx.guild.name}")
        await ctx.send(f'🔒 **Server locked**! {changed} channels are now read-only.')

    @commands.command(name='unlock', usage='unlock', help='Unlocks every text channel of the server')
    @commands.guild_only()
    @commands.has_permissions(manage_guild=True)
    async def unlock(self, ctx) -> None:
        changed = await self.set_lock(ctx.guild, False, reason=f"Server unlocked by {ctx.author}")
        log.info(f"{ctx.author} unlocked {changed} channels in {ctx.guild.name}")
        await ctx.send(f'🔓 **Server unlocked**! {changed} channels are open again.')

    @commands.Cog.listener()
    async def on_command_error(self, ctx, error):
        if isinstance(error, commands.CommandNotFound):
            return
        if isinstance(error, commands.NoPrivateMessage):
            await ctx.send("**Sorry**! Unfortunately, I can't help you with that in direct messages.")
        elif isinstance(error, commands.MissingRequiredArgument):
            reply = "**Oh no**! You didn't provide any arguments for this command to work properly!"
            if ctx.command and ctx.command.usage:
                reply += f" The proper usage would be: `{ctx.prefix}{ctx.command.usage}`"
            await ctx.send(reply, delete_after=3.5)
        elif isinstance(error, commands.MissingPermissions):
            await ctx.send("You don't have the required permissions to use this command.", delete_after=3.5)
        else:
            log.error(f"An error occurred executing command {ctx.command}: {error!r}")
            await ctx.send('**Oops**! Something went terribly wrong! Please try again later.', delete_after=3.5)


async def setup(bot) -> None:
    await bot.add_cog(GeneralCog(bot))
