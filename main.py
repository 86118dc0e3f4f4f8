import discord
from discord.ext import commands
import logging
from pathlib import Path
from dotenv import load_dotenv

from config import BotConfig

EXTENSIONS = ['cogs.general', 'cogs.welcome', 'cogs.reaction_roles', 'cogs.streams']

log = logging.getLogger(__name__)


def build_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.members = True
    intents.message_content = True
    intents.reactions = True
    return intents


async def sync_profile(user: discord.ClientUser, config: BotConfig) -> None:
    """Apply the configured username and avatar to the bot account."""
    if config.username and user.name != config.username:
        try:
            await user.edit(username=config.username)
        except discord.HTTPException as e:
            log.error(f'An error occurred when setting the username, {e}')

    if not config.avatar_path:
        return
    try:
        avatar = Path(config.avatar_path).read_bytes()
    except OSError as e:
        log.error(f'An error occurred when setting the avatar, {e}')
        return
    try:
        await user.edit(avatar=avatar)
    except (discord.HTTPException, ValueError) as e:
        log.error(f'An error occurred when setting the avatar, {e}')


class LunarBot(commands.Bot):
    def __init__(self, config: BotConfig) -> None:
        super().__init__(command_prefix=config.command_prefix, intents=build_intents())
        self.config = config
        self.profile_synced = False

    async def setup_hook(self) -> None:
        for extension in EXTENSIONS:
            await self.load_extension(extension)

    async def on_ready(self) -> None:
        # on_ready also fires after reconnects
        if not self.profile_synced:
            self.profile_synced = True
            await sync_profile(self.user, self.config)
        log.info(f'{self.user.name} has loaded successfully and is now online! (ID: {self.user.id})')
        await self.change_presence(activity=discord.Game(name=self.config.activity))


def main() -> None:
    load_dotenv()
    config = BotConfig.from_env()
    if not config.token:
        raise SystemExit('TOKEN is not set')

    handler = logging.FileHandler(filename=config.log_file, encoding='utf-8', mode='w')
    bot = LunarBot(config)
    bot.run(config.token, log_handler=handler, log_level=getattr(logging, config.log_level, logging.INFO),
            root_logger=True)


if __name__ == '__main__':
    main()
