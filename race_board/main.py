import asyncio
import logging
import traceback
from typing import Optional

import discord
from discord.ext import commands
from discord import app_commands

from race_board.config import Config
from race_board.database.database import Database
from race_board.operations.roster_operations import RosterOperations
from race_board.services.leaderboard import LeaderboardService
from race_board.utils.error_embeds import ErrorEmbeds
from race_board.utils.logger import setup_logger

class RaceBoardBot(commands.Bot):
    def __init__(self):
        intents = discord.Intents.default()
        intents.guilds = True

        super().__init__(
            command_prefix=Config.COMMAND_PREFIX,
            intents=intents,
            help_command=None
        )

        # Attach app command error handler
        self.tree.on_error = self.on_app_command_error

        self.db: Optional[Database] = None
        self.leaderboard_service = LeaderboardService()
        self.roster_ops: Optional[RosterOperations] = None
        self.logger = setup_logger(__name__)

    async def setup_hook(self):
        """Called when the bot is starting up"""
        self.logger.info("Setting up Race Board bot...")

        self.db = Database()
        await self.db.initialize()

        # Rankings are computed once up front so the first /ranking is instant
        self.roster_ops = RosterOperations(self.db, self.leaderboard_service)
        roster = await self.roster_ops.load_roster()
        self.logger.info(f"Roster loaded with {len(roster)} team(s)")

        await self.load_cogs()
        await self._sync_commands()

        self.logger.info("Race Board setup complete!")

    async def load_cogs(self):
        """Load all cogs"""
        cogs_to_load = [
            'race_board.cogs.leaderboard',
            'race_board.cogs.roster',
        ]

        for cog in cogs_to_load:
            try:
                await self.load_extension(cog)
                self.logger.info(f"Loaded cog: {cog}")
            except Exception as e:
                self.logger.error(f"Failed to load cog {cog}: {e}", exc_info=True)

    async def _sync_commands(self):
        """Sync slash commands with Discord"""
        if not self.tree.get_commands():
            self.logger.warning("No application commands found to sync. Check for cog loading errors.")
            return

        try:
            guild_ids = Config.get_guild_ids()

            if guild_ids:
                # Guild-specific sync (instant updates)
                for guild_id in guild_ids:
                    try:
                        guild = discord.Object(id=guild_id)
                        self.tree.copy_global_to(guild=guild)
                        synced = await self.tree.sync(guild=guild)
                        self.logger.info(f"Synced {len(synced)} command(s) to guild {guild_id}")
                    except discord.errors.Forbidden:
                        self.logger.error(f"Permission error syncing to guild {guild_id}. Ensure the bot has the 'application.commands' scope.", exc_info=True)
                    except discord.errors.HTTPException as e:
                        self.logger.error(f"HTTP error syncing to guild {guild_id}. Status: {e.status}, Response: {e.text}", exc_info=True)
            else:
                # Global sync (can take up to 1 hour)
                synced = await self.tree.sync()
                self.logger.info(f"Synced {len(synced)} command(s) globally")
        except Exception as e:
            self.logger.error(f"Failed to sync commands: {e}", exc_info=True)

    async def on_ready(self):
        """Called when the bot is ready"""
        self.logger.info(f'{self.user} has connected to Discord!')
        self.logger.info(f'Bot is in {len(self.guilds)} guilds')

        await self.change_presence(
            activity=discord.Game(name="Awards night | /ranking")
        )

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Global error handler for slash commands"""
        command_name = interaction.command.name if interaction.command else 'Unknown'

        if isinstance(error, app_commands.CheckFailure):
            self.logger.info(f"Permission denied for command '{command_name}' by user {interaction.user}")
            error_embed = ErrorEmbeds.permission_denied()
        else:
            self.logger.error(f"Error in app command '{command_name}': {error}", exc_info=True)
            error_embed = discord.Embed(
                title="❌ An unexpected error occurred",
                description="Something went wrong while processing your command.",
                color=discord.Color.red()
            )

        try:
            if interaction.response.is_done():
                await interaction.followup.send(embed=error_embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=error_embed, ephemeral=True)
        except Exception as e:
            self.logger.error(f"Failed to send error response: {e}")

    async def close(self):
        """Cleanup when bot is shutting down"""
        self.logger.info("Shutting down Race Board bot...")

        if self.db:
            await self.db.close()

        await super().close()

async def main():
    """Main entry point"""
    Config.validate()

    bot = RaceBoardBot()

    try:
        await bot.start(Config.DISCORD_TOKEN)
    except KeyboardInterrupt:
        await bot.close()
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        traceback.print_exc()
    finally:
        await bot.close()

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()
