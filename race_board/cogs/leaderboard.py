import discord
from discord import app_commands
from discord.ext import commands
import logging

from race_board.config import Config
from race_board.constants import AwardConstants
from race_board.utils.embeds import build_leaderboard_embed, build_podium_embed
from race_board.utils.error_embeds import ErrorEmbeds
from race_board.views.leaderboard import RevealView

logger = logging.getLogger(__name__)

AWARD_CHOICES = [
    app_commands.Choice(name=AwardConstants.TITLES[award], value=award)
    for award in AwardConstants.ALL_AWARDS
]

REVEAL_ACTIONS = [
    app_commands.Choice(name="Reveal next rank", value="next"),
    app_commands.Choice(name="Reveal next batch", value="batch"),
    app_commands.Choice(name="Show / hide all", value="all"),
]


class LeaderboardCog(commands.Cog):
    """Award leaderboards and the progressive reveal"""

    def __init__(self, bot):
        self.bot = bot
        self.leaderboard_service = bot.leaderboard_service

    @app_commands.command(name="ranking", description="Show an award leaderboard with reveal controls")
    @app_commands.describe(award="Award to show")
    @app_commands.choices(award=AWARD_CHOICES)
    async def ranking(self, interaction: discord.Interaction, award: app_commands.Choice[str]):
        """Display an award leaderboard; hidden ranks stay masked."""
        await interaction.response.defer()

        try:
            await self.bot.roster_ops.load_roster()
            board = self.leaderboard_service.get_board(award.value)
            embed = build_leaderboard_embed(board.get_page())
            view = RevealView(self.leaderboard_service, award.value)
            await interaction.followup.send(embed=embed, view=view)
        except ValueError as e:
            await interaction.followup.send(embed=ErrorEmbeds.invalid_input(str(e)))
        except Exception as e:
            logger.error(f"Error in ranking command: {e}", exc_info=True)
            await interaction.followup.send(embed=ErrorEmbeds.command_error("Could not build the leaderboard. Please try again later."))

    @app_commands.command(name="announce", description="Show the podium of an award (revealed places only)")
    @app_commands.describe(award="Award to announce")
    @app_commands.choices(award=AWARD_CHOICES)
    async def announce(self, interaction: discord.Interaction, award: app_commands.Choice[str]):
        """Display the revealed 1st to 3rd places of an award."""
        await interaction.response.defer()

        try:
            await self.bot.roster_ops.load_roster()
            board = self.leaderboard_service.get_board(award.value)
            embed = build_podium_embed(board.strategy.title, board.top_three())
            await interaction.followup.send(embed=embed)
        except Exception as e:
            logger.error(f"Error in announce command: {e}", exc_info=True)
            await interaction.followup.send(embed=ErrorEmbeds.command_error("Could not build the announcement. Please try again later."))

    @app_commands.command(name="reveal", description="Reveal ranks of an award leaderboard")
    @app_commands.describe(award="Award to reveal", action="What to reveal")
    @app_commands.choices(award=AWARD_CHOICES, action=REVEAL_ACTIONS)
    @app_commands.check(lambda interaction: interaction.user.id == Config.OWNER_DISCORD_ID)
    async def reveal(
        self,
        interaction: discord.Interaction,
        award: app_commands.Choice[str],
        action: app_commands.Choice[str]
    ):
        """Slash-command alternative to the reveal buttons."""
        await interaction.response.defer()

        board = self.leaderboard_service.get_board(award.value)
        if board.reveal_state.is_revealing:
            await interaction.followup.send("⏳ A reveal is already in progress.", ephemeral=True)
            return

        if action.value == "next":
            await board.reveal_next()
        elif action.value == "batch":
            await board.reveal_batch()
        else:
            board.reveal_all()

        embed = build_leaderboard_embed(board.get_page())
        await interaction.followup.send(embed=embed, view=RevealView(self.leaderboard_service, award.value))


async def setup(bot):
    await bot.add_cog(LeaderboardCog(bot))
