"""
Leaderboard view components for the award reveal.

Provides the interactive Discord UI the operator uses to disclose an award
leaderboard from last place to first.
"""

import discord
from discord.ui import View, Button, Select
import logging

from race_board.config import Config
from race_board.constants import AwardConstants
from race_board.services.leaderboard import LeaderboardService
from race_board.utils.embeds import build_leaderboard_embed
from race_board.utils.error_embeds import ErrorEmbeds

logger = logging.getLogger(__name__)


class RevealView(View):
    """Reveal controls for one award leaderboard, with an award switcher."""

    def __init__(
        self,
        leaderboard_service: LeaderboardService,
        award: str,
        *,
        timeout: int = 3600
    ):
        super().__init__(timeout=timeout)
        self.leaderboard_service = leaderboard_service
        self.award = award

        self._update_buttons()

    @property
    def board(self):
        return self.leaderboard_service.get_board(self.award)

    def _update_buttons(self):
        """Rebuild buttons so labels and states match the reveal state."""
        self.clear_items()

        fully_revealed = self.board.is_fully_revealed()
        revealing = self.board.reveal_state.is_revealing

        next_button = Button(
            label="Reset" if fully_revealed else "Reveal next",
            style=discord.ButtonStyle.primary,
            disabled=revealing,
            custom_id="reveal:next"
        )
        next_button.callback = self.reveal_next
        self.add_item(next_button)

        batch_button = Button(
            label="Reset" if fully_revealed else f"Reveal {self.board.reveal_state.batch_size}",
            style=discord.ButtonStyle.primary,
            disabled=revealing or fully_revealed,
            custom_id="reveal:batch"
        )
        batch_button.callback = self.reveal_batch
        self.add_item(batch_button)

        all_button = Button(
            label="Hide all" if fully_revealed else "Show all",
            style=discord.ButtonStyle.secondary,
            custom_id="reveal:all"
        )
        all_button.callback = self.reveal_all
        self.add_item(all_button)

        self.add_item(AwardSelect(self.award))

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        """Only the operator drives the reveal."""
        if interaction.user.id != Config.OWNER_DISCORD_ID:
            await interaction.response.send_message(embed=ErrorEmbeds.permission_denied(), ephemeral=True)
            return False
        return True

    async def reveal_next(self, interaction: discord.Interaction):
        await interaction.response.defer()
        await self.board.reveal_next()
        await self.refresh_message(interaction)

    async def reveal_batch(self, interaction: discord.Interaction):
        await interaction.response.defer()
        await self.board.reveal_batch()
        await self.refresh_message(interaction)

    async def reveal_all(self, interaction: discord.Interaction):
        await interaction.response.defer()
        self.board.reveal_all()
        await self.refresh_message(interaction)

    async def refresh_message(self, interaction: discord.Interaction):
        """Re-render the leaderboard embed and controls."""
        try:
            embed = build_leaderboard_embed(self.board.get_page())
            self._update_buttons()
            await interaction.followup.edit_message(
                message_id=interaction.message.id,
                embed=embed,
                view=self
            )
        except discord.HTTPException as e:
            logger.error(f"Failed to update leaderboard message: {e}")
            await interaction.followup.send(f"Error updating leaderboard: {e}", ephemeral=True)


class AwardSelect(Select):
    """Dropdown for switching between the award leaderboards."""

    def __init__(self, current_award: str):
        options = [
            discord.SelectOption(
                label=AwardConstants.TITLES[award],
                value=award,
                description=AwardConstants.DESCRIPTIONS[award][:100],
                default=current_award == award
            )
            for award in AwardConstants.ALL_AWARDS
        ]

        super().__init__(
            placeholder="Choose an award...",
            options=options,
            custom_id="reveal:award"
        )

    async def callback(self, interaction: discord.Interaction):
        """Switch the view to another award; each keeps its own reveal state."""
        await interaction.response.defer()

        view: RevealView = self.view
        view.award = self.values[0]
        await view.refresh_message(interaction)
