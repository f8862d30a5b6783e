import io
import discord
from discord import app_commands
from discord.ext import commands
from typing import Optional
import logging
from sqlalchemy.exc import SQLAlchemyError

from race_board.config import Config
from race_board.operations.roster_operations import MEMBER_FIELDS, TEAM_FIELDS
from race_board.utils.embeds import build_roster_embed
from race_board.utils.error_embeds import ErrorEmbeds
from race_board.utils.roster_exceptions import RosterException

logger = logging.getLogger(__name__)


def is_operator(interaction: discord.Interaction) -> bool:
    return interaction.user.id == Config.OWNER_DISCORD_ID


class RosterCog(commands.Cog):
    """Roster editing, templates and import/export (operator only)"""

    def __init__(self, bot):
        self.bot = bot
        self.roster_ops = bot.roster_ops
        self.leaderboard_service = bot.leaderboard_service

    async def _send_roster(self, interaction: discord.Interaction, content: Optional[str] = None):
        roster = await self.roster_ops.load_roster()
        summary = self.leaderboard_service.rank_summary(roster)
        master_scores = {team.id: self.leaderboard_service.master_score(team.id) for team in roster}
        await interaction.followup.send(content=content, embed=build_roster_embed(roster, summary, master_scores))

    async def _handle_error(self, interaction: discord.Interaction, command: str, error: Exception):
        if isinstance(error, RosterException):
            await interaction.followup.send(embed=ErrorEmbeds.roster_error(error), ephemeral=True)
        elif isinstance(error, SQLAlchemyError):
            logger.error(f"Database error in {command} command: {error}", exc_info=True)
            await interaction.followup.send(embed=ErrorEmbeds.database_error(), ephemeral=True)
        else:
            logger.error(f"Error in {command} command: {error}", exc_info=True)
            await interaction.followup.send(embed=ErrorEmbeds.command_error(str(error)), ephemeral=True)

    @app_commands.command(name="roster", description="Show all teams with their current ranks")
    @app_commands.check(is_operator)
    async def roster(self, interaction: discord.Interaction):
        await interaction.response.defer()
        try:
            await self._send_roster(interaction)
        except Exception as e:
            await self._handle_error(interaction, "roster", e)

    @app_commands.command(name="team-add", description="Add a team to the roster")
    @app_commands.describe(name="Team name")
    @app_commands.check(is_operator)
    async def team_add(self, interaction: discord.Interaction, name: Optional[str] = ""):
        await interaction.response.defer()
        try:
            team = await self.roster_ops.add_team(name or "")
            await self._send_roster(interaction, f"✅ Added team `{team.id}`")
        except Exception as e:
            await self._handle_error(interaction, "team-add", e)

    @app_commands.command(name="team-remove", description="Remove a team from the roster")
    @app_commands.describe(team_id="Team id shown in /roster")
    @app_commands.check(is_operator)
    async def team_remove(self, interaction: discord.Interaction, team_id: str):
        await interaction.response.defer()
        try:
            team = await self.roster_ops.remove_team(team_id)
            await self._send_roster(interaction, f"🗑️ Removed {team.name or team.id}")
        except Exception as e:
            await self._handle_error(interaction, "team-remove", e)

    @app_commands.command(name="team-set", description="Edit a team field")
    @app_commands.describe(team_id="Team id shown in /roster", field="Field to edit", value="New value (empty clears a number)")
    @app_commands.choices(field=[app_commands.Choice(name=field, value=field) for field in TEAM_FIELDS])
    @app_commands.check(is_operator)
    async def team_set(
        self,
        interaction: discord.Interaction,
        team_id: str,
        field: app_commands.Choice[str],
        value: Optional[str] = ""
    ):
        await interaction.response.defer()
        try:
            await self.roster_ops.set_team_field(team_id, field.value, value)
            await self._send_roster(interaction, f"✅ Updated {field.value}")
        except Exception as e:
            await self._handle_error(interaction, "team-set", e)

    @app_commands.command(name="member-set", description="Edit a member slot of a team")
    @app_commands.describe(team_id="Team id shown in /roster", slot="Member slot (1-4)", field="Field to edit", value="New value")
    @app_commands.choices(field=[app_commands.Choice(name=field, value=field) for field in MEMBER_FIELDS])
    @app_commands.check(is_operator)
    async def member_set(
        self,
        interaction: discord.Interaction,
        team_id: str,
        slot: app_commands.Range[int, 1, 4],
        field: app_commands.Choice[str],
        value: Optional[str] = ""
    ):
        await interaction.response.defer()
        try:
            await self.roster_ops.set_member_field(team_id, slot, field.value, value)
            await self._send_roster(interaction, f"✅ Updated member {slot} {field.value}")
        except Exception as e:
            await self._handle_error(interaction, "member-set", e)

    @app_commands.command(name="roster-reset", description="Replace the roster with a fresh one")
    @app_commands.check(is_operator)
    async def roster_reset(self, interaction: discord.Interaction):
        await interaction.response.defer()
        try:
            await self.roster_ops.reset_roster()
            await self._send_roster(interaction, "♻️ Roster reset")
        except Exception as e:
            await self._handle_error(interaction, "roster-reset", e)

    @app_commands.command(name="roster-export", description="Download team names and members as JSON")
    @app_commands.check(is_operator)
    async def roster_export(self, interaction: discord.Interaction):
        await interaction.response.defer(ephemeral=True)
        try:
            payload = await self.roster_ops.export_roster()
            file = discord.File(io.BytesIO(payload.encode("utf-8")), filename="teams.json")
            await interaction.followup.send(file=file, ephemeral=True)
        except Exception as e:
            await self._handle_error(interaction, "roster-export", e)

    @app_commands.command(name="roster-import", description="Add teams from an exported JSON file")
    @app_commands.describe(file="teams.json exported by /roster-export")
    @app_commands.check(is_operator)
    async def roster_import(self, interaction: discord.Interaction, file: discord.Attachment):
        await interaction.response.defer()
        try:
            content = (await file.read()).decode("utf-8")
            imported = await self.roster_ops.import_roster(content)
            await self._send_roster(interaction, f"📥 Imported {len(imported)} team(s)")
        except UnicodeDecodeError:
            await interaction.followup.send(embed=ErrorEmbeds.invalid_input("The file must be UTF-8 encoded JSON."), ephemeral=True)
        except Exception as e:
            await self._handle_error(interaction, "roster-import", e)

    @app_commands.command(name="template-save", description="Save a team's name and members as a template")
    @app_commands.describe(team_id="Team id shown in /roster", name="Template name")
    @app_commands.check(is_operator)
    async def template_save(self, interaction: discord.Interaction, team_id: str, name: str):
        await interaction.response.defer(ephemeral=True)
        try:
            template = await self.roster_ops.save_template(team_id, name)
            await interaction.followup.send(f"💾 Saved template **{template.name}** (`{template.id}`)", ephemeral=True)
        except Exception as e:
            await self._handle_error(interaction, "template-save", e)

    @app_commands.command(name="template-list", description="List saved team templates")
    @app_commands.check(is_operator)
    async def template_list(self, interaction: discord.Interaction):
        await interaction.response.defer(ephemeral=True)
        try:
            templates = await self.roster_ops.list_templates()
            if not templates:
                await interaction.followup.send("No templates saved yet.", ephemeral=True)
                return
            lines = [
                f"`{template.id}` **{template.name}** - {template.team_name or 'unnamed'} ({len(template.members)} members)"
                for template in templates
            ]
            await interaction.followup.send("\n".join(lines)[:2000], ephemeral=True)
        except Exception as e:
            await self._handle_error(interaction, "template-list", e)

    @app_commands.command(name="template-use", description="Add a team from a saved template")
    @app_commands.describe(template_id="Template id shown in /template-list")
    @app_commands.check(is_operator)
    async def template_use(self, interaction: discord.Interaction, template_id: str):
        await interaction.response.defer()
        try:
            team = await self.roster_ops.add_team_from_template(template_id)
            await self._send_roster(interaction, f"✅ Added {team.name or team.id} from template")
        except Exception as e:
            await self._handle_error(interaction, "template-use", e)

    @app_commands.command(name="template-delete", description="Delete a saved template")
    @app_commands.describe(template_id="Template id shown in /template-list")
    @app_commands.check(is_operator)
    async def template_delete(self, interaction: discord.Interaction, template_id: str):
        await interaction.response.defer(ephemeral=True)
        try:
            await self.roster_ops.delete_template(template_id)
            await interaction.followup.send("🗑️ Template deleted", ephemeral=True)
        except Exception as e:
            await self._handle_error(interaction, "template-delete", e)


async def setup(bot):
    await bot.add_cog(RosterCog(bot))
