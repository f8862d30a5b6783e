"""
Centralized error embeds for consistent error handling across the Race Board bot.
"""

import discord

from race_board.utils.roster_exceptions import RosterException


class ErrorEmbeds:
    """Centralized error embed factory for consistent error handling."""
    
    @staticmethod
    def command_error(error: str) -> discord.Embed:
        """Create embed for general command errors."""
        return discord.Embed(
            title="Command Error",
            description=f"An error occurred: {error}\n\nPlease try again or contact an administrator.",
            color=discord.Color.red()
        )
    
    @staticmethod
    def invalid_input(message: str) -> discord.Embed:
        """Create embed for invalid user input."""
        return discord.Embed(
            title="Invalid Input",
            description=message,
            color=discord.Color.red()
        )
    
    @staticmethod
    def roster_error(error: RosterException) -> discord.Embed:
        """Create embed from a roster exception's user-facing message."""
        return discord.Embed(
            title="Roster Error",
            description=error.user_message,
            color=discord.Color.red()
        )
    
    @staticmethod
    def database_error() -> discord.Embed:
        """Create embed for database-related errors."""
        return discord.Embed(
            title="Database Error",
            description="A database error occurred. Please try again later or contact an administrator.",
            color=discord.Color.red()
        )
    
    @staticmethod
    def permission_denied() -> discord.Embed:
        """Create embed for permission errors."""
        return discord.Embed(
            title="Permission Denied",
            description="Only the event operator can change the roster or drive the reveal.",
            color=discord.Color.red()
        )
