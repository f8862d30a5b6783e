"""
Services package for the Race Board bot.

Ranking state lives here: each award leaderboard and its reveal state.
"""

from .leaderboard import AwardLeaderboard, LeaderboardService
from .reveal import RevealState

__all__ = ['AwardLeaderboard', 'LeaderboardService', 'RevealState']
