"""
Bot-wide constants for the Race Board bot.

Roster limits, award metadata and display values used across the scoring,
ranking and Discord layers.
"""

class RosterConstants:
    """Constants related to teams and their member slots."""
    
    # Every team has exactly this many member slots
    MAX_MEMBER_COUNT = 4
    
    # Survival HP credited for every empty member slot
    HP_PER_MISSING_MEMBER = 80
    
    LEVELS = (1, 2, 3, 4, 5)
    MAX_LEVEL = 5
    DEFAULT_LEVEL = 1
    
    # Upper bound for minutes and member HP input
    MAX_INPUT_VALUE = 9_999


class AwardConstants:
    """Keys and labels for the three awards."""
    
    MASTER = "master"
    COLLECTION = "collection"
    TIME_ATTACK = "timeattack"
    
    ALL_AWARDS = (MASTER, COLLECTION, TIME_ATTACK)
    
    # Amount-then-name order shown next to each team on the roster
    QUALIFYING_ORDER = "qualifying"
    
    TITLES = {
        MASTER: "🏆 Master Award",
        COLLECTION: "💰 Collection Award",
        TIME_ATTACK: "⚡ Time-Attack Award",
    }
    
    DESCRIPTIONS = {
        MASTER: "Highest score wins (final amount ÷ play time × survival HP total × final level)",
        COLLECTION: "The team that earned the most $ wins",
        TIME_ATTACK: "The team that reached level 5 the fastest wins",
    }


class UIConstants:
    """Constants for Discord UI elements."""
    
    # Embed colors
    DEFAULT_EMBED_COLOR = 0x3498db  # Blue
    GOLD_RANK_COLOR = 0xffd700     # Gold for the podium
    
    # Masked values for ranks that have not been revealed yet
    HIDDEN_VALUE = "???"
    HIDDEN_RANK = "?"
    
    # Shown for values that are absent or not applicable
    EMPTY_VALUE = "—"
    NOT_REACHED = "Not reached"
    UNNAMED_TEAM = "(unnamed)"
    
    TIE_LABEL = "tie"
    CROWN_EMOJI = "👑"
    
    # Rows shown per leaderboard embed
    MAX_ROWS = 25
    # Hidden rows kept in view above the newest reveal on long boards
    ROWS_ABOVE_REVEAL = 5
