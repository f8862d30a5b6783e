"""
Display formatting for leaderboard values.
"""

from typing import Optional

from race_board.constants import UIConstants


def format_number(value: float, max_fraction_digits: int = 2) -> str:
    """Thousands separators and at most ``max_fraction_digits`` decimals."""
    text = f"{value:,.{max_fraction_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_currency(value: Optional[float]) -> str:
    if value is None:
        return UIConstants.EMPTY_VALUE
    return f"${format_number(value)}"


def format_minutes(value: Optional[float]) -> str:
    if value is None:
        return UIConstants.EMPTY_VALUE
    return f"{format_number(value)} min"


def format_level(level: int) -> str:
    return f"Lv.{level}"


def format_team_name(name: str) -> str:
    return name or UIConstants.UNNAMED_TEAM
