"""
Custom exceptions for roster management with user-friendly error messages.
"""

class RosterException(Exception):
    """Base exception for roster-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class TeamNotFoundError(RosterException):
    """Raised when a team id does not exist in the roster."""
    def __init__(self, team_id: str):
        super().__init__(
            f"Team '{team_id}' not found",
            f"❌ Team `{team_id}` is not on the roster!"
        )

class TemplateNotFoundError(RosterException):
    """Raised when a team template does not exist."""
    def __init__(self, template_id: str):
        super().__init__(
            f"Template '{template_id}' not found",
            f"❌ Template `{template_id}` does not exist!"
        )

class InvalidFieldError(RosterException):
    """Raised when an unknown team or member field is edited."""
    def __init__(self, field: str, allowed):
        super().__init__(
            f"Unknown field '{field}'",
            f"❌ `{field}` cannot be edited. Choose one of: {', '.join(allowed)}"
        )

class MemberSlotError(RosterException):
    """Raised when a member slot index is out of range."""
    def __init__(self, slot: int, slot_count: int):
        super().__init__(
            f"Member slot {slot} out of range 1..{slot_count}",
            f"❌ Member slot must be between 1 and {slot_count}."
        )

class LastTeamError(RosterException):
    """Raised when removing the only team left on the roster."""
    def __init__(self):
        super().__init__(
            "Cannot remove the last remaining team",
            "❌ The roster must keep at least one team."
        )

class RosterImportError(RosterException):
    """Raised when an imported roster file cannot be understood."""
    def __init__(self, reason: str):
        super().__init__(
            f"Roster import failed: {reason}",
            f"❌ Could not import teams: {reason}"
        )
