"""Exception hierarchy for the wildcard draw flow.

Every failure a participant can run into maps to one class here so callers
can show a distinguishable message (``title`` plus ``str(exc)``) without
string matching.
"""

from __future__ import annotations

from typing import Optional


class WildcardError(Exception):
    """Base class for all wildcard draw errors."""

    title = "Wildcard Error"
    retryable = False


# ============ Verification ============


class InvalidInput(WildcardError):
    """The team identifier is not a non-empty string of digits."""

    title = "Invalid Team Number"

    def __init__(self, team_id: object):
        self.team_id = team_id
        super().__init__("Please enter a numeric team number.")


class TeamNotFound(WildcardError):
    """The record store has no record for the team."""

    title = "Team Not Found"

    def __init__(self, team_id: str):
        self.team_id = team_id
        super().__init__(f"Team {team_id} not found. Please verify your team number.")


class AllRoundsComplete(WildcardError):
    """Both rounds are already recorded; a legitimate terminal state."""

    title = "All Draws Completed"

    def __init__(self, team_id: str):
        self.team_id = team_id
        super().__init__(f"Team {team_id} has already drawn for both rounds.")


# ============ Recording ============


class RecordingFailed(WildcardError):
    """The record store did not acknowledge a result."""

    title = "Recording Error"
    retryable = True

    def __init__(self, team_id: str, round_number: int, message: Optional[str] = None):
        self.team_id = team_id
        self.round_number = round_number
        self.message = message
        detail = f": {message}" if message else "."
        super().__init__(
            f"Could not record the round {round_number} result for team {team_id}{detail}"
        )


class ConnectivityError(WildcardError):
    """Transport failure talking to the record store."""

    title = "Connection Error"
    retryable = True


class AdminAccessDenied(WildcardError):
    """The record store refused to list results for the supplied key."""

    title = "Authentication Failed"


# ============ Draw / state ============


class EmptyEligibleSet(WildcardError):
    """No outcome is left to draw from; the outcome set is misconfigured."""

    title = "Configuration Error"


class InvalidStateTransition(WildcardError):
    """The requested operation is not legal in the current state."""

    title = "Not Allowed"


__all__ = [
    "WildcardError",
    "InvalidInput",
    "TeamNotFound",
    "AllRoundsComplete",
    "RecordingFailed",
    "ConnectivityError",
    "AdminAccessDenied",
    "EmptyEligibleSet",
    "InvalidStateTransition",
]
