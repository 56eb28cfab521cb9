"""Value object for a team's remotely recorded results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .outcome import Outcome

ROUNDS: tuple[int, ...] = (2, 3)
"""Rounds in which a wildcard is drawn, in order."""


@dataclass(frozen=True)
class TeamRecord:
    """Snapshot of one team's row in the remote record store.

    Attributes
    ----------
    team_id : str
        Externally assigned numeric team identifier.
    round2_result : Optional[str]
        Label recorded for round 2, if the store returned one.
    round3_result : Optional[str]
        Label recorded for round 3, if the store returned one.
    round2_recorded : bool
        Whether round 2 is filled. Some stores only report a filled flag
        without echoing the label, so this is tracked separately.
    round3_recorded : bool
        Whether round 3 is filled.
    """

    team_id: str
    round2_result: Optional[str] = None
    round3_result: Optional[str] = None
    round2_recorded: bool = False
    round3_recorded: bool = False

    def is_recorded(self, round_number: int) -> bool:
        if round_number == 2:
            return self.round2_recorded
        if round_number == 3:
            return self.round3_recorded
        raise ValueError(f"Unknown round {round_number}")

    def result_for(self, round_number: int) -> Optional[str]:
        if round_number == 2:
            return self.round2_result
        if round_number == 3:
            return self.round3_result
        raise ValueError(f"Unknown round {round_number}")

    def outcome_for(self, round_number: int) -> Optional[Outcome]:
        """Map the recorded label for ``round_number`` back to an :class:`Outcome`."""
        return Outcome.from_label(self.result_for(round_number))

    @property
    def next_round(self) -> Optional[int]:
        """First round without a recorded result, or ``None`` when all are done."""
        for round_number in ROUNDS:
            if not self.is_recorded(round_number):
                return round_number
        return None


__all__ = ["ROUNDS", "TeamRecord"]
