"""Session value owned by the round progression state machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .models.outcome import Outcome
from .models.team import TeamRecord


class DrawState(Enum):
    """Where a team currently is in the draw flow."""

    UNVERIFIED = "unverified"  # No team verified yet, or after reset
    VERIFYING = "verifying"  # Waiting on the record store lookup
    AWAITING_DRAW = "awaiting_draw"  # A round is pending and may be drawn
    DRAWING = "drawing"  # Reveal delay running; engine not yet invoked
    REVEALED = "revealed"  # Outcome shown, not yet acknowledged by the store
    COMPLETED = "completed"  # Both rounds recorded


@dataclass
class DrawFlags:
    """Per-round "already drawn" flags as last synced with the store."""

    round2: bool = False
    round3: bool = False

    def get(self, round_number: int) -> bool:
        if round_number == 2:
            return self.round2
        if round_number == 3:
            return self.round3
        raise ValueError(f"Unknown round {round_number}")

    def mark(self, round_number: int) -> None:
        if round_number == 2:
            self.round2 = True
        elif round_number == 3:
            self.round3 = True
        else:
            raise ValueError(f"Unknown round {round_number}")

    @property
    def next_round(self) -> Optional[int]:
        if not self.round2:
            return 2
        if not self.round3:
            return 3
        return None


@dataclass(frozen=True)
class Reveal:
    """An outcome shown to the team for a round."""

    round_number: int
    outcome: Outcome


@dataclass
class DrawSession:
    """Local, transient progress of one team through the draw flow.

    ``draw_flags`` mirror the remote record at the last sync and are the only
    source for deciding which round comes next. ``recorded`` holds the
    outcomes acknowledged by the store during this session, which is what
    makes a repeated ``commit`` a no-op.
    """

    team_id: str
    verified: bool = False
    current_round: Optional[int] = None
    round2_outcome: Optional[Outcome] = None
    draw_flags: DrawFlags = field(default_factory=DrawFlags)
    revealed: Optional[Reveal] = None
    recorded: dict[int, Outcome] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: TeamRecord) -> "DrawSession":
        """Create a verified session mirroring ``record``."""
        flags = DrawFlags(
            round2=record.round2_recorded,
            round3=record.round3_recorded,
        )
        return cls(
            team_id=record.team_id,
            verified=True,
            current_round=flags.next_round,
            round2_outcome=record.outcome_for(2),
            draw_flags=flags,
        )

    @property
    def is_complete(self) -> bool:
        return self.draw_flags.next_round is None


__all__ = ["DrawState", "DrawFlags", "Reveal", "DrawSession"]
