"""Helpers for deciding which outcome a round's draw must exclude."""

from __future__ import annotations

from typing import Optional

from ..models.outcome import Outcome
from ..models.team import ROUNDS


def exclusion_for_round(
    round_number: int, round2_outcome: Optional[Outcome]
) -> Optional[Outcome]:
    """Return the outcome excluded from the draw for ``round_number``.

    Round 3 may not repeat the card drawn in round 2. Round 2 draws from the
    full set.

    Parameters
    ----------
    round_number : int
        Round about to be drawn (``2`` or ``3``).
    round2_outcome : Optional[Outcome]
        Outcome recorded for round 2, when known.

    Returns
    -------
    Optional[Outcome]
        The excluded outcome, or ``None`` when every outcome is eligible.
    """

    if round_number not in ROUNDS:
        raise ValueError(f"Unknown round {round_number}")
    if round_number == 3:
        return round2_outcome
    return None


__all__ = ["exclusion_for_round"]
