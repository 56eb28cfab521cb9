"""Engine that picks a wildcard outcome uniformly from the eligible set."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from .exclusion import exclusion_for_round
from ..exceptions import EmptyEligibleSet
from ..models.outcome import ALL_OUTCOMES, Outcome

logger = logging.getLogger(__name__)

Chooser = Callable[[Sequence[Outcome]], Outcome]


@dataclass(frozen=True)
class DrawResult:
    """Value object describing a single draw.

    Attributes
    ----------
    round_number : int
        Round the draw was made for.
    outcome : Outcome
        The selected card.
    eligible : tuple[Outcome, ...]
        Outcomes that could have been selected.
    excluded : Optional[Outcome]
        Outcome removed from the set before drawing, if any.
    """

    round_number: int
    outcome: Outcome
    eligible: tuple[Outcome, ...]
    excluded: Optional[Outcome] = None


class WildcardDrawEngine:
    """Draw outcomes from a fixed set using operating-system entropy."""

    def __init__(
        self,
        outcomes: Iterable[Outcome] = ALL_OUTCOMES,
        *,
        chooser: Optional[Chooser] = None,
    ) -> None:
        """Create a draw engine over ``outcomes``.

        Parameters
        ----------
        outcomes : Iterable[Outcome], default: ALL_OUTCOMES
            The closed outcome set. Duplicates are collapsed so each outcome
            keeps an equal share.
        chooser : Optional[Chooser], default: None
            Callable picking one element from a sequence. Defaults to
            :func:`secrets.choice`, which reads fresh entropy on every call.
            Only tests should override it.
        """

        self._outcomes: tuple[Outcome, ...] = tuple(dict.fromkeys(outcomes))
        self._choose: Chooser = chooser or secrets.choice

    @property
    def outcomes(self) -> tuple[Outcome, ...]:
        return self._outcomes

    def eligible(self, exclude: Optional[Outcome] = None) -> tuple[Outcome, ...]:
        """Return the outcomes left after removing ``exclude``."""
        return tuple(outcome for outcome in self._outcomes if outcome is not exclude)

    def draw(self, exclude: Optional[Outcome] = None) -> Outcome:
        """Select one outcome uniformly at random, skipping ``exclude``.

        Raises
        ------
        EmptyEligibleSet
            If no outcome remains after the exclusion.
        """
        eligible = self.eligible(exclude)
        if not eligible:
            raise EmptyEligibleSet(
                "No eligible outcomes remain"
                + (f" after excluding {exclude.label!r}" if exclude else "")
            )
        return self._choose(eligible)

    def draw_for_round(
        self, round_number: int, round2_outcome: Optional[Outcome] = None
    ) -> DrawResult:
        """Draw for ``round_number`` applying the round-3 exclusion rule.

        Parameters
        ----------
        round_number : int
            Round being drawn.
        round2_outcome : Optional[Outcome], default: None
            Outcome already recorded for round 2. Ignored for round 2 itself.

        Returns
        -------
        DrawResult
            The selected outcome together with the eligible set it came from.
        """

        excluded = exclusion_for_round(round_number, round2_outcome)
        outcome = self.draw(excluded)
        logger.debug(
            f"Drew {outcome.label!r} for round {round_number}"
            + (f" excluding {excluded.label!r}" if excluded else "")
        )
        return DrawResult(
            round_number=round_number,
            outcome=outcome,
            eligible=self.eligible(excluded),
            excluded=excluded,
        )


__all__ = ["DrawResult", "WildcardDrawEngine"]
