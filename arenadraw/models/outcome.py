"""The closed set of wildcard cards a team can draw."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Outcome(str, Enum):
    """Wildcard card type.

    The enum value is the stable key stored in the local progress cache;
    :attr:`label` is the human readable text recorded remotely.
    """

    FREEZE = "freeze"
    GUESS_POINT = "guess"
    TWO_MEMBER_OUT = "out"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional["Outcome"]:
        """Return the outcome whose label matches ``label``, ignoring case.

        Unknown or empty labels yield ``None``.
        """
        if not label:
            return None
        normalized = label.strip().lower()
        for outcome, text in _LABELS.items():
            if text.lower() == normalized:
                return outcome
        return None

    @classmethod
    def from_key(cls, key: Optional[str]) -> Optional["Outcome"]:
        """Return the outcome stored under ``key``, or ``None``."""
        if not key:
            return None
        try:
            return cls(key)
        except ValueError:
            return None


_LABELS = {
    Outcome.FREEZE: "Freeze",
    Outcome.GUESS_POINT: "Guess the point",
    Outcome.TWO_MEMBER_OUT: "2 Member Out",
}

ALL_OUTCOMES: tuple[Outcome, ...] = tuple(Outcome)
"""Every outcome in declaration order."""


__all__ = ["Outcome", "ALL_OUTCOMES"]
