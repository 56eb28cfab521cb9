"""Read-only helpers behind the administrator's results view."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Sequence

from .exceptions import AdminAccessDenied, ConnectivityError
from .models.outcome import ALL_OUTCOMES
from .models.team import ROUNDS, TeamRecord
from .store.utils import is_success, parse_record_list

if TYPE_CHECKING:
    from .store.api import RecordStoreClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordSummary:
    """Counts derived from every team's records.

    Attributes
    ----------
    total_teams : int
        Number of teams listed by the store.
    round2_drawn : int
        Teams with a recorded round 2 result.
    round3_drawn : int
        Teams with a recorded round 3 result.
    outcome_counts : dict[int, dict[str, int]]
        Per round, how often each label was recorded. Every known label is
        present (possibly with ``0``); unknown labels are counted as-is.
    """

    total_teams: int
    round2_drawn: int
    round3_drawn: int
    outcome_counts: dict[int, dict[str, int]] = field(default_factory=dict)


def fetch_all_records(client: "RecordStoreClient", admin_key: str) -> list[TeamRecord]:
    """Fetch every team's record from the store.

    Parameters
    ----------
    client : RecordStoreClient
        Configured record store client.
    admin_key : str
        Shared secret checked by the store.

    Returns
    -------
    list[TeamRecord]
        One record per team in the order the store returned them.

    Raises
    ------
    AdminAccessDenied
        If the key is empty or the store refuses it.
    ConnectivityError
        If the store could not be reached or returned malformed records.
    """

    if not admin_key or not admin_key.strip():
        raise AdminAccessDenied("Please enter the admin key.")

    payload = client.list_all(admin_key)
    if not is_success(payload):
        logger.warning("Record store refused the admin listing")
        raise AdminAccessDenied("Invalid admin key. Access denied.")

    try:
        records = parse_record_list(payload)
    except ValueError as exc:
        raise ConnectivityError(f"Invalid response from server: {exc}") from exc
    logger.info(f"Loaded {len(records)} team records")
    return records


def filter_records(records: Iterable[TeamRecord], term: str) -> list[TeamRecord]:
    """Return records whose team id contains ``term``, ignoring case."""
    needle = term.strip().lower()
    return [record for record in records if needle in record.team_id.lower()]


def summarize_records(records: Sequence[TeamRecord]) -> RecordSummary:
    """Derive draw counts from ``records``."""
    outcome_counts: dict[int, dict[str, int]] = {}
    for round_number in ROUNDS:
        counter: Counter[str] = Counter({outcome.label: 0 for outcome in ALL_OUTCOMES})
        for record in records:
            result = record.result_for(round_number)
            if result is None:
                continue
            outcome = record.outcome_for(round_number)
            counter[outcome.label if outcome is not None else result] += 1
        outcome_counts[round_number] = dict(counter)

    return RecordSummary(
        total_teams=len(records),
        round2_drawn=sum(1 for record in records if record.round2_recorded),
        round3_drawn=sum(1 for record in records if record.round3_recorded),
        outcome_counts=outcome_counts,
    )


__all__ = [
    "RecordSummary",
    "fetch_all_records",
    "filter_records",
    "summarize_records",
]
