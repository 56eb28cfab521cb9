import logging
from typing import Any, Mapping, Optional

import requests

from ..models.team import TeamRecord

logger = logging.getLogger(__name__)


def open_session() -> requests.Session:
    """Open a requests session for talking to the record store.

    Returns
    -------
    requests.Session
        Session with JSON ``Accept`` headers set. Connections are pooled
        across calls made through the same session.
    """
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    logger.debug("Opened record store session")
    return session


def is_success(payload: Mapping[str, Any]) -> bool:
    """Return whether ``payload`` reports success.

    Stores answer either with ``{"status": "success"}`` or with a boolean
    ``{"success": true}``; both are accepted.
    """
    status = payload.get("status")
    if status is not None:
        return str(status).lower() == "success"
    return payload.get("success") is True


def _first(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value not in (None, ""):
            return value
    return None


def _recorded(payload: Mapping[str, Any], flag_key: str, result: Optional[str]) -> bool:
    flag = payload.get(flag_key)
    if flag is not None:
        return bool(flag)
    return result is not None


def parse_team_record(team_id: str, payload: Mapping[str, Any]) -> TeamRecord:
    """Build a :class:`TeamRecord` from a store payload describing one team.

    Parameters
    ----------
    team_id : str
        Team identifier used when the payload does not echo one back.
    payload : Mapping[str, Any]
        Raw JSON object as returned by the store.
    """
    round2 = _first(payload, "round2Outcome", "round2Result", "round2")
    round3 = _first(payload, "round3Outcome", "round3Result", "round3")
    round2 = str(round2) if round2 is not None else None
    round3 = str(round3) if round3 is not None else None
    record_team = _first(payload, "teamId", "team")
    return TeamRecord(
        team_id=str(record_team) if record_team is not None else team_id,
        round2_result=round2,
        round3_result=round3,
        round2_recorded=_recorded(payload, "round2_filled", round2),
        round3_recorded=_recorded(payload, "round3_filled", round3),
    )


def parse_record_list(payload: Mapping[str, Any]) -> list[TeamRecord]:
    """Parse the team listing returned by the admin endpoint."""
    rows = payload.get("records")
    if rows is None:
        rows = payload.get("results")
    records: list[TeamRecord] = []
    for row in rows or []:
        if not isinstance(row, Mapping):
            raise ValueError(f"Unexpected record entry: {row!r}")
        team = _first(row, "teamId", "team")
        if team is None:
            raise ValueError(f"Record entry has no team identifier: {row!r}")
        records.append(parse_team_record(str(team), row))
    return records
