"""Local progress cache: a scoped key/value store used to resume a draw flow.

The cache is advisory. It lets a participant pick up where they left off
after a reload, but every verification overwrites it with what the record
store reports.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.orm import sessionmaker

from .models.outcome import Outcome
from .models.progress import ProgressEntry
from .session import DrawFlags, DrawSession

logger = logging.getLogger(__name__)

TEAM_ID_KEY = "teamId"
ROUND2_DRAWN_KEY = "round2Drawn"
ROUND3_DRAWN_KEY = "round3Drawn"
ROUND2_OUTCOME_KEY = "round2OutcomeType"

CACHE_KEYS = (TEAM_ID_KEY, ROUND2_DRAWN_KEY, ROUND3_DRAWN_KEY, ROUND2_OUTCOME_KEY)

_TRUE = "true"


class ProgressCache:
    """Interface shared by the cache backends."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def snapshot(self) -> dict[str, str]:
        """Return a copy of every stored key/value pair."""
        raise NotImplementedError


class InMemoryProgressCache(ProgressCache):
    """Cache held in process memory; gone when the process exits."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def clear(self) -> None:
        self._values.clear()

    def snapshot(self) -> dict[str, str]:
        return dict(self._values)


class SqlProgressCache(ProgressCache):
    """Cache persisted in the ``progress_entries`` table under one scope.

    Every call opens its own short transaction and blocks until it commits.
    :class:`~arenadraw.progression.RoundProgression` calls the cache directly
    on the event loop, so use a local database such as SQLite.

    Parameters
    ----------
    session_factory : sessionmaker
        Factory producing SQLAlchemy sessions bound to the cache database,
        typically from :func:`arenadraw.db.engine.get_sessionmaker`.
    scope : str
        Identifier of the device or browser session owning these entries.
    """

    def __init__(self, session_factory: sessionmaker, scope: str) -> None:
        if not scope:
            raise ValueError("scope must not be empty")
        self._session_factory = session_factory
        self.scope = scope

    def get(self, key: str) -> Optional[str]:
        with self._session_factory() as session:
            entry = ProgressEntry.get(session, self.scope, key)
            return entry.value if entry is not None else None

    def set(self, key: str, value: str) -> None:
        with self._session_factory.begin() as session:
            entry = ProgressEntry.get(session, self.scope, key)
            if entry is None:
                session.add(ProgressEntry(scope=self.scope, key=key, value=value))
            else:
                entry.value = value

    def delete(self, key: str) -> None:
        with self._session_factory.begin() as session:
            session.execute(
                delete(ProgressEntry).where(
                    ProgressEntry.scope == self.scope, ProgressEntry.key == key
                )
            )

    def clear(self) -> None:
        with self._session_factory.begin() as session:
            session.execute(delete(ProgressEntry).where(ProgressEntry.scope == self.scope))
        logger.debug(f"Cleared progress cache scope {self.scope!r}")

    def snapshot(self) -> dict[str, str]:
        with self._session_factory() as session:
            return {
                entry.key: entry.value
                for entry in ProgressEntry.for_scope(session, self.scope)
            }


def _set_flag(cache: ProgressCache, key: str, value: bool) -> None:
    # Absent means "not drawn", matching how the flags were first stored.
    if value:
        cache.set(key, _TRUE)
    else:
        cache.delete(key)


def store_session(cache: ProgressCache, draw_session: DrawSession) -> None:
    """Overwrite the cached progress with ``draw_session``.

    A cache that belongs to a different team is cleared first so no stale
    flag survives the switch.
    """
    cached_team = cache.get(TEAM_ID_KEY)
    if cached_team is not None and cached_team != draw_session.team_id:
        logger.info(
            f"Progress cache held team {cached_team}; replacing with {draw_session.team_id}"
        )
        cache.clear()

    cache.set(TEAM_ID_KEY, draw_session.team_id)
    _set_flag(cache, ROUND2_DRAWN_KEY, draw_session.draw_flags.round2)
    _set_flag(cache, ROUND3_DRAWN_KEY, draw_session.draw_flags.round3)
    if draw_session.round2_outcome is not None:
        cache.set(ROUND2_OUTCOME_KEY, draw_session.round2_outcome.value)
    else:
        cache.delete(ROUND2_OUTCOME_KEY)


def mark_round_drawn(
    cache: ProgressCache, round_number: int, outcome: Optional[Outcome] = None
) -> None:
    """Record a successfully acknowledged round in the cache."""
    if round_number == 2:
        _set_flag(cache, ROUND2_DRAWN_KEY, True)
        if outcome is not None:
            cache.set(ROUND2_OUTCOME_KEY, outcome.value)
    elif round_number == 3:
        _set_flag(cache, ROUND3_DRAWN_KEY, True)
    else:
        raise ValueError(f"Unknown round {round_number}")


def load_session(cache: ProgressCache) -> Optional[DrawSession]:
    """Rebuild an unverified :class:`DrawSession` from the cache.

    Returns ``None`` when no team is cached.
    """
    team_id = cache.get(TEAM_ID_KEY)
    if not team_id:
        return None
    flags = DrawFlags(
        round2=cache.get(ROUND2_DRAWN_KEY) == _TRUE,
        round3=cache.get(ROUND3_DRAWN_KEY) == _TRUE,
    )
    return DrawSession(
        team_id=team_id,
        verified=False,
        current_round=flags.next_round,
        round2_outcome=Outcome.from_key(cache.get(ROUND2_OUTCOME_KEY)),
        draw_flags=flags,
    )


__all__ = [
    "CACHE_KEYS",
    "TEAM_ID_KEY",
    "ROUND2_DRAWN_KEY",
    "ROUND3_DRAWN_KEY",
    "ROUND2_OUTCOME_KEY",
    "ProgressCache",
    "InMemoryProgressCache",
    "SqlProgressCache",
    "store_session",
    "mark_round_drawn",
    "load_session",
]
