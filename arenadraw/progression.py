"""Round progression state machine for the wildcard draw.

A :class:`RoundProgression` drives one participant device through
verification, drawing and recording of the round 2 and round 3 wildcards.
The record store is the system of record; the local progress cache is only
a resumability hint that every verification of an unfinished team
overwrites.

Typical flow::

    progression = RoundProgression(RecordStoreClient(), cache)
    await progression.verify("101")      # -> 2
    outcome = await progression.draw()   # reveal delay, then an Outcome
    await progression.commit()           # -> DrawState.AWAITING_DRAW (round 3)

A failed :meth:`RoundProgression.commit` leaves the revealed outcome in
place; the caller retries ``commit`` and can never draw that round again.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Mapping, Optional, Protocol

from .cache import (
    ROUND2_OUTCOME_KEY,
    TEAM_ID_KEY,
    InMemoryProgressCache,
    ProgressCache,
    load_session,
    mark_round_drawn,
    store_session,
)
from .draw.engine import WildcardDrawEngine
from .exceptions import (
    AllRoundsComplete,
    InvalidInput,
    InvalidStateTransition,
    RecordingFailed,
    TeamNotFound,
    WildcardError,
)
from .models.outcome import Outcome
from .models.team import TeamRecord
from .session import DrawSession, DrawState, Reveal
from .store.utils import is_success

logger = logging.getLogger(__name__)

DEFAULT_REVEAL_DELAY = 2.0
"""Seconds spent in ``DRAWING`` before the outcome is revealed."""

_TEAM_ID_PATTERN = re.compile(r"[0-9]+")


class RecordStore(Protocol):
    """The two record store operations the state machine depends on."""

    def verify(self, team_id: str) -> Optional[TeamRecord]: ...

    def save(
        self, team_id: str, round_number: int, result: str
    ) -> Mapping[str, Any]: ...


def is_valid_team_id(team_id: object) -> bool:
    """Return whether ``team_id`` is a non-empty string of ASCII digits."""
    return isinstance(team_id, str) and _TEAM_ID_PATTERN.fullmatch(team_id) is not None


class RoundProgression:
    """Orchestrates verification, draws and result recording for one device."""

    def __init__(
        self,
        client: RecordStore,
        cache: Optional[ProgressCache] = None,
        *,
        engine: Optional[WildcardDrawEngine] = None,
        reveal_delay: float = DEFAULT_REVEAL_DELAY,
    ) -> None:
        """Create a state machine in the ``UNVERIFIED`` state.

        Parameters
        ----------
        client : RecordStore
            Record store client, usually a
            :class:`~arenadraw.store.api.RecordStoreClient`. Its blocking
            calls run in a worker thread.
        cache : Optional[ProgressCache], default: None
            Local progress cache. An in-memory cache is used when omitted.
        engine : Optional[WildcardDrawEngine], default: None
            Draw engine; defaults to one over every :class:`Outcome`.
        reveal_delay : float, default: DEFAULT_REVEAL_DELAY
            Seconds to stay in ``DRAWING`` before revealing. ``0`` skips the
            delay for headless use.
        """

        self._client = client
        self._cache = cache if cache is not None else InMemoryProgressCache()
        self._engine = engine or WildcardDrawEngine()
        self.reveal_delay = reveal_delay
        self._state = DrawState.UNVERIFIED
        self._session: Optional[DrawSession] = None
        self._generation = 0
        self._committing = False

    # -------- inspection --------
    @property
    def state(self) -> DrawState:
        return self._state

    @property
    def session(self) -> Optional[DrawSession]:
        return self._session

    @property
    def current_round(self) -> Optional[int]:
        return self._session.current_round if self._session is not None else None

    @property
    def cache(self) -> ProgressCache:
        return self._cache

    # -------- operations --------
    def resume(self) -> Optional[DrawSession]:
        """Rehydrate the session from the local progress cache.

        The restored session is not verified: the next :meth:`draw`
        reconciles it against the record store before drawing.

        Returns
        -------
        Optional[DrawSession]
            The restored session, or ``None`` when nothing is cached.
        """
        if self._state is not DrawState.UNVERIFIED:
            raise InvalidStateTransition(
                f"Cannot resume from the cache while {self._state.value}"
            )
        session = load_session(self._cache)
        if session is None:
            return None
        self._session = session
        self._state = (
            DrawState.AWAITING_DRAW
            if session.current_round is not None
            else DrawState.COMPLETED
        )
        logger.info(
            f"Resumed team {session.team_id} from cache at round {session.current_round}"
        )
        return session

    async def verify(self, team_id: str) -> Optional[int]:
        """Verify ``team_id`` against the record store.

        Parameters
        ----------
        team_id : str
            Team number entered by the participant.

        Returns
        -------
        Optional[int]
            The round now awaiting a draw, or ``None`` if :meth:`reset` was
            called while the lookup was in flight.

        Raises
        ------
        InvalidInput
            If ``team_id`` is not a string of digits. No request is made.
        InvalidStateTransition
            If a verification, draw or commit is in progress, or a revealed
            outcome has not been recorded yet.
        TeamNotFound
            If the store has no record for the team.
        AllRoundsComplete
            If both rounds are already recorded. The state becomes
            ``COMPLETED``.
        ConnectivityError
            If the store could not be reached.
        """
        if not is_valid_team_id(team_id):
            raise InvalidInput(team_id)
        if self._committing or self._state in (
            DrawState.VERIFYING,
            DrawState.DRAWING,
            DrawState.REVEALED,
        ):
            raise InvalidStateTransition(f"Cannot verify while {self._state.value}")

        generation = self._generation
        self._state = DrawState.VERIFYING
        try:
            record = await asyncio.to_thread(self._client.verify, team_id)
        except BaseException as exc:
            if self._is_stale(generation):
                if isinstance(exc, WildcardError):
                    logger.info(f"Discarding verification of team {team_id} after reset")
                    return None
                raise
            self._to_unverified()
            raise

        if self._is_stale(generation):
            logger.info(f"Discarding verification of team {team_id} after reset")
            return None
        if record is None:
            self._to_unverified()
            raise TeamNotFound(team_id)

        session = DrawSession.from_record(record)
        if session.is_complete:
            # Nothing left to resume, so the cache is left as it was.
            self._session = session
            self._state = DrawState.COMPLETED
            logger.info(f"Team {team_id} has already drawn both rounds")
            raise AllRoundsComplete(team_id)

        try:
            self._sync_cache(session)
        except Exception as exc:
            logger.warning(f"Could not update the progress cache for team {team_id}: {exc}")
            self._to_unverified()
            raise

        self._session = session
        self._state = DrawState.AWAITING_DRAW
        logger.info(f"Team {team_id} verified; ready for round {session.current_round}")
        return session.current_round

    async def draw(self) -> Optional[Outcome]:
        """Draw the wildcard for the round awaiting a draw.

        Returns
        -------
        Optional[Outcome]
            The revealed outcome, or ``None`` if :meth:`reset` was called
            during the reveal delay.

        Raises
        ------
        InvalidStateTransition
            Unless the state is ``AWAITING_DRAW``. In particular a second
            draw is rejected while ``DRAWING`` and after a reveal.
        EmptyEligibleSet
            If the outcome set leaves nothing to draw.
        """
        if self._state is not DrawState.AWAITING_DRAW or self._session is None:
            raise InvalidStateTransition(f"Cannot draw while {self._state.value}")

        if not self._session.verified:
            next_round = await self.verify(self._session.team_id)
            if next_round is None:
                return None

        session = self._session
        round_number = session.current_round
        assert round_number is not None
        generation = self._generation
        self._state = DrawState.DRAWING
        try:
            if self.reveal_delay > 0:
                await asyncio.sleep(self.reveal_delay)
            if self._is_stale(generation):
                logger.info(f"Discarding round {round_number} draw after reset")
                return None
            if round_number == 3 and session.round2_outcome is None:
                logger.warning(
                    f"Round 2 outcome for team {session.team_id} is unknown; "
                    "drawing round 3 from the full set"
                )
            result = self._engine.draw_for_round(round_number, session.round2_outcome)
        except BaseException:
            if not self._is_stale(generation):
                self._state = DrawState.AWAITING_DRAW
            raise

        session.revealed = Reveal(round_number=round_number, outcome=result.outcome)
        self._state = DrawState.REVEALED
        logger.info(
            f"Team {session.team_id} drew {result.outcome.label!r} for round {round_number}"
        )
        return result.outcome

    async def commit(
        self,
        round_number: Optional[int] = None,
        outcome: Optional[Outcome] = None,
    ) -> Optional[DrawState]:
        """Record the revealed outcome with the record store.

        Calling ``commit`` again after a failure retries the submission of
        the same outcome. Calling it again after an acknowledgement is a
        no-op.

        Parameters
        ----------
        round_number : Optional[int], default: None
            Round to record; defaults to the revealed round.
        outcome : Optional[Outcome], default: None
            Outcome to record; must be the revealed one when given.

        Returns
        -------
        Optional[DrawState]
            The state after recording (``AWAITING_DRAW`` for round 3 or
            ``COMPLETED``), or ``None`` if :meth:`reset` was called while the
            submission was in flight.

        Raises
        ------
        RecordingFailed
            If the store answered without acknowledging the result.
        ConnectivityError
            If the store could not be reached.
        InvalidStateTransition
            If there is nothing to record, the arguments do not match the
            revealed outcome, or a submission is already in flight.
        """
        session = self._session
        if session is None:
            raise InvalidStateTransition("No verified team to record a result for")

        reveal = session.revealed
        target_round = round_number if round_number is not None else (
            reveal.round_number if reveal is not None else None
        )
        if target_round is not None and target_round in session.recorded:
            recorded = session.recorded[target_round]
            if outcome is None or outcome is recorded:
                logger.debug(f"Round {target_round} already recorded; nothing to do")
                return self._state
            raise InvalidStateTransition(
                f"Round {target_round} is already recorded as {recorded.label!r}"
            )

        if self._state is not DrawState.REVEALED or reveal is None:
            raise InvalidStateTransition(f"Nothing to record while {self._state.value}")
        if target_round != reveal.round_number or (
            outcome is not None and outcome is not reveal.outcome
        ):
            raise InvalidStateTransition(
                f"Only the revealed round {reveal.round_number} outcome "
                f"{reveal.outcome.label!r} can be recorded"
            )
        if self._committing:
            raise InvalidStateTransition("A submission is already in flight")

        generation = self._generation
        self._committing = True
        try:
            ack = await asyncio.to_thread(
                self._client.save,
                session.team_id,
                reveal.round_number,
                reveal.outcome.label,
            )
        except BaseException as exc:
            if self._is_stale(generation) and isinstance(exc, WildcardError):
                logger.info(f"Discarding round {reveal.round_number} submission after reset")
                return None
            logger.warning(
                f"Recording round {reveal.round_number} for team {session.team_id} failed: {exc}"
            )
            raise
        finally:
            if not self._is_stale(generation):
                self._committing = False

        if self._is_stale(generation):
            logger.info(f"Discarding round {reveal.round_number} acknowledgement after reset")
            return None
        if not is_success(ack):
            message = ack.get("message")
            logger.warning(
                f"Record store rejected round {reveal.round_number} for team "
                f"{session.team_id}: {message or 'no message'}"
            )
            raise RecordingFailed(session.team_id, reveal.round_number, message)

        session.recorded[reveal.round_number] = reveal.outcome
        session.draw_flags.mark(reveal.round_number)
        if reveal.round_number == 2:
            session.round2_outcome = reveal.outcome
        session.current_round = session.draw_flags.next_round
        self._state = (
            DrawState.AWAITING_DRAW
            if session.current_round is not None
            else DrawState.COMPLETED
        )
        logger.info(
            f"Recorded round {reveal.round_number} for team {session.team_id}; "
            f"state is now {self._state.value}"
        )

        # The store already holds the result; the cache only trails it.
        try:
            mark_round_drawn(self._cache, reveal.round_number, reveal.outcome)
        except Exception as exc:
            logger.error(
                f"Round {reveal.round_number} was recorded but the progress cache "
                f"could not be updated: {exc}"
            )
            raise
        return self._state

    def advance(self) -> int:
        """Return the round awaiting a draw after a recorded reveal.

        After :meth:`resume` the round is the cached one and has not been
        confirmed by the record store yet; :meth:`draw` verifies it first.

        Raises
        ------
        AllRoundsComplete
            If no round is left.
        InvalidStateTransition
            If the current reveal has not been recorded yet.
        """
        if self._state is DrawState.AWAITING_DRAW and self._session is not None:
            assert self._session.current_round is not None
            return self._session.current_round
        if self._state is DrawState.COMPLETED and self._session is not None:
            raise AllRoundsComplete(self._session.team_id)
        raise InvalidStateTransition(f"Cannot advance while {self._state.value}")

    def reset(self) -> None:
        """Forget the session and clear the cache. Nothing is sent remotely."""
        team_id = self._session.team_id if self._session is not None else None
        self._generation += 1
        self._session = None
        self._committing = False
        self._state = DrawState.UNVERIFIED
        self._cache.clear()
        logger.info(f"Reset draw session{f' for team {team_id}' if team_id else ''}")

    # -------- helpers --------
    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    def _sync_cache(self, session: DrawSession) -> None:
        if session.draw_flags.round2 and session.round2_outcome is None:
            # The store reported round 2 as filled without a readable label;
            # fall back to the card this device recorded for the same team.
            if self._cache.get(TEAM_ID_KEY) == session.team_id:
                session.round2_outcome = Outcome.from_key(
                    self._cache.get(ROUND2_OUTCOME_KEY)
                )
        store_session(self._cache, session)

    def _to_unverified(self) -> None:
        self._session = None
        self._state = DrawState.UNVERIFIED


__all__ = [
    "DEFAULT_REVEAL_DELAY",
    "RecordStore",
    "RoundProgression",
    "is_valid_team_id",
]
