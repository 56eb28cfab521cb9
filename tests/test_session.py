from __future__ import annotations

import unittest

from arenadraw import exceptions
from arenadraw.models import Outcome, TeamRecord
from arenadraw.session import DrawFlags, DrawSession


class DrawFlagsTests(unittest.TestCase):
    def test_next_round_progression(self) -> None:
        flags = DrawFlags()
        self.assertEqual(flags.next_round, 2)
        flags.mark(2)
        self.assertEqual(flags.next_round, 3)
        flags.mark(3)
        self.assertIsNone(flags.next_round)
        self.assertTrue(flags.get(2) and flags.get(3))

    def test_unknown_round(self) -> None:
        with self.assertRaises(ValueError):
            DrawFlags().mark(1)
        with self.assertRaises(ValueError):
            DrawFlags().get(4)


class DrawSessionTests(unittest.TestCase):
    def test_from_record_mirrors_remote(self) -> None:
        record = TeamRecord("101", round2_result="Freeze", round2_recorded=True)
        session = DrawSession.from_record(record)
        self.assertTrue(session.verified)
        self.assertEqual(session.current_round, 3)
        self.assertIs(session.round2_outcome, Outcome.FREEZE)
        self.assertFalse(session.is_complete)

    def test_from_complete_record(self) -> None:
        record = TeamRecord("101", "Freeze", "2 Member Out", True, True)
        session = DrawSession.from_record(record)
        self.assertIsNone(session.current_round)
        self.assertTrue(session.is_complete)

    def test_team_record_next_round(self) -> None:
        self.assertEqual(TeamRecord("1").next_round, 2)
        self.assertEqual(TeamRecord("1", round3_recorded=True).next_round, 2)
        with self.assertRaises(ValueError):
            TeamRecord("1").result_for(1)


class ErrorTaxonomyTests(unittest.TestCase):
    def test_titles_are_distinct(self) -> None:
        classes = [
            exceptions.InvalidInput,
            exceptions.TeamNotFound,
            exceptions.AllRoundsComplete,
            exceptions.RecordingFailed,
            exceptions.ConnectivityError,
            exceptions.AdminAccessDenied,
            exceptions.EmptyEligibleSet,
            exceptions.InvalidStateTransition,
        ]
        titles = [cls.title for cls in classes]
        self.assertEqual(len(set(titles)), len(titles))
        for cls in classes:
            self.assertTrue(issubclass(cls, exceptions.WildcardError))

    def test_retryable_flags(self) -> None:
        self.assertTrue(exceptions.RecordingFailed("1", 2).retryable)
        self.assertTrue(exceptions.ConnectivityError("down").retryable)
        self.assertFalse(exceptions.AllRoundsComplete("1").retryable)

    def test_recording_failed_message(self) -> None:
        err = exceptions.RecordingFailed("101", 3, "quota")
        self.assertIn("round 3", str(err))
        self.assertIn("quota", str(err))


if __name__ == "__main__":
    unittest.main()
