from __future__ import annotations

import unittest
from collections import Counter
from unittest.mock import patch

from arenadraw.draw import DrawResult, WildcardDrawEngine, exclusion_for_round
from arenadraw.exceptions import EmptyEligibleSet
from arenadraw.models import ALL_OUTCOMES, Outcome

SAMPLE_SIZE = 3000


class ExclusionTests(unittest.TestCase):
    def test_round_two_draws_from_full_set(self) -> None:
        self.assertIsNone(exclusion_for_round(2, Outcome.FREEZE))

    def test_round_three_excludes_round_two_outcome(self) -> None:
        self.assertIs(exclusion_for_round(3, Outcome.FREEZE), Outcome.FREEZE)
        self.assertIsNone(exclusion_for_round(3, None))

    def test_unknown_round_raises(self) -> None:
        with self.assertRaises(ValueError):
            exclusion_for_round(4, None)


class WildcardDrawEngineTests(unittest.TestCase):
    def test_default_outcome_set(self) -> None:
        engine = WildcardDrawEngine()
        self.assertEqual(engine.outcomes, ALL_OUTCOMES)
        self.assertEqual(len(engine.outcomes), 3)

    def test_duplicate_outcomes_are_collapsed(self) -> None:
        engine = WildcardDrawEngine([Outcome.FREEZE, Outcome.FREEZE, Outcome.GUESS_POINT])
        self.assertEqual(engine.outcomes, (Outcome.FREEZE, Outcome.GUESS_POINT))

    def test_eligible_removes_excluded(self) -> None:
        engine = WildcardDrawEngine()
        self.assertEqual(
            engine.eligible(Outcome.FREEZE),
            (Outcome.GUESS_POINT, Outcome.TWO_MEMBER_OUT),
        )

    def test_excluded_outcome_never_drawn(self) -> None:
        engine = WildcardDrawEngine()
        counts = Counter(engine.draw(Outcome.FREEZE) for _ in range(SAMPLE_SIZE))
        self.assertEqual(counts[Outcome.FREEZE], 0)
        self.assertGreater(counts[Outcome.GUESS_POINT], 0)
        self.assertGreater(counts[Outcome.TWO_MEMBER_OUT], 0)
        # Expected 1500 each; a 1200 floor is far outside random variation.
        self.assertGreater(counts[Outcome.GUESS_POINT], 1200)
        self.assertGreater(counts[Outcome.TWO_MEMBER_OUT], 1200)

    def test_unconstrained_draw_covers_every_outcome(self) -> None:
        engine = WildcardDrawEngine()
        counts = Counter(engine.draw() for _ in range(SAMPLE_SIZE))
        for outcome in ALL_OUTCOMES:
            self.assertGreater(counts[outcome], 700)

    def test_uses_secrets_choice_by_default(self) -> None:
        with patch("arenadraw.draw.engine.secrets.choice", return_value=Outcome.GUESS_POINT) as choice:
            engine = WildcardDrawEngine()
            self.assertIs(engine.draw(), Outcome.GUESS_POINT)
        choice.assert_called_once_with(ALL_OUTCOMES)

    def test_empty_eligible_set_raises(self) -> None:
        engine = WildcardDrawEngine([Outcome.FREEZE])
        with self.assertRaises(EmptyEligibleSet):
            engine.draw(Outcome.FREEZE)
        with self.assertRaises(EmptyEligibleSet):
            WildcardDrawEngine([]).draw()

    def test_draw_for_round_reports_eligible_set(self) -> None:
        engine = WildcardDrawEngine(chooser=lambda eligible: eligible[-1])
        result = engine.draw_for_round(3, Outcome.TWO_MEMBER_OUT)
        self.assertIsInstance(result, DrawResult)
        self.assertEqual(result.round_number, 3)
        self.assertIs(result.excluded, Outcome.TWO_MEMBER_OUT)
        self.assertEqual(result.eligible, (Outcome.FREEZE, Outcome.GUESS_POINT))
        self.assertIs(result.outcome, Outcome.GUESS_POINT)

    def test_draw_for_round_two_ignores_known_outcome(self) -> None:
        engine = WildcardDrawEngine(chooser=lambda eligible: eligible[0])
        result = engine.draw_for_round(2, Outcome.FREEZE)
        self.assertIsNone(result.excluded)
        self.assertEqual(result.eligible, ALL_OUTCOMES)
        self.assertIs(result.outcome, Outcome.FREEZE)


class OutcomeTests(unittest.TestCase):
    def test_labels(self) -> None:
        self.assertEqual(Outcome.FREEZE.label, "Freeze")
        self.assertEqual(Outcome.GUESS_POINT.label, "Guess the point")
        self.assertEqual(Outcome.TWO_MEMBER_OUT.label, "2 Member Out")

    def test_from_label_is_case_insensitive(self) -> None:
        self.assertIs(Outcome.from_label("  guess THE point "), Outcome.GUESS_POINT)
        self.assertIsNone(Outcome.from_label("Skip"))
        self.assertIsNone(Outcome.from_label(None))

    def test_from_key(self) -> None:
        self.assertIs(Outcome.from_key("out"), Outcome.TWO_MEMBER_OUT)
        self.assertIsNone(Outcome.from_key("nope"))
        self.assertIsNone(Outcome.from_key(""))


if __name__ == "__main__":
    unittest.main()
