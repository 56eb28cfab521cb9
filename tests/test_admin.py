import unittest

from arenadraw.admin import fetch_all_records, filter_records, summarize_records
from arenadraw.exceptions import AdminAccessDenied, ConnectivityError
from arenadraw.models import TeamRecord


class DummyAdminClient:
    def __init__(self, response):
        self.response = response
        self.keys: list[str] = []

    def list_all(self, admin_key):
        self.keys.append(admin_key)
        return self.response


class FetchAllRecordsTests(unittest.TestCase):
    def test_returns_parsed_records(self):
        client = DummyAdminClient(
            {
                "status": "success",
                "records": [
                    {"teamId": "101", "round2Outcome": "Freeze", "round3Outcome": "2 Member Out"},
                    {"teamId": "102", "round2Outcome": "Guess the point"},
                ],
            }
        )

        records = fetch_all_records(client, "key")

        self.assertEqual([r.team_id for r in records], ["101", "102"])
        self.assertTrue(records[0].round3_recorded)
        self.assertFalse(records[1].round3_recorded)
        self.assertEqual(client.keys, ["key"])

    def test_blank_key_rejected_without_request(self):
        client = DummyAdminClient({"status": "success", "records": []})
        with self.assertRaises(AdminAccessDenied):
            fetch_all_records(client, "   ")
        self.assertEqual(client.keys, [])

    def test_refused_key(self):
        client = DummyAdminClient({"success": False})
        with self.assertRaises(AdminAccessDenied):
            fetch_all_records(client, "wrong")

    def test_malformed_records(self):
        client = DummyAdminClient({"status": "success", "records": ["101"]})
        with self.assertRaises(ConnectivityError):
            fetch_all_records(client, "key")


class AggregationTests(unittest.TestCase):
    def setUp(self):
        self.records = [
            TeamRecord("101", "Freeze", "Guess the point", True, True),
            TeamRecord("102", "Freeze", None, True, False),
            TeamRecord("210", "Mystery", None, True, False),
            TeamRecord("211", None, None, False, False),
        ]

    def test_filter_by_team_substring(self):
        self.assertEqual(
            [r.team_id for r in filter_records(self.records, "10")], ["101", "102", "210"]
        )
        self.assertEqual(len(filter_records(self.records, "")), 4)
        self.assertEqual(filter_records(self.records, "999"), [])

    def test_summary_counts(self):
        summary = summarize_records(self.records)

        self.assertEqual(summary.total_teams, 4)
        self.assertEqual(summary.round2_drawn, 3)
        self.assertEqual(summary.round3_drawn, 1)
        self.assertEqual(
            summary.outcome_counts[2],
            {"Freeze": 2, "Guess the point": 0, "2 Member Out": 0, "Mystery": 1},
        )
        self.assertEqual(summary.outcome_counts[3]["Guess the point"], 1)

    def test_empty_summary(self):
        summary = summarize_records([])
        self.assertEqual(summary.total_teams, 0)
        self.assertEqual(summary.outcome_counts[3]["Freeze"], 0)


if __name__ == "__main__":
    unittest.main()
