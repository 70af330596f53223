import unittest
from datetime import date, datetime

from rambl.modules.dashboard import (
    DashboardService, MoodSample, aggregate_mood, chart_path, chart_points,
    mood_icon, window_labels,
)
from rambl.modules.record_store import ConversationRecord, ThemeCount

MONDAY = date(2026, 10, 19)


class FakeStore:
    def __init__(self, conversations=None, themes=None, avatar=None):
        self.conversations = conversations or []
        self.themes = themes or []
        self.avatar = avatar
        self.calls = []

    def avatar_url(self, user_id):
        self.calls.append(("avatar_url", user_id))
        return self.avatar

    def recent_conversations(self, user_id, limit=5):
        self.calls.append(("recent_conversations", user_id, limit))
        return self.conversations[:limit]

    def top_themes(self, user_id, limit=6):
        self.calls.append(("top_themes", user_id, limit))
        return self.themes[:limit]


class TestMoodAggregation(unittest.TestCase):
    def test_window_ends_on_today(self):
        self.assertEqual(window_labels(MONDAY), ["Tue", "Wed", "Thu", "Fri", "Sat", "Sun", "Mon"])
        self.assertEqual(window_labels(date(2026, 10, 25))[-1], "Sun")

    def test_empty_buckets_are_neutral(self):
        samples = aggregate_mood([], today=MONDAY)
        self.assertEqual(len(samples), 7)
        self.assertTrue(all(s.value == 50 for s in samples))

    def test_same_weekday_averaged_regardless_of_date(self):
        sessions = [
            ConversationRecord(id=1, created_at=datetime(2026, 10, 13, 9), intensity_score=40),
            ConversationRecord(id=2, created_at=datetime(2026, 9, 22, 21), intensity_score=60),
        ]
        samples = {s.day: s.value for s in aggregate_mood(sessions, today=MONDAY)}
        self.assertEqual(samples["Tue"], 50)
        self.assertEqual(samples["Wed"], 50)

    def test_round_half_up(self):
        sessions = [
            {"created_at": "2026-10-14T09:00:00", "intensity_score": 41},
            {"created_at": "2026-10-14T18:00:00", "intensity_score": 60},
        ]
        samples = {s.day: s.value for s in aggregate_mood(sessions, today=MONDAY)}
        self.assertEqual(samples["Wed"], 51)

    def test_sessions_without_intensity_ignored(self):
        sessions = [
            {"timestamp": datetime(2026, 10, 18), "intensity": None},
            {"timestamp": datetime(2026, 10, 18), "intensity": 90},
        ]
        samples = {s.day: s.value for s in aggregate_mood(sessions, today=MONDAY)}
        self.assertEqual(samples["Sun"], 90)

    def test_sessions_without_timestamp_ignored(self):
        sessions = [
            {"intensity_score": 10},
            {"created_at": None, "intensity_score": 20},
            {"created_at": "2026-10-18T10:00:00", "intensity_score": 80},
        ]
        samples = {s.day: s.value for s in aggregate_mood(sessions, today=MONDAY)}
        self.assertEqual(samples["Sun"], 80)
        self.assertEqual(sorted(samples.values()), [50] * 6 + [80])


class TestDashboardHelpers(unittest.TestCase):
    def test_mood_icon_thresholds(self):
        self.assertEqual(mood_icon(None), "😊")
        self.assertEqual(mood_icon(70), "😊")
        self.assertEqual(mood_icon(40), "😐")
        self.assertEqual(mood_icon(39), "😔")

    def test_chart_geometry(self):
        samples = [MoodSample("Sun", 50), MoodSample("Mon", 100)]
        self.assertEqual(chart_points(samples), [(0.0, 30.0), (100.0, 0.0)])
        self.assertEqual(chart_path(samples), "M 0 30 L 100 0")

    def test_chart_empty(self):
        self.assertEqual(chart_path([]), "")


class TestDashboardService(unittest.TestCase):
    def test_build_view(self):
        store = FakeStore(
            conversations=[
                ConversationRecord(id=7, created_at=datetime(2026, 10, 19, 8), summary="s", intensity_score=20),
            ],
            themes=[ThemeCount(id=1, label="Work", count=4)],
            avatar="https://cdn.example/avatar.png",
        )
        view = DashboardService(store).build("user-1", today=MONDAY)

        self.assertEqual(view["conversations"][0]["icon"], "😔")
        self.assertEqual(view["themes"], [{"id": 1, "label": "Work", "count": 4}])
        self.assertEqual(view["mood"][-1], {"day": "Mon", "value": 20})
        self.assertTrue(view["chartPath"].startswith("M 0 "))
        self.assertIn(("recent_conversations", "user-1", 5), store.calls)
        self.assertIn(("top_themes", "user-1", 6), store.calls)
        self.assertEqual(view["avatarUrl"], "https://cdn.example/avatar.png")

    def test_build_without_avatar(self):
        view = DashboardService(FakeStore()).build("user-1", today=MONDAY)
        self.assertIsNone(view["avatarUrl"])
        self.assertEqual(view["conversations"], [])


if __name__ == '__main__':
    unittest.main()
