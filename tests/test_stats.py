import unittest
from types import SimpleNamespace

from services import stats


def result(percentage, subject="Physics", topic="t"):
    return SimpleNamespace(percentage=percentage, subject=subject, topic=topic)


class TestTodoSummary(unittest.TestCase):
    def test_progress(self):
        todos = [SimpleNamespace(is_completed=c) for c in (True, False, True)]
        self.assertEqual(stats.todo_summary(todos),
                         {"total": 3, "completed": 2, "pending": 1, "progress": 67})

    def test_empty(self):
        self.assertEqual(stats.todo_summary([])["progress"], 0)


class TestQuizSummary(unittest.TestCase):
    def test_average_and_subjects(self):
        results = [result(80, "Physics"), result(60, "Biology"), result(41, "Physics"), result(50, None)]
        summary = stats.quiz_summary(results)
        self.assertEqual(summary["total"], 4)
        self.assertEqual(summary["average"], 58)
        self.assertEqual(summary["subjects"], [
            {"subject": "Physics", "avg": 61},
            {"subject": "Biology", "avg": 60},
            {"subject": "General", "avg": 50},
        ])

    def test_recent_is_seven_newest_oldest_first(self):
        results = [result(p, topic=str(p)) for p in range(10, 0, -1)]  # newest first
        recent = stats.quiz_summary(results)["recent"]
        self.assertEqual([r.percentage for r in recent], [4, 5, 6, 7, 8, 9, 10])

    def test_empty(self):
        summary = stats.quiz_summary([])
        self.assertEqual((summary["total"], summary["average"], summary["recent"]), (0, 0, []))
