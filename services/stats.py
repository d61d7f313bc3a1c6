# services/stats.py
from collections import OrderedDict

RECENT_QUIZZES = 7


def _percent(part, whole):
    if not whole:
        return 0
    return int(part * 100 / whole + 0.5)


def todo_summary(todos):
    completed = sum(1 for t in todos if t.is_completed)
    return {
        "total": len(todos),
        "completed": completed,
        "pending": len(todos) - completed,
        "progress": _percent(completed, len(todos)),
    }


def quiz_summary(results):
    """Dashboard numbers for a user's quiz history (``results`` newest first)."""
    total = len(results)
    average = int(sum(r.percentage for r in results) / total + 0.5) if total else 0

    per_subject = OrderedDict()
    for r in results:
        bucket = per_subject.setdefault(r.subject or "General", [0, 0])
        bucket[0] += r.percentage
        bucket[1] += 1

    return {
        "total": total,
        "average": average,
        # oldest first, for left-to-right charts
        "recent": list(reversed(results[:RECENT_QUIZZES])),
        "subjects": [
            {"subject": subject, "avg": int(score / count + 0.5)}
            for subject, (score, count) in per_subject.items()
        ],
    }
