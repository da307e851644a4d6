"""Daily review streak tracking fed by completed practice sessions."""
from datetime import date, datetime, timedelta

from lexicard.db import get_connection

MILESTONES = (3, 7, 14, 21, 30, 50, 75, 100, 150, 200, 365)


def record_session(db_path: str, cards_reviewed: int, reviewed_at: datetime | None = None) -> None:
    reviewed_at = reviewed_at or datetime.now()
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO review_sessions (reviewed_on, cards_reviewed, completed_at) VALUES (?, ?, ?)",
        (reviewed_at.date().isoformat(), cards_reviewed, reviewed_at.isoformat()),
    )
    conn.commit()
    conn.close()


def _longest_run(days: list[date]) -> int:
    best = run = 0
    previous = None
    for day in days:
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        best = max(best, run)
        previous = day
    return best


def get_streak(db_path: str, today: date | None = None) -> dict:
    """Current and best streak in days plus review totals.

    A streak stays alive while the last review day is today or yesterday.
    """
    today = today or date.today()
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT reviewed_on, SUM(cards_reviewed) as cards, COUNT(*) as sessions "
        "FROM review_sessions GROUP BY reviewed_on ORDER BY reviewed_on"
    ).fetchall()
    conn.close()

    days = [date.fromisoformat(r["reviewed_on"]) for r in rows]
    current = 0
    if days and (today - days[-1]).days <= 1:
        current = 1
        for earlier, later in zip(reversed(days[:-1]), reversed(days[1:])):
            if later - earlier != timedelta(days=1):
                break
            current += 1
    per_day = {r["reviewed_on"]: r["cards"] for r in rows}
    return {
        "current_streak": current,
        "best_streak": _longest_run(days),
        "total_sessions": sum(r["sessions"] for r in rows),
        "total_cards_reviewed": sum(r["cards"] for r in rows),
        "cards_today": per_day.get(today.isoformat(), 0),
    }


def new_milestones(previous_streak: int, current_streak: int, achieved=()) -> list[int]:
    return [
        m for m in MILESTONES
        if previous_streak < m <= current_streak and m not in achieved
    ]
