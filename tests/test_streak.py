from datetime import date, datetime

from lexicard.db import init_db
from lexicard.streak import get_streak, new_milestones, record_session


def _record(db_path, *days, cards=5):
    for d in days:
        record_session(db_path, cards, reviewed_at=datetime(2026, 3, d, 18, 0))


def test_empty_streak(tmp_db):
    init_db(tmp_db)
    streak = get_streak(tmp_db, today=date(2026, 3, 10))
    assert streak == {
        "current_streak": 0, "best_streak": 0, "total_sessions": 0,
        "total_cards_reviewed": 0, "cards_today": 0,
    }


def test_consecutive_days(tmp_db):
    init_db(tmp_db)
    _record(tmp_db, 1, 2, 3)
    _record(tmp_db, 3, cards=2)
    streak = get_streak(tmp_db, today=date(2026, 3, 3))
    assert streak["current_streak"] == 3
    assert streak["best_streak"] == 3
    assert streak["total_sessions"] == 4
    assert streak["total_cards_reviewed"] == 17
    assert streak["cards_today"] == 7


def test_streak_alive_until_end_of_next_day(tmp_db):
    init_db(tmp_db)
    _record(tmp_db, 4, 5)
    assert get_streak(tmp_db, today=date(2026, 3, 6))["current_streak"] == 2
    assert get_streak(tmp_db, today=date(2026, 3, 7))["current_streak"] == 0


def test_gap_breaks_current_but_keeps_best(tmp_db):
    init_db(tmp_db)
    _record(tmp_db, 1, 2, 3, 4, 8, 9)
    streak = get_streak(tmp_db, today=date(2026, 3, 9))
    assert streak["current_streak"] == 2
    assert streak["best_streak"] == 4


def test_new_milestones():
    assert new_milestones(2, 3) == [3]
    assert new_milestones(6, 14) == [7, 14]
    assert new_milestones(6, 14, achieved=[7]) == [14]
    assert new_milestones(3, 3) == []
