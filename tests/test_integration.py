# tests/test_integration.py
"""End-to-end test of the core workflow."""
import json
import random
from datetime import datetime, timedelta

from lexicard.cards import get_all_cards, get_due_cards, save_card
from lexicard.dashboard import get_due_summary, get_exercise_stats
from lexicard.db import init_db
from lexicard.exercises import ExerciseType
from lexicard.importer import import_cards
from lexicard.preferences import ExercisePreferences, load_preferences, save_preferences
from lexicard.scheduler import PracticeScheduler
from lexicard.streak import get_streak, record_session


def test_full_practice_workflow(tmp_db, tmp_path):
    """Import a deck, practice it twice and verify scheduling and stats."""
    init_db(tmp_db)
    deck = tmp_path / "deck.json"
    deck.write_text(json.dumps([
        {"front": "Hund", "back": "dog", "word_data": {"type": "noun", "gender": "der"}},
        {"front": "Katze", "back": "cat", "word_data": {"type": "noun", "gender": "die"}},
        {"front": "gehen", "back": "to go"},
    ]), encoding="utf-8")
    assert import_cards(tmp_db, str(deck), language="de")["imported"] == 3

    prefs = ExercisePreferences(enabled_types=frozenset({
        ExerciseType.WRITING_TRANSLATION, ExerciseType.ARTICLE_SELECTION,
    }))
    save_preferences(tmp_db, prefs)
    prefs = load_preferences(tmp_db)

    clock = {"now": datetime(2026, 3, 1, 9, 0)}
    scheduler = PracticeScheduler(
        get_candidate_units=lambda: get_due_cards(tmp_db, prefs, now=clock["now"]),
        persist_unit=lambda card: save_card(tmp_db, card),
        preferences=prefs,
        on_session_complete=lambda count: record_session(tmp_db, count, reviewed_at=clock["now"]),
        get_all_units=lambda: get_all_cards(tmp_db),
        clock=lambda: clock["now"],
        rng=random.Random(5),
    )

    # Day 1: three writing items and two article items, all answered correctly
    scheduler.start_session()
    assert scheduler.total_count == 5
    while scheduler.current_item is not None:
        if scheduler.current_exercise_type is ExerciseType.ARTICLE_SELECTION:
            scheduler.select_option(scheduler.current_card.noun_gender)
        else:
            scheduler.submit_text_answer(scheduler.current_card.back_text)
        assert scheduler.state.current_answer_correct
        stats = scheduler.confirm_answer_and_advance(True)
    assert stats.cards_reviewed == 5
    assert stats.accuracy == 1.0

    # Nothing is due again right away
    scheduler.start_session()
    assert scheduler.state.no_due_items

    # Day 5: everything is due again, one wrong answer
    clock["now"] += timedelta(days=4)
    scheduler.start_session()
    assert scheduler.total_count == 5
    scheduler.confirm_answer_and_advance(False)
    scheduler.end_session()

    cards = get_all_cards(tmp_db)
    assert sum(c.review_count for c in cards) == 6
    summary = get_due_summary(cards, prefs, now=clock["now"])
    assert summary["due_items"] == 4

    exercise_stats = {s["exercise_type"]: s for s in get_exercise_stats(cards)}
    assert exercise_stats[ExerciseType.WRITING_TRANSLATION]["attempts"] + \
        exercise_stats[ExerciseType.ARTICLE_SELECTION]["attempts"] == 6

    streak = get_streak(tmp_db, today=clock["now"].date())
    assert streak["total_sessions"] == 2
    assert streak["total_cards_reviewed"] == 6
    assert streak["current_streak"] == 1
