"""Spaced repetition scoring for per-exercise card scores.

Every function here is pure: scores and cards are frozen values and each
update returns a new one.
"""
from dataclasses import replace
from datetime import datetime, timedelta

from lexicard.exercises import ExerciseType, implemented_types
from lexicard.models import Card, ExerciseScore, MasteryLevel

# Base review intervals in days, one rung per consecutive correct answer
INTERVAL_LADDER = (1, 2, 4, 8, 16, 32)
INCORRECT_INTERVAL_DAYS = 1
NEW_ATTEMPTS_FLOOR = 5


def interval_days(chain: int, success_rate: float, was_correct: bool) -> float:
    """Days until the next review for a score that was just updated.

    Args:
        chain: Consecutive correct answers, including the one just recorded.
        success_rate: Success rate (0-100) including the answer just recorded.
        was_correct: Whether the answer just recorded was correct.
    """
    if not was_correct:
        return float(INCORRECT_INTERVAL_DAYS)
    rung = min(max(chain, 1), len(INTERVAL_LADDER)) - 1
    base_days = INTERVAL_LADDER[rung]
    multiplier = min(max(success_rate / 100, 0.0), 1.0)
    return base_days * (1 + multiplier * 2)


def record_answer(score: ExerciseScore, was_correct: bool, now: datetime) -> ExerciseScore:
    """Return the score updated with one answer. The input is left untouched."""
    if was_correct:
        chain = score.current_chain + 1
        updated = replace(
            score,
            correct_count=score.correct_count + 1,
            current_chain=chain,
            best_chain=max(score.best_chain, chain),
        )
    else:
        updated = replace(score, incorrect_count=score.incorrect_count + 1, current_chain=0)
    days = interval_days(updated.current_chain, updated.success_rate, was_correct)
    return replace(updated, last_practiced=now, next_review=now + timedelta(days=days))


def is_due(score: ExerciseScore, now: datetime) -> bool:
    return score.next_review is None or score.next_review <= now


def _band(rate: float) -> MasteryLevel:
    if rate >= 90:
        return MasteryLevel.MASTERED
    if rate >= 70:
        return MasteryLevel.GOOD
    if rate >= 50:
        return MasteryLevel.LEARNING
    return MasteryLevel.DIFFICULT


def mastery_level(score: ExerciseScore) -> MasteryLevel:
    """Per-exercise mastery, graded by chain rather than success rate."""
    return score.mastery_level


def overall_mastery_level(card: Card) -> MasteryLevel:
    """Card-level mastery across all exercise scores, New below five attempts."""
    scores = card.exercise_scores.values()
    attempts = sum(s.total_attempts for s in scores)
    if attempts < NEW_ATTEMPTS_FLOOR:
        return MasteryLevel.NEW
    correct = sum(s.correct_count for s in scores)
    return _band(correct / attempts * 100)


def eligible_exercise_types(card: Card, has_enough_for_multiple_choice: bool = True) -> list[ExerciseType]:
    return [t for t in implemented_types() if t.can_use(card, has_enough_for_multiple_choice)]


def due_exercise_types(
    card: Card, now: datetime, has_enough_for_multiple_choice: bool = True,
) -> list[ExerciseType]:
    """Exercise types that fit the card's content and are due at `now`."""
    return [
        t for t in eligible_exercise_types(card, has_enough_for_multiple_choice)
        if is_due(card.score_for(t), now)
    ]


def apply_answer(card: Card, exercise_type: ExerciseType, was_correct: bool, now: datetime) -> Card:
    """Return the card with one exercise score updated and legacy counters bumped."""
    score = record_answer(card.score_for(exercise_type), was_correct, now)
    return card.with_score(
        score,
        review_count=card.review_count + 1,
        correct_count=card.correct_count + (1 if was_correct else 0),
        last_reviewed=now,
        updated_at=now,
    )


def has_due_exercise(card: Card, preferences, now: datetime) -> bool:
    return any(preferences.is_enabled(t) for t in due_exercise_types(card, now))


def filter_for_practice(cards: list, preferences, now: datetime, language: str = "") -> list:
    """Cards with at least one enabled due exercise, excluding archived ones."""
    return [
        c for c in cards
        if not c.is_archived
        and (not language or c.language == language)
        and has_due_exercise(c, preferences, now)
    ]
