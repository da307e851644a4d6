"""Mastery and per-exercise statistics across a card collection."""
from datetime import datetime

from lexicard.exercises import ExerciseType
from lexicard.models import MasteryLevel
from lexicard.scoring import due_exercise_types, overall_mastery_level


def get_mastery_color(level: MasteryLevel) -> str:
    return {
        MasteryLevel.MASTERED: "green",
        MasteryLevel.GOOD: "cyan",
        MasteryLevel.LEARNING: "yellow",
        MasteryLevel.DIFFICULT: "red",
    }.get(level, "dim")


def get_mastery_breakdown(cards: list) -> dict:
    breakdown = {level: 0 for level in MasteryLevel}
    for card in cards:
        breakdown[overall_mastery_level(card)] += 1
    return breakdown


def get_exercise_stats(cards: list) -> list[dict]:
    """Attempts and success rate per exercise type, in exercise type order."""
    totals = {}
    for card in cards:
        for exercise_type, score in card.exercise_scores.items():
            entry = totals.setdefault(exercise_type, {"correct": 0, "incorrect": 0, "cards": 0})
            entry["correct"] += score.correct_count
            entry["incorrect"] += score.incorrect_count
            entry["cards"] += 1
    results = []
    for exercise_type, entry in totals.items():
        attempts = entry["correct"] + entry["incorrect"]
        results.append({
            "exercise_type": exercise_type,
            "cards": entry["cards"],
            "attempts": attempts,
            "correct": entry["correct"],
            "success_rate": round(entry["correct"] / attempts * 100, 1) if attempts else 0.0,
        })
    members = list(ExerciseType)
    results.sort(key=lambda r: members.index(r["exercise_type"]))
    return results


def get_weak_exercise_types(cards: list, threshold: float = 70.0) -> list[dict]:
    """Practiced exercise types below the success threshold, worst first."""
    weak = [s for s in get_exercise_stats(cards) if s["attempts"] and s["success_rate"] < threshold]
    return sorted(weak, key=lambda s: s["success_rate"])


def get_due_summary(cards: list, preferences, now: datetime | None = None) -> dict:
    now = now or datetime.now()
    due_cards = 0
    due_items = 0
    for card in cards:
        if card.is_archived:
            continue
        types = [t for t in due_exercise_types(card, now) if preferences.is_enabled(t)]
        if types:
            due_cards += 1
            due_items += len(types)
    return {"due_cards": due_cards, "due_items": due_items, "total_cards": len(cards)}
