"""Answer validation and multiple-choice option generation."""
import random

from lexicard.exercises import ExerciseType
from lexicard.models import Card

ARTICLES = ("der", "die", "das")
DISTRACTOR_COUNT = 3


def normalize_answer(text: str) -> str:
    return " ".join((text or "").split()).lower()


def is_text_answer_correct(given: str, expected: str) -> bool:
    """Case-insensitive comparison after trimming and collapsing whitespace."""
    if not expected or not expected.strip():
        return False
    return normalize_answer(given) == normalize_answer(expected)


def expected_answer(card: Card, exercise_type: ExerciseType) -> str | None:
    """The answer a text-entry or multiple-choice exercise checks against."""
    if exercise_type is ExerciseType.REVERSE_TRANSLATION:
        return card.front_text
    if exercise_type is ExerciseType.SENTENCE_BUILDING:
        examples = [e.strip() for e in card.examples if e.strip()]
        return examples[0] if examples else None
    if exercise_type is ExerciseType.ARTICLE_SELECTION:
        return card.noun_gender
    if exercise_type is ExerciseType.CONJUGATION_PRACTICE:
        if card.word_data is None:
            return None
        forms = list(card.word_data.forms().values())
        return forms[0] if forms else None
    return card.back_text


def build_choice_options(card: Card, exercise_type: ExerciseType, pool: list, rng: random.Random = None) -> list[str]:
    """Correct answer plus up to three distinct distractors, shuffled."""
    rng = rng or random.Random()
    if exercise_type is ExerciseType.ARTICLE_SELECTION:
        options = list(ARTICLES)
        gender = card.noun_gender
        if gender and gender.lower() not in options:
            options.append(gender)
        rng.shuffle(options)
        return options

    correct = card.back_text
    candidates = []
    for other in pool:
        text = other.back_text
        if other.id == card.id or not text or not text.strip():
            continue
        if normalize_answer(text) == normalize_answer(correct):
            continue
        if text not in candidates:
            candidates.append(text)
    rng.shuffle(candidates)
    options = [correct] + candidates[:DISTRACTOR_COUNT]
    rng.shuffle(options)
    return options
