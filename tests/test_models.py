"""Tests for data model classes."""
from datetime import datetime

from lexicard.exercises import ExerciseType
from lexicard.models import (
    AdjectiveData, AdverbData, Card, ExerciseScore, MasteryLevel, NounData, VerbData,
    word_data_from_dict, word_data_to_dict,
)


def test_exercise_score_defaults():
    s = ExerciseScore(exercise_type=ExerciseType.READING_RECOGNITION)
    assert s.correct_count == 0
    assert s.incorrect_count == 0
    assert s.current_chain == 0
    assert s.next_review is None
    assert s.total_attempts == 0


def test_success_rate_zero_without_attempts():
    s = ExerciseScore(exercise_type=ExerciseType.WRITING_TRANSLATION)
    assert s.success_rate == 0.0


def test_success_rate_and_net_score():
    s = ExerciseScore(exercise_type=ExerciseType.WRITING_TRANSLATION, correct_count=3, incorrect_count=1)
    assert s.total_attempts == 4
    assert s.success_rate == 75.0
    assert s.net_score == 2


def test_mastery_progress_clamped():
    s = ExerciseScore(exercise_type=ExerciseType.WRITING_TRANSLATION, correct_count=7, current_chain=7)
    assert s.mastery_progress == 1.0
    assert s.answers_to_mastery == 0
    fresh = ExerciseScore(exercise_type=ExerciseType.WRITING_TRANSLATION)
    assert fresh.mastery_progress == 0.0
    assert fresh.answers_to_mastery == 5


def test_score_mastery_level_follows_chain():
    def level(correct, incorrect, chain):
        return ExerciseScore(
            exercise_type=ExerciseType.WRITING_TRANSLATION,
            correct_count=correct, incorrect_count=incorrect, current_chain=chain,
        ).mastery_level

    assert level(0, 0, 0) == MasteryLevel.NEW
    assert level(1, 1, 0) == MasteryLevel.DIFFICULT
    assert level(1, 0, 1) == MasteryLevel.LEARNING
    assert level(3, 4, 3) == MasteryLevel.GOOD
    assert level(5, 9, 5) == MasteryLevel.MASTERED


def test_score_dict_round_trip_keeps_timestamps():
    practiced = datetime(2026, 3, 1, 9, 0)
    s = ExerciseScore(
        exercise_type=ExerciseType.ARTICLE_SELECTION, correct_count=2, incorrect_count=1,
        current_chain=1, best_chain=2, last_practiced=practiced, next_review=practiced,
    )
    data = s.to_dict()
    assert data["exercise_type"] == "article_selection"
    assert ExerciseScore.from_dict(data) == s


def test_card_create_generates_id_and_timestamps():
    c = Card.create("Hund", "dog", language="de", examples=["Der Hund bellt"])
    assert len(c.id) == 36
    assert c.created_at == c.updated_at
    assert c.examples == ("Der Hund bellt",)
    assert c.exercise_scores == {}
    assert not c.is_archived


def test_card_equality_by_id():
    a = Card(id="x", front_text="Hund", back_text="dog")
    b = Card(id="x", front_text="Katze", back_text="cat")
    assert a == b
    assert len({a, b}) == 1


def test_score_for_missing_type_is_fresh():
    c = Card(id="x", front_text="Hund", back_text="dog")
    s = c.score_for(ExerciseType.REVERSE_TRANSLATION)
    assert s.exercise_type is ExerciseType.REVERSE_TRANSLATION
    assert s.total_attempts == 0


def test_with_score_leaves_card_unchanged():
    c = Card(id="x", front_text="Hund", back_text="dog")
    s = ExerciseScore(exercise_type=ExerciseType.REVERSE_TRANSLATION, correct_count=1)
    updated = c.with_score(s, review_count=1)
    assert c.exercise_scores == {}
    assert updated.exercise_scores[ExerciseType.REVERSE_TRANSLATION] == s
    assert updated.review_count == 1


def test_noun_gender_prefers_word_data():
    c = Card(id="x", front_text="Hund", back_text="dog", word_data=NounData(gender="der"), german_article="die")
    assert c.noun_gender == "der"


def test_noun_gender_falls_back_to_german_article():
    c = Card(id="x", front_text="Tisch", back_text="table", german_article=" der ")
    assert c.noun_gender == "der"
    assert Card(id="y", front_text="schnell", back_text="fast").noun_gender is None


def test_word_data_forms():
    verb = VerbData(present_second_person="gehst", past_participle="gegangen")
    assert verb.has_forms()
    assert list(verb.forms()) == ["du (present)", "past participle"]
    assert not VerbData().has_forms()
    assert not NounData(gender="  ").has_forms()
    assert AdjectiveData(superlative="am größten").has_forms()
    assert not AdverbData(usage_note="often").has_forms()


def test_word_data_dict_round_trip():
    verb = VerbData(is_regular=False, auxiliary="sein", past_simple="ging")
    data = word_data_to_dict(verb)
    assert data["type"] == "verb"
    assert word_data_from_dict(data) == verb


def test_word_data_from_unknown_type_is_none():
    assert word_data_from_dict({"type": "particle"}) is None
    assert word_data_from_dict(None) is None
    assert word_data_to_dict(None) is None
