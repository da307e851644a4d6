from lexicard.exercises import (
    AnswerMode, ExerciseCategory, ExerciseType, implemented_types, types_in_category,
)
from lexicard.models import AdjectiveData, AdverbData, NounData, VerbData


def test_unimplemented_types_excluded():
    types = implemented_types()
    assert ExerciseType.LISTENING_RECOGNITION not in types
    assert ExerciseType.SPEAKING_PRONUNCIATION not in types
    assert ExerciseType.SENTENCE_FILL not in types
    assert len(types) == 8


def test_unimplemented_type_never_usable(make_card):
    card = make_card(examples=["Der Hund bellt"])
    assert not ExerciseType.SENTENCE_FILL.can_use(card)
    assert not ExerciseType.LISTENING_RECOGNITION.can_use(card)


def test_categories():
    recognition = types_in_category(ExerciseCategory.RECOGNITION)
    production = types_in_category(ExerciseCategory.PRODUCTION)
    assert ExerciseType.ARTICLE_SELECTION in recognition
    assert ExerciseType.REVERSE_TRANSLATION in production
    assert set(recognition) | set(production) == set(implemented_types())


def test_answer_modes():
    assert ExerciseType.WRITING_TRANSLATION.answer_mode is AnswerMode.TEXT_ENTRY
    assert ExerciseType.MULTIPLE_CHOICE_TEXT.answer_mode is AnswerMode.MULTIPLE_CHOICE
    assert ExerciseType.ARTICLE_SELECTION.answer_mode is AnswerMode.MULTIPLE_CHOICE
    assert ExerciseType.READING_RECOGNITION.answer_mode is AnswerMode.SELF_GRADED


def test_basic_types_always_usable(make_card):
    card = make_card()
    for t in (ExerciseType.READING_RECOGNITION, ExerciseType.WRITING_TRANSLATION,
              ExerciseType.REVERSE_TRANSLATION):
        assert t.can_use(card, has_enough_for_multiple_choice=False)


def test_multiple_choice_needs_enough_cards(make_card):
    card = make_card()
    assert ExerciseType.MULTIPLE_CHOICE_TEXT.can_use(card, True)
    assert not ExerciseType.MULTIPLE_CHOICE_TEXT.can_use(card, False)


def test_icon_choice_needs_icon(make_card):
    assert not ExerciseType.MULTIPLE_CHOICE_ICON.can_use(make_card(), True)
    with_icon = make_card(icon="🐕")
    assert ExerciseType.MULTIPLE_CHOICE_ICON.can_use(with_icon, True)
    assert not ExerciseType.MULTIPLE_CHOICE_ICON.can_use(with_icon, False)
    assert ExerciseType.MULTIPLE_CHOICE_ICON.requires_icon


def test_sentence_building_needs_non_blank_example(make_card):
    assert not ExerciseType.SENTENCE_BUILDING.can_use(make_card())
    assert not ExerciseType.SENTENCE_BUILDING.can_use(make_card(examples=["  "]))
    assert ExerciseType.SENTENCE_BUILDING.can_use(make_card(examples=["", "Der Hund bellt"]))


def test_conjugation_needs_word_forms(make_card):
    conj = ExerciseType.CONJUGATION_PRACTICE
    assert not conj.can_use(make_card())
    assert not conj.can_use(make_card(word_data=VerbData()))
    assert not conj.can_use(make_card(word_data=AdverbData(usage_note="often")))
    assert not conj.can_use(make_card(word_data=AdjectiveData()))
    assert not conj.can_use(make_card(word_data=NounData(gender="")))
    assert conj.can_use(make_card("gehen", "to go", word_data=VerbData(past_participle="gegangen")))
    assert conj.can_use(make_card("groß", "big", word_data=AdjectiveData(comparative="größer")))
    assert conj.can_use(make_card(word_data=NounData(gender="der")))


def test_article_selection_needs_gender(make_card):
    art = ExerciseType.ARTICLE_SELECTION
    assert not art.can_use(make_card())
    assert art.can_use(make_card(word_data=NounData(gender="der")))
    assert art.can_use(make_card("Tisch", "table", german_article="der"))


def test_display_names_and_descriptions():
    for t in ExerciseType:
        assert t.display_name
        assert t.description
    assert ExerciseType("article_selection") is ExerciseType.ARTICLE_SELECTION
