"""Exercise types and the structural rules deciding which apply to a card."""
from enum import Enum

# 1 correct answer + 3 distractors
MIN_CARDS_FOR_MULTIPLE_CHOICE = 4


class ExerciseCategory(str, Enum):
    RECOGNITION = "recognition"
    PRODUCTION = "production"


class AnswerMode(str, Enum):
    TEXT_ENTRY = "text_entry"
    MULTIPLE_CHOICE = "multiple_choice"
    SELF_GRADED = "self_graded"


class ExerciseType(str, Enum):
    READING_RECOGNITION = "reading_recognition"
    WRITING_TRANSLATION = "writing_translation"
    MULTIPLE_CHOICE_TEXT = "multiple_choice_text"
    MULTIPLE_CHOICE_ICON = "multiple_choice_icon"
    REVERSE_TRANSLATION = "reverse_translation"
    LISTENING_RECOGNITION = "listening_recognition"
    SPEAKING_PRONUNCIATION = "speaking_pronunciation"
    SENTENCE_FILL = "sentence_fill"
    SENTENCE_BUILDING = "sentence_building"
    CONJUGATION_PRACTICE = "conjugation_practice"
    ARTICLE_SELECTION = "article_selection"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def is_implemented(self) -> bool:
        return self not in _NOT_IMPLEMENTED

    @property
    def category(self) -> ExerciseCategory:
        if self in _RECOGNITION:
            return ExerciseCategory.RECOGNITION
        return ExerciseCategory.PRODUCTION

    @property
    def answer_mode(self) -> AnswerMode:
        if self in _TEXT_ENTRY:
            return AnswerMode.TEXT_ENTRY
        if self in _MULTIPLE_CHOICE:
            return AnswerMode.MULTIPLE_CHOICE
        return AnswerMode.SELF_GRADED

    @property
    def requires_icon(self) -> bool:
        return self is ExerciseType.MULTIPLE_CHOICE_ICON

    def can_use(self, card, has_enough_for_multiple_choice: bool = True) -> bool:
        """Whether this exercise can be built from the card's content.

        Depends only on the card itself and on whether the card pool is large
        enough to supply multiple-choice distractors.
        """
        if not self.is_implemented:
            return False
        if self in (
            ExerciseType.READING_RECOGNITION,
            ExerciseType.WRITING_TRANSLATION,
            ExerciseType.REVERSE_TRANSLATION,
        ):
            return True
        if self is ExerciseType.MULTIPLE_CHOICE_TEXT:
            return has_enough_for_multiple_choice
        if self is ExerciseType.MULTIPLE_CHOICE_ICON:
            return bool(card.icon) and has_enough_for_multiple_choice
        if self is ExerciseType.SENTENCE_BUILDING:
            return any(example.strip() for example in card.examples)
        if self is ExerciseType.CONJUGATION_PRACTICE:
            return card.word_data is not None and card.word_data.has_forms()
        if self is ExerciseType.ARTICLE_SELECTION:
            return bool(card.noun_gender)
        return False


def implemented_types() -> list[ExerciseType]:
    return [t for t in ExerciseType if t.is_implemented]


def types_in_category(category: ExerciseCategory) -> list[ExerciseType]:
    return [t for t in implemented_types() if t.category is category]


_NOT_IMPLEMENTED = {
    ExerciseType.LISTENING_RECOGNITION,
    ExerciseType.SPEAKING_PRONUNCIATION,
    ExerciseType.SENTENCE_FILL,
}

_RECOGNITION = {
    ExerciseType.READING_RECOGNITION,
    ExerciseType.MULTIPLE_CHOICE_TEXT,
    ExerciseType.MULTIPLE_CHOICE_ICON,
    ExerciseType.LISTENING_RECOGNITION,
    ExerciseType.ARTICLE_SELECTION,
}

_TEXT_ENTRY = {
    ExerciseType.WRITING_TRANSLATION,
    ExerciseType.REVERSE_TRANSLATION,
    ExerciseType.SENTENCE_BUILDING,
    ExerciseType.CONJUGATION_PRACTICE,
}

_MULTIPLE_CHOICE = {
    ExerciseType.MULTIPLE_CHOICE_TEXT,
    ExerciseType.MULTIPLE_CHOICE_ICON,
    ExerciseType.ARTICLE_SELECTION,
}

_DISPLAY_NAMES = {
    ExerciseType.READING_RECOGNITION: "Reading Recognition",
    ExerciseType.WRITING_TRANSLATION: "Writing Translation",
    ExerciseType.MULTIPLE_CHOICE_TEXT: "Multiple Choice (Text)",
    ExerciseType.MULTIPLE_CHOICE_ICON: "Multiple Choice (Icon)",
    ExerciseType.REVERSE_TRANSLATION: "Reverse Translation",
    ExerciseType.LISTENING_RECOGNITION: "Listening Recognition",
    ExerciseType.SPEAKING_PRONUNCIATION: "Speaking Pronunciation",
    ExerciseType.SENTENCE_FILL: "Sentence Fill",
    ExerciseType.SENTENCE_BUILDING: "Sentence Building",
    ExerciseType.CONJUGATION_PRACTICE: "Conjugation Practice",
    ExerciseType.ARTICLE_SELECTION: "Article Selection",
}

_DESCRIPTIONS = {
    ExerciseType.READING_RECOGNITION: "See the word and recall its meaning",
    ExerciseType.WRITING_TRANSLATION: "Type the correct translation",
    ExerciseType.MULTIPLE_CHOICE_TEXT: "Choose the correct meaning from options",
    ExerciseType.MULTIPLE_CHOICE_ICON: "Choose the matching icon",
    ExerciseType.REVERSE_TRANSLATION: "Translate from your native language",
    ExerciseType.LISTENING_RECOGNITION: "Listen and identify the word",
    ExerciseType.SPEAKING_PRONUNCIATION: "Speak the word correctly",
    ExerciseType.SENTENCE_FILL: "Complete the sentence with the word",
    ExerciseType.SENTENCE_BUILDING: "Arrange words in correct order",
    ExerciseType.CONJUGATION_PRACTICE: "Provide the correct form",
    ExerciseType.ARTICLE_SELECTION: "Choose the correct article",
}
