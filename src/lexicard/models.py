"""Data classes for the flashcard domain model."""
import uuid
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from lexicard.exercises import ExerciseType

# Consecutive correct answers that master one exercise
MASTERY_CHAIN = 5


class MasteryLevel(str, Enum):
    NEW = "New"
    DIFFICULT = "Difficult"
    LEARNING = "Learning"
    GOOD = "Good"
    MASTERED = "Mastered"


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class VerbData:
    is_regular: bool = True
    is_separable: bool = False
    separable_prefix: Optional[str] = None
    auxiliary: str = "haben"
    present_second_person: Optional[str] = None
    present_third_person: Optional[str] = None
    past_simple: Optional[str] = None
    past_participle: Optional[str] = None

    kind = "verb"

    def forms(self) -> dict:
        candidates = {
            "du (present)": self.present_second_person,
            "er/sie/es (present)": self.present_third_person,
            "past simple": self.past_simple,
            "past participle": self.past_participle,
        }
        return {label: form for label, form in candidates.items() if form and form.strip()}

    def has_forms(self) -> bool:
        return bool(self.forms())


@dataclass(frozen=True)
class NounData:
    gender: str = ""
    plural: Optional[str] = None
    genitive: Optional[str] = None

    kind = "noun"

    def forms(self) -> dict:
        candidates = {"article": self.gender, "plural": self.plural, "genitive": self.genitive}
        return {label: form for label, form in candidates.items() if form and form.strip()}

    def has_forms(self) -> bool:
        return bool(self.gender.strip())


@dataclass(frozen=True)
class AdjectiveData:
    comparative: Optional[str] = None
    superlative: Optional[str] = None

    kind = "adjective"

    def forms(self) -> dict:
        candidates = {"comparative": self.comparative, "superlative": self.superlative}
        return {label: form for label, form in candidates.items() if form and form.strip()}

    def has_forms(self) -> bool:
        return bool(self.forms())


@dataclass(frozen=True)
class AdverbData:
    usage_note: Optional[str] = None

    kind = "adverb"

    def forms(self) -> dict:
        return {}

    def has_forms(self) -> bool:
        return False


WordData = Union[VerbData, NounData, AdjectiveData, AdverbData]

_WORD_DATA_TYPES = {cls.kind: cls for cls in (VerbData, NounData, AdjectiveData, AdverbData)}


def word_data_to_dict(data: Optional[WordData]) -> Optional[dict]:
    if data is None:
        return None
    result = {"type": data.kind}
    result.update({f.name: getattr(data, f.name) for f in fields(data)})
    return result


def word_data_from_dict(data: Optional[dict]) -> Optional[WordData]:
    """Rebuild word data from its dict form. Unknown types yield None."""
    if not data:
        return None
    cls = _WORD_DATA_TYPES.get(data.get("type"))
    if cls is None:
        return None
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class ExerciseScore:
    exercise_type: ExerciseType
    correct_count: int = 0
    incorrect_count: int = 0
    current_chain: int = 0
    best_chain: int = 0
    last_practiced: Optional[datetime] = None
    next_review: Optional[datetime] = None  # None: due immediately

    @property
    def total_attempts(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def success_rate(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.correct_count / self.total_attempts * 100

    @property
    def net_score(self) -> int:
        return self.correct_count - self.incorrect_count

    @property
    def mastery_level(self) -> MasteryLevel:
        """Mastery for this exercise, graded by the current chain."""
        if self.current_chain >= MASTERY_CHAIN:
            return MasteryLevel.MASTERED
        if self.total_attempts == 0:
            return MasteryLevel.NEW
        if self.current_chain >= 3:
            return MasteryLevel.GOOD
        if self.current_chain >= 1:
            return MasteryLevel.LEARNING
        return MasteryLevel.DIFFICULT

    @property
    def mastery_progress(self) -> float:
        """Progress toward a mastering chain, 0.0 to 1.0."""
        return min(max(self.current_chain / MASTERY_CHAIN, 0.0), 1.0)

    @property
    def answers_to_mastery(self) -> int:
        return min(max(MASTERY_CHAIN - self.current_chain, 0), MASTERY_CHAIN)

    def to_dict(self) -> dict:
        return {
            "exercise_type": self.exercise_type.value,
            "correct_count": self.correct_count,
            "incorrect_count": self.incorrect_count,
            "current_chain": self.current_chain,
            "best_chain": self.best_chain,
            "last_practiced": format_datetime(self.last_practiced),
            "next_review": format_datetime(self.next_review),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseScore":
        return cls(
            exercise_type=ExerciseType(data["exercise_type"]),
            correct_count=data.get("correct_count", 0),
            incorrect_count=data.get("incorrect_count", 0),
            current_chain=data.get("current_chain", 0),
            best_chain=data.get("best_chain", 0),
            last_practiced=parse_datetime(data.get("last_practiced")),
            next_review=parse_datetime(data.get("next_review")),
        )


@dataclass(frozen=True, eq=False)
class Card:
    id: str
    front_text: str
    back_text: str
    language: str = ""
    category: str = ""
    tags: tuple = ()
    examples: tuple = ()
    word_data: Optional[WordData] = None
    icon: Optional[str] = None
    german_article: Optional[str] = None
    # Legacy aggregate counters, superseded by exercise_scores
    review_count: int = 0
    correct_count: int = 0
    last_reviewed: Optional[datetime] = None
    next_review: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_favorite: bool = False
    is_archived: bool = False
    exercise_scores: dict = field(default_factory=dict)

    @classmethod
    def create(cls, front_text: str, back_text: str, **kwargs) -> "Card":
        now = kwargs.pop("now", None) or datetime.now()
        kwargs.setdefault("tags", ())
        kwargs.setdefault("examples", ())
        kwargs["tags"] = tuple(kwargs["tags"])
        kwargs["examples"] = tuple(kwargs["examples"])
        return cls(
            id=str(uuid.uuid4()),
            front_text=front_text,
            back_text=back_text,
            created_at=now,
            updated_at=now,
            **kwargs,
        )

    def __eq__(self, other):
        if not isinstance(other, Card):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    @property
    def noun_gender(self) -> Optional[str]:
        if isinstance(self.word_data, NounData) and self.word_data.gender.strip():
            return self.word_data.gender.strip()
        if self.german_article and self.german_article.strip():
            return self.german_article.strip()
        return None

    def score_for(self, exercise_type: ExerciseType) -> ExerciseScore:
        """Stored score for the type, or a fresh one when never practiced."""
        return self.exercise_scores.get(exercise_type) or ExerciseScore(exercise_type=exercise_type)

    def with_score(self, score: ExerciseScore, **changes) -> "Card":
        scores = dict(self.exercise_scores)
        scores[score.exercise_type] = score
        return replace(self, exercise_scores=scores, **changes)
