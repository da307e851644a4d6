"""User exercise preferences and their persistence in user_settings."""
import json
from dataclasses import dataclass, field, replace

from loguru import logger

from lexicard.db import get_setting, set_setting
from lexicard.exercises import ExerciseCategory, ExerciseType, implemented_types, types_in_category

PREFERENCES_KEY = "exercise_preferences"


@dataclass(frozen=True)
class ExercisePreferences:
    enabled_types: frozenset = field(default_factory=frozenset)
    prioritize_weaknesses: bool = True
    weakness_threshold: float = 70.0

    @classmethod
    def defaults(cls) -> "ExercisePreferences":
        return cls(enabled_types=frozenset(implemented_types()))

    def is_enabled(self, exercise_type: ExerciseType) -> bool:
        return exercise_type in self.enabled_types

    @property
    def has_any_enabled(self) -> bool:
        return bool(self.enabled_types)

    @property
    def enabled_count(self) -> int:
        return len(self.enabled_types)

    def is_category_fully_enabled(self, category: ExerciseCategory) -> bool:
        return all(t in self.enabled_types for t in types_in_category(category))

    def is_category_partially_enabled(self, category: ExerciseCategory) -> bool:
        types = types_in_category(category)
        enabled = [t for t in types if t in self.enabled_types]
        return 0 < len(enabled) < len(types)

    def toggle_type(self, exercise_type: ExerciseType) -> "ExercisePreferences":
        return replace(self, enabled_types=self.enabled_types ^ {exercise_type})

    def toggle_category(self, category: ExerciseCategory, enabled: bool) -> "ExercisePreferences":
        types = set(types_in_category(category))
        if enabled:
            return replace(self, enabled_types=self.enabled_types | types)
        return replace(self, enabled_types=self.enabled_types - types)

    def enable_all(self) -> "ExercisePreferences":
        return replace(self, enabled_types=frozenset(implemented_types()))

    def disable_all(self) -> "ExercisePreferences":
        return replace(self, enabled_types=frozenset())

    def to_dict(self) -> dict:
        return {
            "enabled_types": sorted(t.value for t in self.enabled_types),
            "prioritize_weaknesses": self.prioritize_weaknesses,
            "weakness_threshold": self.weakness_threshold,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExercisePreferences":
        """Build preferences from stored data, ignoring unknown or unimplemented types."""
        enabled = set()
        for name in data.get("enabled_types") or []:
            try:
                exercise_type = ExerciseType(name)
            except ValueError:
                continue
            if exercise_type.is_implemented:
                enabled.add(exercise_type)
        threshold = float(data.get("weakness_threshold", 70.0))
        return cls(
            enabled_types=frozenset(enabled),
            prioritize_weaknesses=bool(data.get("prioritize_weaknesses", True)),
            weakness_threshold=min(max(threshold, 0.0), 100.0),
        )


def load_preferences(db_path: str) -> ExercisePreferences:
    raw = get_setting(db_path, PREFERENCES_KEY)
    if not raw:
        return ExercisePreferences.defaults()
    try:
        return ExercisePreferences.from_dict(json.loads(raw))
    except (ValueError, TypeError, AttributeError):
        logger.warning("Stored exercise preferences are unreadable, using defaults")
        return ExercisePreferences.defaults()


def save_preferences(db_path: str, preferences: ExercisePreferences) -> None:
    set_setting(db_path, PREFERENCES_KEY, json.dumps(preferences.to_dict()))


def reset_preferences(db_path: str) -> ExercisePreferences:
    defaults = ExercisePreferences.defaults()
    save_preferences(db_path, defaults)
    return defaults
