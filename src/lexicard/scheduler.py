"""Practice session scheduling.

A `PracticeScheduler` owns one practice session at a time. It builds a queue
of (card, exercise type) items from the due cards, serves the current item,
takes answers from the UI and feeds them back into the scoring model, and
hands updated cards to a persistence callback.

State is an immutable `SessionState` snapshot that is replaced on every
transition; subscribers receive each new snapshot.
"""
import random
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional

from loguru import logger

from lexicard.answers import build_choice_options, expected_answer, is_text_answer_correct, normalize_answer
from lexicard.exercises import MIN_CARDS_FOR_MULTIPLE_CHOICE, AnswerMode, ExerciseType
from lexicard.models import Card
from lexicard.preferences import ExercisePreferences
from lexicard.scoring import apply_answer, due_exercise_types

# Sampling weight for items below the weakness threshold
WEAK_ITEM_WEIGHT = 3.0


class SessionStatus(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


class AnswerState(str, Enum):
    PENDING = "pending"
    ANSWERED = "answered"


@dataclass(frozen=True, eq=False)
class PracticeItem:
    card: Card
    exercise_type: ExerciseType

    def __eq__(self, other):
        if not isinstance(other, PracticeItem):
            return NotImplemented
        return self.card.id == other.card.id and self.exercise_type is other.exercise_type

    def __hash__(self):
        return hash((self.card.id, self.exercise_type))


@dataclass(frozen=True)
class SessionStats:
    total_items: int
    cards_reviewed: int
    correct_count: int
    incorrect_count: int
    accuracy: float
    duration: timedelta


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus = SessionStatus.IDLE
    queue: tuple = ()
    current_index: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    started_at: Optional[datetime] = None
    answer_state: AnswerState = AnswerState.PENDING
    current_answer_correct: Optional[bool] = None
    choice_options: Optional[tuple] = None
    user_input: Optional[str] = None
    no_due_items: bool = False

    @property
    def is_session_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    @property
    def is_session_complete(self) -> bool:
        return self.status is SessionStatus.COMPLETED

    @property
    def current_item(self) -> Optional[PracticeItem]:
        if self.is_session_active and 0 <= self.current_index < len(self.queue):
            return self.queue[self.current_index]
        return None


def weighted_shuffle(items: list, weights: list, rng: random.Random) -> list:
    """Random order in which heavier items tend to come first."""
    keyed = [(rng.random() ** (1.0 / weight), i) for i, weight in enumerate(weights)]
    keyed.sort(reverse=True)
    return [items[i] for _, i in keyed]


class PracticeScheduler:
    """Drives practice sessions over a pool of cards.

    Args:
        get_candidate_units: Returns the cards to practice when
            `start_session` is called without an explicit list.
        persist_unit: Called with each card updated by a confirmed answer.
            Failures are logged and the session carries on.
        preferences: Exercise preferences; defaults enable every implemented type.
        on_session_complete: Called with the number of cards reviewed once
            per ended session that reviewed at least one card.
        get_all_units: Pool for multiple-choice distractors. Defaults to the
            session's candidate cards.
        clock: Source of the current time.
        rng: Random source for queue order and option order.
    """

    def __init__(
        self,
        get_candidate_units: Callable[[], list],
        persist_unit: Callable[[Card], None],
        preferences: Optional[ExercisePreferences] = None,
        on_session_complete: Optional[Callable[[int], None]] = None,
        get_all_units: Optional[Callable[[], list]] = None,
        clock: Callable[[], datetime] = datetime.now,
        rng: Optional[random.Random] = None,
    ):
        self._get_candidate_units = get_candidate_units
        self._persist_unit = persist_unit
        self._preferences = preferences or ExercisePreferences.defaults()
        self._on_session_complete = on_session_complete
        self._get_all_units = get_all_units
        self._clock = clock
        self._rng = rng or random.Random()
        self._state = SessionState()
        self._listeners = []
        self._pool = []
        self._explicit_units = None
        self._latest = {}
        self._removed_ids = set()
        self._completion_reported = False
        self.last_stats: Optional[SessionStats] = None

    # --- state and observers ---

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def preferences(self) -> ExercisePreferences:
        return self._preferences

    def subscribe(self, listener: Callable[[SessionState], None]) -> Callable[[], None]:
        """Register a listener for state changes. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Session state listener failed")

    def _update(self, **changes) -> None:
        self._set_state(replace(self._state, **changes))

    # --- derived values ---

    @property
    def current_item(self) -> Optional[PracticeItem]:
        return self._state.current_item

    @property
    def current_card(self) -> Optional[Card]:
        item = self.current_item
        return item.card if item else None

    @property
    def current_exercise_type(self) -> Optional[ExerciseType]:
        item = self.current_item
        return item.exercise_type if item else None

    @property
    def is_session_active(self) -> bool:
        return self._state.is_session_active

    @property
    def can_confirm(self) -> bool:
        return self.current_item is not None and self._state.answer_state is AnswerState.ANSWERED

    @property
    def total_count(self) -> int:
        return len(self._state.queue)

    @property
    def remaining_count(self) -> int:
        if not self._state.queue or not self.is_session_active:
            return 0
        return len(self._state.queue) - self._state.current_index - 1

    @property
    def progress(self) -> float:
        if self._state.is_session_complete:
            return 1.0
        if not self._state.queue:
            return 0.0
        return (self._state.current_index + 1) / len(self._state.queue)

    @property
    def accuracy(self) -> float:
        answered = self._state.correct_count + self._state.incorrect_count
        return self._state.correct_count / answered if answered else 0.0

    @property
    def session_duration(self) -> timedelta:
        if self._state.started_at is None:
            return timedelta(0)
        return self._clock() - self._state.started_at

    @property
    def session_stats(self) -> SessionStats:
        state = self._state
        return SessionStats(
            total_items=len(state.queue),
            cards_reviewed=state.correct_count + state.incorrect_count,
            correct_count=state.correct_count,
            incorrect_count=state.incorrect_count,
            accuracy=self.accuracy,
            duration=self.session_duration,
        )

    # --- queue construction ---

    def _item_weight(self, card: Card, exercise_type: ExerciseType) -> float:
        score = card.score_for(exercise_type)
        if score.total_attempts == 0 or score.success_rate < self._preferences.weakness_threshold:
            return WEAK_ITEM_WEIGHT
        return 1.0

    def build_queue(self, cards: list, now: datetime, pool: Optional[list] = None) -> list[PracticeItem]:
        """One item per due, enabled and structurally usable exercise of each card."""
        pool = cards if pool is None else pool
        has_enough = len(pool) >= MIN_CARDS_FOR_MULTIPLE_CHOICE
        prefs = self._preferences
        items, weights, seen = [], [], set()
        for card in cards:
            if card.is_archived or card.id in seen:
                continue
            seen.add(card.id)
            types = [t for t in due_exercise_types(card, now, has_enough) if prefs.is_enabled(t)]
            if not types:
                logger.debug("Card {} has no due enabled exercises", card.id)
                continue
            for exercise_type in types:
                items.append(PracticeItem(card=card, exercise_type=exercise_type))
                weights.append(self._item_weight(card, exercise_type))
        if prefs.prioritize_weaknesses:
            return weighted_shuffle(items, weights, self._rng)
        self._rng.shuffle(items)
        return items

    def _choice_options_for(self, item: Optional[PracticeItem]) -> Optional[tuple]:
        if item is None or item.exercise_type.answer_mode is not AnswerMode.MULTIPLE_CHOICE:
            return None
        return tuple(build_choice_options(item.card, item.exercise_type, self._pool, self._rng))

    # --- session lifecycle ---

    def start_session(self, units: Optional[list] = None, preferences: Optional[ExercisePreferences] = None) -> None:
        """Build a fresh queue and make its first item current.

        When nothing is due the scheduler stays idle with `no_due_items` set.
        An active session is ended first so its answers are reported.
        """
        if self.is_session_active:
            self.end_session()
        if preferences is not None:
            self._preferences = preferences
        if units is not None:
            self._explicit_units = list(units)
            candidates = list(units)
        else:
            self._explicit_units = None
            candidates = list(self._get_candidate_units())
        self._latest = {card.id: card for card in candidates}
        self._removed_ids = set()
        self._pool = list(self._get_all_units()) if self._get_all_units else candidates
        self._completion_reported = False
        self.last_stats = None

        now = self._clock()
        queue = self.build_queue(candidates, now, self._pool)
        if not queue:
            logger.info("No due practice items among {} candidate cards", len(candidates))
            self._set_state(SessionState(no_due_items=True))
            return

        logger.info("Practice session started: {} items from {} cards", len(queue), len(candidates))
        self._set_state(SessionState(
            status=SessionStatus.ACTIVE,
            queue=tuple(queue),
            started_at=now,
            choice_options=self._choice_options_for(queue[0]),
        ))

    def restart_session(self) -> None:
        """Start again from the same candidate source with fresh counters."""
        if self._explicit_units is not None:
            units = [
                self._latest.get(card.id, card) for card in self._explicit_units
                if card.id not in self._removed_ids
            ]
            self.start_session(units=units)
        else:
            self.start_session()

    def end_session(self) -> None:
        """Discard the session. Scores already confirmed stay persisted."""
        if self.is_session_active:
            logger.info("Practice session ended early after {} answers",
                        self._state.correct_count + self._state.incorrect_count)
            self.last_stats = self.session_stats
            self._report_completion(self.last_stats)
        self._set_state(SessionState())

    def _report_completion(self, stats: SessionStats) -> None:
        if self._completion_reported or stats.cards_reviewed == 0:
            return
        self._completion_reported = True
        if self._on_session_complete is None:
            return
        try:
            self._on_session_complete(stats.cards_reviewed)
        except Exception:
            logger.exception("Session completion callback failed")

    def _complete(self, **changes) -> SessionStats:
        state = replace(
            self._state,
            status=SessionStatus.COMPLETED,
            answer_state=AnswerState.PENDING,
            current_answer_correct=None,
            choice_options=None,
            user_input=None,
            **changes,
        )
        self._state = state
        stats = self.session_stats
        self.last_stats = stats
        logger.info("Practice session complete: {}/{} correct in {}",
                    stats.correct_count, stats.cards_reviewed, stats.duration)
        self._report_completion(stats)
        self._set_state(state)
        return stats

    def _enter_item(self, index: int, **changes) -> None:
        queue = changes.get("queue", self._state.queue)
        self._update(
            current_index=index,
            answer_state=AnswerState.PENDING,
            current_answer_correct=None,
            user_input=None,
            choice_options=self._choice_options_for(queue[index]),
            **changes,
        )

    def _advance(self, **changes) -> Optional[SessionStats]:
        queue = changes.get("queue", self._state.queue)
        next_index = self._state.current_index + 1
        if next_index >= len(queue):
            return self._complete(**changes)
        self._enter_item(next_index, **changes)
        return None

    # --- answers ---

    def check_answer(self, is_correct: bool) -> None:
        """Record a verdict for the current item without committing it."""
        if self.current_item is None:
            return
        self._update(answer_state=AnswerState.ANSWERED, current_answer_correct=bool(is_correct))

    def override_answer(self, is_correct: bool) -> None:
        """Flip the recorded verdict before it is confirmed."""
        if self.current_item is None or self._state.answer_state is not AnswerState.ANSWERED:
            return
        self._update(current_answer_correct=bool(is_correct))

    def submit_text_answer(self, text: str) -> Optional[bool]:
        """Validate typed input for a text-entry exercise and record the verdict."""
        item = self.current_item
        if item is None or item.exercise_type.answer_mode is not AnswerMode.TEXT_ENTRY:
            return None
        correct = is_text_answer_correct(text, expected_answer(item.card, item.exercise_type))
        self._update(user_input=text)
        self.check_answer(correct)
        return correct

    def select_option(self, option: str) -> Optional[bool]:
        """Pick a multiple-choice option. Selecting submits immediately."""
        item = self.current_item
        if item is None or item.exercise_type.answer_mode is not AnswerMode.MULTIPLE_CHOICE:
            return None
        if self._state.answer_state is AnswerState.ANSWERED:
            return None
        expected = expected_answer(item.card, item.exercise_type) or ""
        correct = normalize_answer(option) == normalize_answer(expected)
        self._update(user_input=option)
        self.check_answer(correct)
        return correct

    def confirm_answer_and_advance(self, marked_correct: bool) -> Optional[SessionStats]:
        """Commit the answer for the current item and move on.

        Returns the final statistics when this answer completes the session.
        Does nothing when there is no current item.
        """
        item = self.current_item
        if item is None:
            return None
        updated = apply_answer(item.card, item.exercise_type, bool(marked_correct), self._clock())
        try:
            self._persist_unit(updated)
        except Exception:
            logger.exception("Failed to persist card {}", updated.id)
        self._latest[updated.id] = updated

        queue = tuple(
            PracticeItem(card=updated, exercise_type=i.exercise_type) if i.card.id == updated.id else i
            for i in self._state.queue
        )
        return self._advance(
            queue=queue,
            correct_count=self._state.correct_count + (1 if marked_correct else 0),
            incorrect_count=self._state.incorrect_count + (0 if marked_correct else 1),
        )

    def skip_exercise(self) -> Optional[SessionStats]:
        """Move past the current item without touching its score.

        Ignored while an answer awaits confirmation.
        """
        if self.current_item is None or self._state.answer_state is AnswerState.ANSWERED:
            return None
        return self._advance()

    # --- external changes ---

    def remove_card_from_queue(self, card_id: str) -> None:
        """Drop every item of a card, e.g. after it was deleted elsewhere."""
        if not self.is_session_active:
            return
        state = self._state
        self._removed_ids.add(card_id)
        current = state.queue[state.current_index]
        removed_before = sum(1 for i in state.queue[:state.current_index] if i.card.id == card_id)
        queue = tuple(i for i in state.queue if i.card.id != card_id)
        if len(queue) == len(state.queue):
            return
        index = state.current_index - removed_before
        if current.card.id != card_id:
            self._update(queue=queue, current_index=index)
        elif index >= len(queue):
            self._complete(queue=queue, current_index=max(len(queue) - 1, 0))
        else:
            self._enter_item(index, queue=queue)

    def update_card_in_queue(self, card: Card) -> None:
        """Swap in an externally edited version of a card."""
        if not self.is_session_active:
            return
        self._latest[card.id] = card
        queue = tuple(
            PracticeItem(card=card, exercise_type=i.exercise_type) if i.card.id == card.id else i
            for i in self._state.queue
        )
        changes = {"queue": queue}
        if self.current_card is not None and self.current_card.id == card.id:
            changes["choice_options"] = self._choice_options_for(queue[self._state.current_index])
        self._update(**changes)

    def update_preferences(self, preferences: ExercisePreferences, rebuild_queue: bool = True) -> None:
        """Replace preferences, rebuilding the unserved part of an active session's queue.

        The current item and its answer stay put while its type is still
        enabled. When nothing enabled is left the session completes.
        """
        self._preferences = preferences
        if not (rebuild_queue and self.is_session_active):
            self._update()
            return
        state = self._state
        index = state.current_index
        current = state.queue[index]
        remaining = []
        for item in state.queue[index:]:
            if item.card not in remaining:
                remaining.append(item.card)
        rebuilt = [i for i in self.build_queue(remaining, self._clock(), self._pool) if i != current]

        if preferences.is_enabled(current.exercise_type):
            self._update(queue=state.queue[:index + 1] + tuple(rebuilt))
        elif rebuilt:
            self._enter_item(index, queue=state.queue[:index] + tuple(rebuilt))
        else:
            self._complete(queue=state.queue[:index], current_index=max(index - 1, 0))
