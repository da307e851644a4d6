"""Card storage: loading, saving and filtering cards with their exercise scores."""
import json
from dataclasses import replace
from datetime import datetime

from lexicard.db import get_connection
from lexicard.models import (
    Card, ExerciseScore, format_datetime as _iso, parse_datetime as _dt, word_data_from_dict,
    word_data_to_dict,
)
from lexicard.scoring import filter_for_practice


def _row_to_score(row) -> ExerciseScore:
    return ExerciseScore.from_dict(dict(row))


def _row_to_card(row, score_rows) -> Card:
    word_data = json.loads(row["word_data"]) if row["word_data"] else None
    scores = {}
    for score_row in score_rows:
        score = _row_to_score(score_row)
        scores[score.exercise_type] = score
    return Card(
        id=row["id"],
        front_text=row["front_text"],
        back_text=row["back_text"],
        language=row["language"] or "",
        category=row["category"] or "",
        tags=tuple(json.loads(row["tags"] or "[]")),
        examples=tuple(json.loads(row["examples"] or "[]")),
        word_data=word_data_from_dict(word_data),
        icon=row["icon"],
        german_article=row["german_article"],
        review_count=row["review_count"],
        correct_count=row["correct_count"],
        last_reviewed=_dt(row["last_reviewed"]),
        next_review=_dt(row["next_review"]),
        created_at=_dt(row["created_at"]),
        updated_at=_dt(row["updated_at"]),
        is_favorite=bool(row["is_favorite"]),
        is_archived=bool(row["is_archived"]),
        exercise_scores=scores,
    )


def _load_cards(conn, where: str = "", params: tuple = ()) -> list[Card]:
    rows = conn.execute(f"SELECT * FROM cards {where} ORDER BY created_at, id", params).fetchall()
    score_rows = {}
    for score_row in conn.execute("SELECT * FROM exercise_scores").fetchall():
        score_rows.setdefault(score_row["card_id"], []).append(score_row)
    return [_row_to_card(row, score_rows.get(row["id"], [])) for row in rows]


def save_card(db_path: str, card: Card) -> None:
    """Insert or update a card together with all of its exercise scores."""
    conn = get_connection(db_path)
    word_data = word_data_to_dict(card.word_data)
    conn.execute(
        """INSERT INTO cards (id, front_text, back_text, language, category, tags, examples,
            word_data, icon, german_article, review_count, correct_count, last_reviewed,
            next_review, created_at, updated_at, is_favorite, is_archived)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            front_text=excluded.front_text, back_text=excluded.back_text,
            language=excluded.language, category=excluded.category, tags=excluded.tags,
            examples=excluded.examples, word_data=excluded.word_data, icon=excluded.icon,
            german_article=excluded.german_article, review_count=excluded.review_count,
            correct_count=excluded.correct_count, last_reviewed=excluded.last_reviewed,
            next_review=excluded.next_review, updated_at=excluded.updated_at,
            is_favorite=excluded.is_favorite, is_archived=excluded.is_archived""",
        (
            card.id, card.front_text, card.back_text, card.language, card.category,
            json.dumps(list(card.tags)), json.dumps(list(card.examples)),
            json.dumps(word_data) if word_data else None, card.icon, card.german_article,
            card.review_count, card.correct_count, _iso(card.last_reviewed),
            _iso(card.next_review), _iso(card.created_at), _iso(card.updated_at),
            int(card.is_favorite), int(card.is_archived),
        ),
    )
    for score in card.exercise_scores.values():
        conn.execute(
            """INSERT INTO exercise_scores (card_id, exercise_type, correct_count, incorrect_count,
                current_chain, best_chain, last_practiced, next_review)
            VALUES (:card_id, :exercise_type, :correct_count, :incorrect_count,
                :current_chain, :best_chain, :last_practiced, :next_review)
            ON CONFLICT(card_id, exercise_type) DO UPDATE SET
                correct_count=excluded.correct_count, incorrect_count=excluded.incorrect_count,
                current_chain=excluded.current_chain, best_chain=excluded.best_chain,
                last_practiced=excluded.last_practiced, next_review=excluded.next_review""",
            {"card_id": card.id, **score.to_dict()},
        )
    conn.commit()
    conn.close()


def add_card(db_path: str, front_text: str, back_text: str, **kwargs) -> Card:
    card = Card.create(front_text, back_text, **kwargs)
    save_card(db_path, card)
    return card


def get_card(db_path: str, card_id: str) -> Card | None:
    conn = get_connection(db_path)
    cards = _load_cards(conn, "WHERE id = ?", (card_id,))
    conn.close()
    return cards[0] if cards else None


def get_all_cards(db_path: str, include_archived: bool = False, language: str = "") -> list[Card]:
    clauses, params = [], []
    if not include_archived:
        clauses.append("is_archived = 0")
    if language:
        clauses.append("language = ?")
        params.append(language)
    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    conn = get_connection(db_path)
    cards = _load_cards(conn, where, tuple(params))
    conn.close()
    return cards


def get_due_cards(db_path: str, preferences, now: datetime | None = None, language: str = "") -> list[Card]:
    """Cards with at least one enabled exercise due for review."""
    now = now or datetime.now()
    return filter_for_practice(get_all_cards(db_path, language=language), preferences, now)


def delete_card(db_path: str, card_id: str) -> bool:
    conn = get_connection(db_path)
    cursor = conn.execute("DELETE FROM cards WHERE id = ?", (card_id,))
    deleted = cursor.rowcount > 0
    conn.commit()
    conn.close()
    return deleted


def set_archived(db_path: str, card_id: str, archived: bool = True) -> Card | None:
    card = get_card(db_path, card_id)
    if card is None:
        return None
    card = replace(card, is_archived=archived, updated_at=datetime.now())
    save_card(db_path, card)
    return card


def set_favorite(db_path: str, card_id: str, favorite: bool = True) -> Card | None:
    card = get_card(db_path, card_id)
    if card is None:
        return None
    card = replace(card, is_favorite=favorite, updated_at=datetime.now())
    save_card(db_path, card)
    return card
