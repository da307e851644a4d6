"""Import cards from JSON, YAML or CSV files."""
import csv
import json
from pathlib import Path

from loguru import logger

from lexicard.cards import save_card
from lexicard.models import Card, word_data_from_dict


def read_cards_file(file_path: str) -> list[dict]:
    """Read raw card entries from a file. Each entry is a dict."""
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
    elif suffix in (".yaml", ".yml"):
        import yaml
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    elif suffix == ".csv":
        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        if rows and [c.strip().lower() for c in rows[0][:2]] == ["front", "back"]:
            rows = rows[1:]
        data = [
            {"front": row[0], "back": row[1], "examples": [row[2]] if len(row) > 2 and row[2].strip() else []}
            for row in rows if len(row) >= 2
        ]
    else:
        raise ValueError(f"Unsupported card file format: {suffix or path.name}")

    if isinstance(data, dict):
        data = data.get("cards", [])
    return [entry for entry in data or [] if isinstance(entry, dict)]


def entry_to_card(entry: dict, language: str = "", category: str = "") -> Card | None:
    front = str(entry.get("front") or entry.get("front_text") or "").strip()
    back = str(entry.get("back") or entry.get("back_text") or "").strip()
    if not front or not back:
        return None
    examples = entry.get("examples") or []
    if isinstance(examples, str):
        examples = [examples]
    return Card.create(
        front,
        back,
        language=entry.get("language") or language,
        category=entry.get("category") or category,
        tags=entry.get("tags") or (),
        examples=[str(e) for e in examples],
        word_data=word_data_from_dict(entry.get("word_data")),
        icon=entry.get("icon"),
        german_article=entry.get("german_article"),
    )


def import_cards(db_path: str, file_path: str, language: str = "", category: str = "") -> dict:
    """Import every valid entry of a card file. Entries without front/back are skipped."""
    entries = read_cards_file(file_path)
    imported = skipped = 0
    for entry in entries:
        card = entry_to_card(entry, language=language, category=category)
        if card is None:
            skipped += 1
            continue
        save_card(db_path, card)
        imported += 1
    logger.info("Imported {} cards from {} ({} skipped)", imported, Path(file_path).name, skipped)
    return {"filename": Path(file_path).name, "imported": imported, "skipped": skipped}
