from datetime import datetime
import pytest

from lexicard.models import Card

NOW = datetime(2026, 3, 1, 9, 0, 0)


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_lexicard.db")
    return db_path


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_card():
    """Build cards with predictable ids."""
    counter = {"n": 0}

    def _make(front="Hund", back="dog", **kwargs):
        counter["n"] += 1
        kwargs.setdefault("id", f"card-{counter['n']}")
        kwargs.setdefault("created_at", NOW)
        kwargs.setdefault("updated_at", NOW)
        for name in ("tags", "examples"):
            if name in kwargs:
                kwargs[name] = tuple(kwargs[name])
        return Card(front_text=front, back_text=back, **kwargs)

    return _make
