import os
import sys
from typing import Callable, List

import pytest
from unittest.mock import MagicMock

from vocabcore.models import Disposition, ReviewItem, SessionItem, VocabularyWord
from vocabcore.store import DeckStore, InMemoryDeckStore, build_session_items


# each test runs on cwd to its temp dir
@pytest.fixture(autouse=True)
def go_to_tmpdir(request, monkeypatch):
    """
    Run each test inside its own tmpdir with no VOCABCORE_* variables set, so
    settings never pick up a developer's .env file or environment.
    """
    for key in list(os.environ):
        if key.startswith("VOCABCORE_"):
            monkeypatch.delenv(key)
    tmpdir = request.getfixturevalue("tmpdir")
    sys.path.insert(0, str(tmpdir))
    with tmpdir.as_cwd():
        yield


@pytest.fixture
def sample_words() -> List[VocabularyWord]:
    """Four vocabulary words in deck order."""
    return [
        VocabularyWord(
            id="1",
            word="Abacus",
            definition="Frame with balls for calculating",
            part_of_speech="noun",
        ),
        VocabularyWord(
            id="2",
            word="Abate",
            definition="To lessen or subside",
            part_of_speech="verb",
            synonyms=["decrease", "diminish"],
            difficulty_level=2,
        ),
        VocabularyWord(
            id="3",
            word="Abdication",
            definition="Giving up control or authority",
            part_of_speech="noun",
            difficulty_level=2,
        ),
        VocabularyWord(
            id="4",
            word="Aberration",
            definition="Straying away from what is normal",
            part_of_speech="noun",
            difficulty_level=3,
        ),
    ]


@pytest.fixture
def make_items() -> Callable[..., List[SessionItem]]:
    """
    Factory for plain session items.

    make_items(3) -> items "s1".."s3", all pending.
    make_items(3, know={"s2"}) -> "s2" starts as known.
    """

    def _make(count: int, know=(), still_learning=(), with_review=False):
        items = []
        for i in range(1, count + 1):
            item_id = f"s{i}"
            if item_id in know:
                disposition = Disposition.Know
            elif item_id in still_learning:
                disposition = Disposition.StillLearning
            else:
                disposition = Disposition.Pending
            items.append(
                SessionItem(
                    id=item_id,
                    content_id=f"w{i}",
                    disposition=disposition,
                    payload={"word": f"word-{i}"},
                    review=ReviewItem(item_id=item_id) if with_review else None,
                )
            )
        return items

    return _make


@pytest.fixture
def mock_store() -> MagicMock:
    """A MagicMock with the DeckStore spec; every call succeeds by default."""
    store = MagicMock(spec=DeckStore)
    store.load_deck.return_value = []
    return store


@pytest.fixture
def memory_store(sample_words: List[VocabularyWord]) -> InMemoryDeckStore:
    """An in-memory store holding a full deck of sample words for user 'u1'."""
    return InMemoryDeckStore(
        corpus=sample_words,
        decks={"u1": build_session_items(sample_words, "u1")},
    )
