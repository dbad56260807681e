from pathlib import Path

import pytest

from vocabcore.deck_file import load_deck_file
from vocabcore.exceptions import DeckFileError

VALID_DECK = """
deck: Essential Words
words:
  - id: 1
    word: Abacus
    definition: Frame with balls for calculating
    part_of_speech: noun
  - id: 2
    word: Abate
    definition: To lessen or subside
    part_of_speech: verb
    synonyms: [decrease, diminish]
    difficulty_level: 2
"""


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "deck.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_valid_deck(tmp_path):
    deck = load_deck_file(_write(tmp_path, VALID_DECK))

    assert deck.deck == "Essential Words"
    assert [w.id for w in deck.words] == ["1", "2"]
    assert deck.words[1].synonyms == ["decrease", "diminish"]


def test_missing_file(tmp_path):
    with pytest.raises(DeckFileError, match="File not found"):
        load_deck_file(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path):
    with pytest.raises(DeckFileError, match="Invalid YAML syntax"):
        load_deck_file(_write(tmp_path, "deck: [unclosed\n"))


def test_top_level_must_be_mapping(tmp_path):
    with pytest.raises(DeckFileError, match="must be a dictionary"):
        load_deck_file(_write(tmp_path, "- just\n- a list\n"))


def test_validation_error_names_field(tmp_path):
    text = "deck: D\nwords:\n  - id: 1\n    word: Abacus\n"

    with pytest.raises(DeckFileError, match=r"words\.0\.definition"):
        load_deck_file(_write(tmp_path, text))


def test_empty_word_list_is_rejected(tmp_path):
    with pytest.raises(DeckFileError, match="words"):
        load_deck_file(_write(tmp_path, "deck: D\nwords: []\n"))


def test_duplicate_word_ids(tmp_path):
    text = (
        "deck: D\nwords:\n"
        "  - {id: 1, word: a, definition: b}\n"
        "  - {id: 1, word: c, definition: d}\n"
    )

    with pytest.raises(DeckFileError, match="Duplicate word id '1'"):
        load_deck_file(_write(tmp_path, text))
