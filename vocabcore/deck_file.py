"""
Loads vocabulary decks from YAML files.

Expected layout:

    deck: Essential Words
    words:
      - id: 1
        word: Abate
        definition: To lessen or subside
        part_of_speech: verb
        example_sentence: The storm began to abate.
        synonyms: [decrease, diminish]
        difficulty_level: 2
"""

import logging
from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import DeckFileError
from .models import VocabularyWord

logger = logging.getLogger(__name__)


class VocabularyDeck(BaseModel):
    model_config = ConfigDict(extra="forbid")

    deck: str = Field(..., min_length=1)
    words: List[VocabularyWord] = Field(..., min_length=1)


def load_deck_file(file_path: Path) -> VocabularyDeck:
    """
    Parse and validate a YAML vocabulary deck.

    Raises:
        DeckFileError: If the file is missing or unreadable, is not valid
            YAML, fails schema validation, or repeats a word id.
    """
    try:
        content = file_path.read_text(encoding="utf-8")
        raw = yaml.safe_load(content)
    except FileNotFoundError:
        raise DeckFileError(f"{file_path}: File not found.") from None
    except IOError as e:
        raise DeckFileError(f"{file_path}: Could not read file: {e}") from e
    except yaml.YAMLError as e:
        raise DeckFileError(f"{file_path}: Invalid YAML syntax: {e}") from e

    if not isinstance(raw, dict):
        raise DeckFileError(
            f"{file_path}: Top level of YAML must be a dictionary (deck object)."
        )

    try:
        deck = VocabularyDeck.model_validate(raw)
    except ValidationError as e:
        error_details = e.errors()[0]
        field = ".".join(map(str, error_details["loc"]))
        raise DeckFileError(
            f"{file_path}: Validation error in field '{field}': "
            f"{error_details['msg']}"
        ) from e

    seen = set()
    for word in deck.words:
        if word.id in seen:
            raise DeckFileError(f"{file_path}: Duplicate word id '{word.id}'.")
        seen.add(word.id)

    logger.info(f"Loaded {len(deck.words)} words from deck '{deck.deck}'")
    return deck
