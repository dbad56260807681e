from typing import Optional


class VocabcoreError(Exception):
    """Base exception for all vocabcore errors."""

    pass


class InvalidInputError(VocabcoreError, ValueError):
    """Raised when a quality, interval, ease factor or outcome is outside
    its documented domain."""

    pass


class OutOfOrderJudgmentError(VocabcoreError):
    """Raised when a judgment targets an item that is not at the cursor."""

    def __init__(
        self,
        message: str,
        expected_id: Optional[str] = None,
        received_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.expected_id = expected_id
        self.received_id = received_id


class EmptyDeckError(VocabcoreError):
    """Raised when a session is initialized with zero items."""

    pass


class PersistenceWriteError(VocabcoreError):
    """Indicates that a write-through to the deck store failed.

    The in-memory session state is authoritative and is not rolled back.
    """

    def __init__(
        self,
        message: str,
        operation: str,
        item_id: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.item_id = item_id
        self.original_exception = original_exception


class DeckFileError(VocabcoreError):
    """Raised for deck files that cannot be read or fail validation."""

    pass
