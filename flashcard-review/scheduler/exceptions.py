class StorageError(Exception):
    """A deck store could not read or write."""


class InvariantViolation(Exception):
    """A review session was driven in a way its state does not allow."""


class DeckNotFound(LookupError):
    """A deck-scoped session was asked for a deck that does not exist."""
