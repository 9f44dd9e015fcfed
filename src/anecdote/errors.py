"""Error taxonomy. Only ValidationError and GenerationError reach the user."""


class AnecdoteError(Exception):
    """Base class for application errors."""


class ValidationError(AnecdoteError):
    """Rejected input (empty topic, empty name, unknown language). No state change."""


class GenerationError(AnecdoteError):
    """Text phase failed. Message is shown to the user verbatim."""


class IllustrationError(AnecdoteError):
    """Image phase failed. Logged only."""


class PersistenceError(AnecdoteError):
    """Durable write failed (quota, serialization, backend error)."""


class CorruptDataError(AnecdoteError):
    """Malformed data read from durable storage."""
