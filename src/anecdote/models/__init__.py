"""Data models."""

from anecdote.models.anecdote import Anecdote, ToughWord
from anecdote.models.state import (
    AppState,
    GenerationStatus,
    SubjectCategory,
    Suggestion,
    View,
)
from anecdote.models.user import GUEST_NAME, User

__all__ = [
    "GUEST_NAME",
    "Anecdote",
    "AppState",
    "GenerationStatus",
    "SubjectCategory",
    "Suggestion",
    "ToughWord",
    "User",
    "View",
]
