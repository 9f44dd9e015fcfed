"""Application view state and topic suggestions."""

from enum import Enum

from pydantic import BaseModel, Field

from anecdote.models.anecdote import Anecdote


class View(str, Enum):
    """Which page the client shows."""

    HOME = "home"
    HISTORY = "history"


class GenerationStatus(str, Enum):
    """Progress of the current generation request."""

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


class SubjectCategory(str, Enum):
    """Suggestion chip category."""

    SCIENCE = "Science"
    HISTORY = "History"
    MATH = "Math"
    LITERATURE = "Literature"
    ART = "Art"
    GENERAL = "General"


class Suggestion(BaseModel):
    """Topic suggestion chip."""

    label: str
    category: SubjectCategory = SubjectCategory.GENERAL


class AppState(BaseModel):
    """Controller state. Owned and mutated only by the ApplicationController."""

    view: View = View.HOME
    current_anecdote: Anecdote | None = None
    topic: str = ""
    language: str = "English"
    status: GenerationStatus = GenerationStatus.IDLE
    error: str | None = Field(default=None, description="User-visible generation error")
    show_meanings: bool = False

    @property
    def is_loading(self) -> bool:
        return self.status is GenerationStatus.LOADING
