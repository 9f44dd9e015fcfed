"""Business logic services."""

from anecdote.services.controller import ApplicationController, Presenter, create_controller
from anecdote.services.generation_client import GenerationClient
from anecdote.services.highlighting import StorySegment, highlight_story
from anecdote.services.suggestions import default_suggestions, derive_suggestions

__all__ = [
    "ApplicationController",
    "GenerationClient",
    "Presenter",
    "StorySegment",
    "create_controller",
    "default_suggestions",
    "derive_suggestions",
    "highlight_story",
]
