"""Topic suggestions - recent history topics first, curated defaults after."""

from collections.abc import Iterable, Sequence

from anecdote.config import get_catalog
from anecdote.models import Anecdote, SubjectCategory, Suggestion

MAX_SUGGESTIONS = 6
MAX_FROM_HISTORY = 3


def default_suggestions() -> list[Suggestion]:
    """Curated suggestions from config/catalog.yaml."""
    return [Suggestion.model_validate(s) for s in get_catalog().get("default_suggestions", [])]


def derive_suggestions(
    history: Iterable[Anecdote],
    defaults: Sequence[Suggestion],
    *,
    limit: int = MAX_SUGGESTIONS,
    from_history: int = MAX_FROM_HISTORY,
) -> list[Suggestion]:
    """Up to `from_history` distinct history topics, then defaults not already listed."""
    recent: list[Suggestion] = []
    seen: set[str] = set()
    for entry in history:
        if len(recent) >= from_history:
            break
        if entry.topic in seen:
            continue
        seen.add(entry.topic)
        recent.append(Suggestion(label=entry.topic, category=SubjectCategory.GENERAL))
    remaining = [s for s in defaults if s.label not in seen]
    return (recent + remaining)[:limit]
