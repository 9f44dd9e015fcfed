"""Tough-word highlighting - splits a story into plain and defined segments."""

import re
from collections.abc import Sequence

from pydantic import BaseModel

from anecdote.models import ToughWord


class StorySegment(BaseModel):
    """Run of story text. `definition` is set when the run is a tough word."""

    text: str
    definition: str | None = None


def highlight_story(story: str, tough_words: Sequence[ToughWord]) -> list[StorySegment]:
    """
    Segment story around whole-word, case-insensitive tough-word matches.
    Longer words win when words overlap. Segments concatenate back to the story.
    """
    definitions: dict[str, str] = {}
    for tw in tough_words:
        word = tw.word.strip()
        if word and word.casefold() not in definitions:
            definitions[word.casefold()] = tw.definition
    if not story or not definitions:
        return [StorySegment(text=story)] if story else []

    alternation = "|".join(re.escape(w) for w in sorted(definitions, key=len, reverse=True))
    pattern = re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)

    segments: list[StorySegment] = []
    pos = 0
    for match in pattern.finditer(story):
        if match.start() > pos:
            segments.append(StorySegment(text=story[pos : match.start()]))
        segments.append(
            StorySegment(text=match.group(0), definition=definitions.get(match.group(0).casefold()))
        )
        pos = match.end()
    if pos < len(story):
        segments.append(StorySegment(text=story[pos:]))
    return segments
