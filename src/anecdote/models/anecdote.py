"""Anecdote data model."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToughWord(BaseModel):
    """Difficult word from the story with a simplified meaning."""

    word: str = Field(..., min_length=1, description="The difficult word found in the story")
    definition: str = Field(..., min_length=1, description="Very short definition in context")


class Anecdote(BaseModel):
    """Structured narrative produced by the generative provider.

    Field names serialize in camelCase, matching the provider schema and the
    stored history format.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    story: str = Field(..., min_length=1)
    takeaway: str = Field(..., min_length=1)
    fun_fact: str = Field(..., min_length=1, alias="funFact")
    topic: str = Field(..., min_length=1, description="Normalized subject label")
    emoji: str = Field(..., min_length=1)
    related_topics: list[str] = Field(..., min_length=3, max_length=3, alias="relatedTopics")
    tough_words: list[ToughWord] = Field(..., min_length=3, max_length=5, alias="toughWords")
    ncert_topic: str = Field(..., min_length=1, alias="ncertTopic")
    image_url: str | None = Field(default=None, alias="imageUrl", description="data: URI illustration")

    def to_storage(self) -> dict[str, Any]:
        """History entry for durable storage - image stripped to bound size."""
        return self.model_dump(by_alias=True, exclude={"image_url"})

    def to_api(self) -> dict[str, Any]:
        """Full camelCase projection, image included when present."""
        return self.model_dump(by_alias=True, exclude_none=True)
