"""LLM client abstract interface - structured text and image generation."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class InlineImage:
    """Inline image content part returned by the provider."""

    mime_type: str
    data: str  # base64

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class LLMClient(ABC):
    """Generative provider interface."""

    @abstractmethod
    async def complete_json(
        self,
        messages: list[dict[str, str]],
        *,
        schema: dict[str, Any],
        schema_name: str,
        temperature: float | None = None,
    ) -> str | None:
        """
        Send a structured-output request and return the raw JSON text payload.
        messages: [{"role": "system"|"user", "content": "..."}]
        Returns None when the provider produced no text.
        """
        ...

    @abstractmethod
    async def generate_image(self, prompt: str) -> list[InlineImage]:
        """Request an illustration. Returns inline image parts, possibly empty."""
        ...
