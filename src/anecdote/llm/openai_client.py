"""OpenAI-compatible LLM client implementation."""

import logging
from typing import Any

from openai import AsyncOpenAI

from anecdote.config import get_settings
from anecdote.llm.base import InlineImage, LLMClient

logger = logging.getLogger(__name__)

OUTPUT_MIME_TYPES = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
}


class OpenAIClient(LLMClient):
    """OpenAI API client - works with OpenAI or compatible endpoints (e.g. LiteLLM)."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        image_model: str | None = None,
        image_size: str | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.llm_api_key
        self._base_url = base_url or settings.llm_base_url
        self._model = model or settings.llm_model
        self._image_model = image_model or settings.image_model
        self._image_size = image_size or settings.image_size
        self._timeout = timeout if timeout is not None else settings.llm_timeout_seconds
        self._client: AsyncOpenAI | None = None

    def _get_client(self) -> AsyncOpenAI:
        """Lazy-init API client."""
        if self._client is None:
            client_kwargs: dict[str, Any] = {"api_key": self._api_key}
            if self._base_url:
                client_kwargs["base_url"] = self._base_url
            if self._timeout is not None:
                client_kwargs["timeout"] = self._timeout
            self._client = AsyncOpenAI(**client_kwargs)
        return self._client

    async def complete_json(
        self,
        messages: list[dict[str, str]],
        *,
        schema: dict[str, Any],
        schema_name: str,
        temperature: float | None = None,
    ) -> str | None:
        """Chat completion constrained to a strict JSON schema."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "response_format": {
                "type": "json_schema",
                "json_schema": {"name": schema_name, "schema": schema, "strict": True},
            },
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        response = await self._get_client().chat.completions.create(**kwargs)
        if not response.choices:
            return None
        return response.choices[0].message.content

    async def generate_image(self, prompt: str) -> list[InlineImage]:
        """Image generation with base64 output."""
        response = await self._get_client().images.generate(
            model=self._image_model,
            prompt=prompt,
            size=self._image_size,
            n=1,
        )
        output_format = getattr(response, "output_format", None) or "png"
        mime = OUTPUT_MIME_TYPES.get(output_format, "image/png")
        parts: list[InlineImage] = []
        for item in response.data or []:
            if item.b64_json:
                parts.append(InlineImage(mime_type=mime, data=item.b64_json))
        logger.debug("Image generation returned %d inline parts", len(parts))
        return parts
