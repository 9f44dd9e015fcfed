"""Generation client - two-phase anecdote request: structured text, then illustration."""

import json
import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from anecdote.errors import GenerationError, IllustrationError
from anecdote.llm.base import LLMClient
from anecdote.models import Anecdote

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Failed to unearth a story. Please try again."
DEFAULT_TEMPERATURE = 0.3
SCHEMA_NAME = "anecdote"

SYSTEM_PROMPT_TEMPLATE = """You are a master storyteller. Your goal is to bring history and science to life through specific, human-centric stories.
NEVER write generic summaries.
ALWAYS focus on a specific individual facing a specific challenge or moment of realization.
You are strictly factual but narrative-driven.
Always write the content in the requested language: {language}."""

STORY_USER_TEMPLATE = """Generate an educational and entertaining anecdote about this academic topic: "{topic}".
Target Language: {language}.

STRICT REQUIREMENT: This must be a STORY, not a description.
- It MUST have a specific main character (historical figure, scientist, or witness).
- It MUST describe a specific scene or event (a moment of discovery, a specific conflict, a conversation).
- Do NOT simply list facts or describe a place/concept generally.

Example of bad output: "The Taj Mahal was built in 1632 by Shah Jahan to house the tomb of his favorite wife..." (This is a summary).
Example of good output: "In 1631, Emperor Shah Jahan locked himself in his chambers for eight days, refusing food or water, after hearing the news that his beloved Mumtaz had died in childbirth..." (This is a story).

CRITICAL:
1. Prioritize factual accuracy. Do not propagate common myths as absolute fact.
2. If a popular story is a myth (e.g. Newton's apple hitting his head), clarify that it is a legend or "popularly believed".
3. Verify the "Fun Fact" is scientifically or historically accurate.

IMPORTANT: ensure all content fields (title, story, takeaway, funFact, relatedTopics, toughWords, ncertTopic) are written in {language}."""

IMAGE_PROMPT_TEMPLATE = (
    'A high quality, educational illustration for a story titled "{title}". '
    "Topic: {topic}. "
    "Style: Educational textbook illustration, detailed, vibrant, suitable for students."
)


def _string(description: str) -> dict[str, str]:
    return {"type": "string", "description": description}


ANECDOTE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": _string("A catchy, intriguing title for the anecdote."),
        "story": _string(
            "A compelling narrative anecdote focused on a specific PERSON and a specific MOMENT in time. "
            "Do NOT write a general summary or encyclopedia entry. "
            "It must have a protagonist, action, and a conclusion."
        ),
        "takeaway": _string(
            "A brief academic lesson or moral derived from the story. What is the educational value?"
        ),
        "funFact": _string(
            "A quick, surprising, and strictly fact-checked one-sentence fact related to the topic. "
            "Do not include myths, rumors, or unverified internet trivia."
        ),
        "emoji": _string("A single emoji that best represents the story."),
        "topic": _string("The standardized academic topic name (e.g., 'Physics', 'World History')."),
        "ncertTopic": _string(
            "The specific Chapter/Topic from the Indian NCERT Syllabus closest to this story "
            "(e.g. 'Class 10 Science: Light - Reflection and Refraction')."
        ),
        "relatedTopics": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 3,
            "maxItems": 3,
            "description": (
                "List exactly 3 related academic topics, historical figures, or concepts that would be "
                "interesting to learn about next. Short strings suitable for button labels."
            ),
        },
        "toughWords": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "word": _string("The difficult word found in the story."),
                    "definition": _string("A very short definition (3-5 words) of the word in context."),
                },
                "required": ["word", "definition"],
                "additionalProperties": False,
            },
            "minItems": 3,
            "maxItems": 5,
            "description": (
                "Identify 3-5 difficult or academic words used in the story and provide their simplified meanings."
            ),
        },
    },
    "required": [
        "title",
        "story",
        "takeaway",
        "funFact",
        "emoji",
        "topic",
        "ncertTopic",
        "relatedTopics",
        "toughWords",
    ],
    "additionalProperties": False,
}


class GenerationClient:
    """
    Requests an anecdote from the provider.

    The text phase is required and fails with GenerationError. The image phase
    is best-effort: any failure leaves the anecdote without an illustration.
    """

    def __init__(self, llm: LLMClient, *, temperature: float = DEFAULT_TEMPERATURE) -> None:
        self._llm = llm
        self._temperature = temperature

    async def generate(self, topic: str, language: str = "English") -> Anecdote:
        """Generate an anecdote for topic in language."""
        anecdote = await self.generate_text(topic, language)
        image_url = await self.illustrate(anecdote)
        if image_url:
            anecdote = anecdote.model_copy(update={"image_url": image_url})
        return anecdote

    async def generate_text(self, topic: str, language: str) -> Anecdote:
        """Text phase. No retry; any failure is terminal for the request."""
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT_TEMPLATE.format(language=language)},
            {"role": "user", "content": STORY_USER_TEMPLATE.format(topic=topic, language=language)},
        ]
        try:
            raw = await self._llm.complete_json(
                messages,
                schema=ANECDOTE_SCHEMA,
                schema_name=SCHEMA_NAME,
                temperature=self._temperature,
            )
            if not raw:
                raise GenerationError("No response generated.")
            return self._parse_anecdote(raw)
        except Exception as e:
            logger.error("Text generation failed for topic %r: %s", topic, e)
            raise GenerationError(GENERATION_FAILED_MESSAGE) from e

    async def illustrate(self, anecdote: Anecdote) -> str | None:
        """Image phase. Returns a data URI or None; never raises."""
        prompt = IMAGE_PROMPT_TEMPLATE.format(title=anecdote.title, topic=anecdote.topic)
        try:
            parts = await self._llm.generate_image(prompt)
            for part in parts or []:
                if part.mime_type and part.data:
                    return part.to_data_uri()
            raise IllustrationError("No inline image in response")
        except Exception as e:
            logger.warning("Image generation failed for %r: %s", anecdote.title, e)
            return None

    @staticmethod
    def _parse_anecdote(raw: str) -> Anecdote:
        """Parse provider JSON against the Anecdote model."""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Failed to parse anecdote JSON: %s. Raw: %s", e, raw[:200])
            raise GenerationError("Malformed JSON payload") from e
        if not isinstance(data, dict):
            raise GenerationError("Payload is not a JSON object")
        data.pop("imageUrl", None)
        try:
            return Anecdote.model_validate(data)
        except PydanticValidationError as e:
            raise GenerationError(f"Payload does not match schema: {e.error_count()} errors") from e
