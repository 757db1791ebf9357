"""Entity extraction from note text.

Asks a language model for people, tasks, events, dates, times, locations,
items, and topics as structured JSON.
"""

import json
import logging

from ..llm.errors import LLMError
from ..llm.model import LanguageModel
from .models import Entities

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant that extracts structured information from text. "
    "Always return valid JSON only."
)

# Prompt template for entity extraction
EXTRACTION_PROMPT = """Extract structured information from this personal recording:
"{text}"

Return a JSON object with these categories (only include if present):
- people: names mentioned
- tasks: action items or things to do
- events: meetings, appointments, social events
- dates: specific dates or time references
- times: specific times
- locations: addresses or place names
- items: shopping lists, objects mentioned
- topics: main subjects discussed

Example: {{"people": ["John"], "tasks": ["call dentist"], "dates": ["tomorrow"]}}

Return only valid JSON, no other text."""


class EntityExtractor:
    """Extracts structured entities from note text.

    Failures never propagate: a note is still stored, with empty entities,
    when the model is down or answers with something unparseable.
    """

    def __init__(self, llm: LanguageModel, max_tokens: int = 300) -> None:
        """Initialize extractor with language model.

        Args:
            llm: Language model for entity extraction (typically Ollama)
            max_tokens: Token limit for the extraction response
        """
        self._llm = llm
        self._max_tokens = max_tokens
        self._llm.set_system_prompt(SYSTEM_PROMPT)

    def extract(self, text: str) -> Entities:
        """Extract entities from note text.

        Args:
            text: Note text

        Returns:
            Entities; empty when nothing could be extracted
        """
        if not text.strip():
            return Entities()

        prompt = EXTRACTION_PROMPT.format(text=text)

        try:
            response = self._llm.generate(prompt, max_tokens=self._max_tokens, temperature=0.1)
        except LLMError as e:
            logger.warning(f"Entity extraction failed: {e}")
            return Entities()

        return self._parse_response(response.text)

    def _parse_response(self, response_text: str) -> Entities:
        """Parse LLM response into Entities.

        Args:
            response_text: Raw LLM response (expected to be JSON)

        Returns:
            Entities parsed from response
        """
        # The model may wrap the JSON in prose or code fences
        json_start = response_text.find("{")
        json_end = response_text.rfind("}") + 1

        if json_start < 0 or json_end <= json_start:
            logger.warning("No JSON object in extraction response")
            return Entities()

        try:
            data = json.loads(response_text[json_start:json_end])
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse extraction JSON: {e}")
            return Entities()

        return Entities.from_raw(data)


__all__ = ["EXTRACTION_PROMPT", "EntityExtractor"]
