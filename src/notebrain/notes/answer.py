"""Answer composition over stored notes.

Selects the relevant notes for a question, asks the answer model for a
grounded reply, and turns model failures into messages a user can act on.
"""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from ..config import RelevanceConfig
from ..llm.errors import LLMAuthError, LLMError, LLMNotConfiguredError, LLMRateLimitError
from ..llm.model import LanguageModel
from .models import Note
from .relevance import ContextSelection, select_relevant_context

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful personal assistant that answers questions based strictly "
    "on the user's recorded information. Never make up information."
)

ANSWER_PROMPT = """You are a personal AI assistant. Answer the user's question based ONLY on their recorded information below.

Personal recordings (most relevant shown):
{context}
User question: {question}

Instructions:
- Provide a helpful, specific answer based only on the recordings above
- If the recordings don't contain enough information to fully answer the question, say so
- Be concise but thorough
- Reference specific recordings when relevant (by date if helpful)
- Do not make up information not present in the recordings"""

NO_NOTES_MESSAGE = (
    "I don't have any recordings to search through yet. "
    "Try recording something first, then ask me questions about it!"
)
NO_API_KEY_MESSAGE = (
    "I need an API key for the answer service to answer questions. "
    "Your notes are still being recorded."
)
RATE_LIMIT_MESSAGE = "I'm currently experiencing high demand. Please try again in a moment."
AUTH_MESSAGE = "There's an issue with my API authentication. Please check the configuration."
GENERIC_ERROR_MESSAGE = "I encountered an error while processing your question. Please try again."

# Rough heuristics for cost display only
PROMPT_OVERHEAD_CHARS = 200
CHARS_PER_TOKEN = 4
COST_PER_TOKEN_USD = 0.0000015


@dataclass
class Answer:
    """A reply to a question and the context it was built from.

    Attributes:
        text: Reply shown to the user
        selection: Notes used as context (None when there were no notes)
    """

    text: str
    selection: ContextSelection | None = None


@dataclass
class UsageEstimate:
    """Approximate cost of answering a question."""

    total_notes: int
    relevant_notes: int
    estimated_tokens: int
    estimated_cost_usd: float


class AnswerComposer:
    """Answers questions from the user's own notes."""

    def __init__(self, llm: LanguageModel, relevance: RelevanceConfig | None = None) -> None:
        """Initialize composer.

        Args:
            llm: Answer model (typically the cloud model)
            relevance: Context selection budgets
        """
        self._llm = llm
        self._relevance = relevance or RelevanceConfig()
        self._llm.set_system_prompt(SYSTEM_PROMPT)

    def select_context(self, question: str, notes: Sequence[Note]) -> ContextSelection:
        """Pick and render the notes relevant to a question."""
        return select_relevant_context(
            question,
            notes,
            max_chars=self._relevance.max_context_chars,
            max_notes=self._relevance.max_notes,
            fallback_notes=self._relevance.fallback_notes,
            date_format=self._relevance.date_format,
        )

    def answer(self, question: str, notes: Sequence[Note]) -> Answer:
        """Answer a question using the given note history.

        Model failures are logged and returned as a user-facing message.

        Args:
            question: Free-text question
            notes: All stored notes

        Returns:
            Answer with reply text and the context selection
        """
        if not notes:
            return Answer(text=NO_NOTES_MESSAGE)

        selection = self.select_context(question, notes)
        prompt = ANSWER_PROMPT.format(context=selection.rendered_context, question=question)

        try:
            response = self._llm.generate(prompt)
        except LLMNotConfiguredError as e:
            logger.warning(f"Answer model unavailable: {e}")
            return Answer(text=NO_API_KEY_MESSAGE, selection=selection)
        except LLMRateLimitError as e:
            logger.warning(f"Answer model rate limited: {e}")
            return Answer(text=RATE_LIMIT_MESSAGE, selection=selection)
        except LLMAuthError as e:
            logger.error(f"Answer model rejected credentials: {e}")
            return Answer(text=AUTH_MESSAGE, selection=selection)
        except LLMError as e:
            logger.error(f"Answer generation failed: {e}")
            return Answer(text=GENERIC_ERROR_MESSAGE, selection=selection)

        text = response.text.strip()
        disclosure = selection.disclosure()
        if disclosure:
            text = f"{text}\n\n{disclosure}"

        logger.info(
            "Answered question using %d of %d notes (%d tokens)",
            selection.used_count,
            selection.total_count,
            response.tokens_used,
        )
        return Answer(text=text, selection=selection)

    def estimate_usage(self, question: str, notes: Sequence[Note]) -> UsageEstimate:
        """Estimate tokens and cost for answering a question."""
        selection = self.select_context(question, notes)
        chars = len(question) + len(selection.rendered_context) + PROMPT_OVERHEAD_CHARS
        tokens = math.ceil(chars / CHARS_PER_TOKEN)

        return UsageEstimate(
            total_notes=len(notes),
            relevant_notes=selection.candidate_count,
            estimated_tokens=tokens,
            estimated_cost_usd=round(tokens * COST_PER_TOKEN_USD, 6),
        )


__all__ = [
    "Answer",
    "AnswerComposer",
    "AUTH_MESSAGE",
    "GENERIC_ERROR_MESSAGE",
    "NO_API_KEY_MESSAGE",
    "NO_NOTES_MESSAGE",
    "RATE_LIMIT_MESSAGE",
    "UsageEstimate",
]
