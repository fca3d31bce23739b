"""Grounded answer generation on top of any :class:`ILLMProvider`."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from docrag.interfaces.answer_generator import IAnswerGenerator

if TYPE_CHECKING:
    from docrag.interfaces.llm_provider import ILLMProvider

logger = structlog.get_logger(logger_name=__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant. Answer using ONLY the provided context. "
    "If the context is insufficient, say you do not know."
)


def build_user_prompt(question: str, context: str) -> str:
    return f"Context:\n{context}\n\nQuestion:\n{question}"


class GroundedAnswerGenerator(IAnswerGenerator):
    """Asks the LLM to answer strictly from the retrieved context.

    Parameters
    ----------
    llm:
        The chat-completion backend.
    temperature:
        Sampling temperature; kept low so answers stick to the context.
    max_tokens:
        Upper bound on the answer length.
    """

    def __init__(
        self,
        llm: ILLMProvider,
        temperature: float = 0.2,
        max_tokens: int = 1024,
    ) -> None:
        self._llm = llm
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def complete(self, question: str, context: str) -> str:
        answer = await self._llm.complete(
            system_prompt=SYSTEM_PROMPT,
            user_prompt=build_user_prompt(question, context),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        logger.debug(
            "answer_generated",
            provider=self._llm.get_provider_name(),
            answer_length=len(answer),
        )
        return answer

    def get_model_name(self) -> str:
        return self._llm.get_model_name()
