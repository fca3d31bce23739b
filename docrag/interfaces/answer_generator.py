"""Abstract base class for grounded answer generation."""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementation: GroundedAnswerGenerator (docrag/services/answer_generator.py)
class IAnswerGenerator(ABC):
    """Turns a question and a retrieved context into an answer.

    Implementations must instruct the model to answer only from *context*
    and to say so when the context is insufficient.
    """

    @abstractmethod
    async def complete(self, question: str, context: str) -> str:
        """Return the model's answer to *question* grounded in *context*."""

    @abstractmethod
    def get_model_name(self) -> str:
        """Return the chat model identifier reported in query debug output."""
