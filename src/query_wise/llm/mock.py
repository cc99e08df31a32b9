"""
Mock Reasoner
=============

Deterministic reasoning capability for tests and demonstration.
"""

from typing import Any

from pydantic import BaseModel

from query_wise.errors import TranslationUnavailable
from query_wise.llm.base import ReasoningCapability


class MockReasoner(ReasoningCapability):
    """
    Canned-response reasoner.

    In production, replace with GeminiReasoner or another provider.
    """

    name = "mock-reasoner"

    def __init__(self, responses: dict[str, list[Any]] | None = None, default: Any = None) -> None:
        """
        Initialize with canned responses.

        Args:
            responses: Dict mapping prompt substrings to a list of payloads
                (JSON text or dicts). Each payload is returned in sequence;
                the last one repeats.
            default: Payload returned when nothing matches. Without one, an
                unmatched prompt behaves like an unreachable provider.
        """
        self.responses = responses or {}
        self.default = default
        self.call_counts: dict[str, int] = {}
        self.prompts: list[str] = []

    async def _complete(self, prompt: str, output_model: type[BaseModel]) -> Any:
        self.prompts.append(prompt)
        for key, payloads in self.responses.items():
            if key.lower() in prompt.lower():
                count = self.call_counts.get(key, 0)
                self.call_counts[key] = count + 1
                payload = payloads[min(count, len(payloads) - 1)]
                if isinstance(payload, Exception):
                    raise payload
                return payload

        if self.default is None:
            raise TranslationUnavailable("mock reasoner has no response for this prompt")
        return self.default

    def reset(self) -> None:
        """Reset call counts for fresh test runs."""
        self.call_counts = {}
        self.prompts = []
