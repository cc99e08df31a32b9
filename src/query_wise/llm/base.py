"""
Reasoning Capability Interface
==============================

Abstract boundary to the language model that validates and translates
natural-language requests.

Providers only return raw output. The base class owns schema conformance:
anything that does not validate against the requested pydantic model is a
hard ``TranslationUnavailable`` error, never coerced into a default.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from query_wise.errors import TranslationUnavailable

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code block, if any."""
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        text = "\n".join(lines[1:-1] if lines[-1].strip() == "```" else lines[1:])
    return text.strip()


class ReasoningCapability(ABC):
    """Abstract interface for structured-output model providers."""

    name = "reasoning"

    @abstractmethod
    async def _complete(self, prompt: str, output_model: type[BaseModel]) -> Any:
        """
        Send the prompt to the provider.

        Args:
            prompt: Full prompt, including the expected JSON schema
            output_model: Model the response should conform to

        Returns:
            Raw JSON text or an already decoded mapping
        """
        pass

    def render_prompt(self, prompt: str, output_model: type[BaseModel]) -> str:
        schema = json.dumps(output_model.model_json_schema(by_alias=True), indent=2)
        return f"{prompt}\n\nRespond only with a JSON object matching this JSON schema:\n{schema}"

    async def generate(self, prompt: str, output_model: type[ModelT]) -> ModelT:
        """
        Ask the provider for output conforming to ``output_model``.

        Raises:
            TranslationUnavailable: the provider failed or its output did not
                conform to ``output_model``
        """
        try:
            raw = await self._complete(self.render_prompt(prompt, output_model), output_model)
        except TranslationUnavailable:
            raise
        except Exception as e:
            logger.error("reasoning_call_failed", provider=self.name, error=str(e))
            raise TranslationUnavailable(f"{self.name} call failed: {e}") from e

        try:
            if isinstance(raw, (str, bytes)):
                text = raw.decode() if isinstance(raw, bytes) else raw
                return output_model.model_validate_json(strip_code_fence(text))
            return output_model.model_validate(raw)
        except ValidationError as e:
            logger.error(
                "reasoning_output_rejected",
                provider=self.name,
                model=output_model.__name__,
                error=str(e),
            )
            raise TranslationUnavailable(
                f"{self.name} returned output that does not match {output_model.__name__}"
            ) from e
