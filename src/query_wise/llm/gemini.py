"""
Gemini Reasoner
===============

Reasoning capability backed by Google Gemini in JSON output mode.
"""

from typing import Any

import google.generativeai as genai
import structlog
from google.generativeai.types import GenerationConfig
from pydantic import BaseModel

from query_wise.llm.base import ReasoningCapability

logger = structlog.get_logger(__name__)


class GeminiReasoner(ReasoningCapability):
    """Calls Gemini once per request; no automatic retries."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-flash-latest",
        temperature: float = 0.0,
    ) -> None:
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.model = genai.GenerativeModel(model_name)
        self.temperature = temperature

    async def _complete(self, prompt: str, output_model: type[BaseModel]) -> Any:
        response = await self.model.generate_content_async(
            prompt,
            generation_config=GenerationConfig(
                temperature=self.temperature,
                response_mime_type="application/json",
            ),
        )
        logger.debug(
            "gemini_response",
            model=self.model_name,
            output_model=output_model.__name__,
            text=response.text,
        )
        return response.text
