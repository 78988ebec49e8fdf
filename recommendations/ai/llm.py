import json
import logging
from enum import Enum
from typing import Optional, Type, TypeVar

import openai
from pydantic import BaseModel

from config import settings
from .prompt_builder import build_system_prompt

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class ModelTier(str, Enum):
    """Which model an agent runs on. FAST for extraction-style work, ADVISOR for judgement."""
    FAST = "fast"
    ADVISOR = "advisor"


class LLMResponseError(RuntimeError):
    """The model returned nothing usable (empty body or non-JSON)."""


def _strip_code_fences(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        lines = text.splitlines()
        body = lines[1:-1] if lines[-1].strip() == "```" else lines[1:]
        text = "\n".join(body).strip()
    return text


class StructuredLLM:
    """
    Opaque "prompt + schema -> structured object" collaborator.

    Calls the OpenAI chat completions API in JSON mode and validates the
    reply against the given pydantic schema. Raises on any failure; callers
    decide how to degrade.
    """

    def __init__(self, client: Optional[openai.AsyncOpenAI] = None):
        self.api_key = settings.OPENAI_API_KEY
        self.client = client
        self.models = {
            ModelTier.FAST: settings.OPENAI_MODEL_FAST,
            ModelTier.ADVISOR: settings.OPENAI_MODEL_ADVISOR,
        }
        self.max_tokens = settings.LLM_MAX_TOKENS
        self.temperature = settings.LLM_TEMPERATURE

    def _get_client(self) -> openai.AsyncOpenAI:
        if self.client is None:
            if not self.api_key:
                raise RuntimeError("OPENAI_API_KEY not set in environment")
            self.client = openai.AsyncOpenAI(api_key=self.api_key)
        return self.client

    async def generate_object(
        self,
        prompt: str,
        schema: Type[SchemaT],
        tier: ModelTier = ModelTier.FAST,
    ) -> SchemaT:
        client = self._get_client()
        model = self.models[ModelTier(tier)]

        response = await client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": build_system_prompt(schema)},
                {"role": "user", "content": prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise LLMResponseError(f"Empty response from {model}")

        try:
            parsed = json.loads(_strip_code_fences(content))
        except json.JSONDecodeError as e:
            raise LLMResponseError(f"Non-JSON response from {model}: {e}") from e

        # pydantic.ValidationError propagates as a schema mismatch
        return schema.model_validate(parsed)


# Singleton instance
llm = StructuredLLM()
