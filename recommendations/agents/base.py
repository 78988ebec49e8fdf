"""
Agent base classes.

Agents never raise to the caller: LLM errors, schema mismatches and timeouts
become a failed AgentOutcome, which flattens to an empty list.
"""

import asyncio
import logging
import time
from typing import Awaitable, List, Optional

from config import settings
from ..ai.llm import ModelTier, StructuredLLM, llm as default_llm
from ..logic.constants import Category
from ..logic.contracts import AgentOutcome, GeneratedRecommendation, RecommendationInput

logger = logging.getLogger(__name__)


class BaseAgent:
    name = "agent"
    model_tier = ModelTier.FAST

    def __init__(self, llm: Optional[StructuredLLM] = None, timeout: Optional[float] = None):
        self.llm = llm or default_llm
        self.timeout = timeout if timeout is not None else settings.AGENT_TIMEOUT_SECONDS

    async def _guarded(self, work: Awaitable[List[GeneratedRecommendation]]) -> AgentOutcome:
        start_time = time.perf_counter()
        try:
            recommendations = await asyncio.wait_for(work, timeout=self.timeout)
        except asyncio.TimeoutError:
            elapsed = (time.perf_counter() - start_time) * 1000
            logger.error(f"[{self.name}] Timed out after {self.timeout}s")
            return AgentOutcome.failure(self.name, f"timed out after {self.timeout}s", elapsed)
        except Exception as e:
            elapsed = (time.perf_counter() - start_time) * 1000
            logger.error(f"[{self.name}] Error generating recommendations: {e}", exc_info=True)
            return AgentOutcome.failure(self.name, f"{type(e).__name__}: {e}", elapsed)

        elapsed = (time.perf_counter() - start_time) * 1000
        logger.info(f"[{self.name}] Generated {len(recommendations)} recommendations in {elapsed:.0f}ms")
        return AgentOutcome.ok(self.name, recommendations, elapsed)


class CategoryAgent(BaseAgent):
    """One agent per recommendation category, selected by the stage's recommendation types."""
    category: Category

    async def run(self, input: RecommendationInput) -> AgentOutcome:
        return await self._guarded(self._generate(input))

    async def generate(self, input: RecommendationInput) -> List[GeneratedRecommendation]:
        outcome = await self.run(input)
        return outcome.recommendations

    async def _generate(self, input: RecommendationInput) -> List[GeneratedRecommendation]:
        raise NotImplementedError
