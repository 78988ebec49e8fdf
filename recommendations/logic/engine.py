"""
Recommendation Engine

Main orchestrator for a single recommendation run.

Pipeline flow:
1. Snapshot - Load the student's profile (hard error if missing)
2. Stage - Derive grade/season stage and relevant categories
3. Preferences - Load optional recommendation preferences
4. Fan-out - Run the category agents for the stage concurrently
5. Consolidation - Master agent adds general advice from the full fan-out output
6. Ranking - Merge and prioritize
7. Persistence - Replace the active batch, stamped with the profile hash
"""

import asyncio
import logging
import time
import weakref
from datetime import date
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from .constants import Category
from .contracts import (
    AgentOutcome,
    GenerateRecommendationsResult,
    GeneratedRecommendation,
    RecommendationInput,
    StageInfo,
)
from .persistence import save_recommendations
from .ranker import prioritize_recommendations
from .snapshot import create_profile_hash, load_preferences, load_profile_snapshot
from .stage import get_student_stage
from ..agents import CategoryAgent, MasterAgent, ProgramAgent, SchoolAgent
from ..ai.llm import StructuredLLM, llm as default_llm

logger = logging.getLogger(__name__)

# Category -> agent class. Fixed table; the stage decides which entries run.
AGENT_REGISTRY = {
    Category.SCHOOL.value: SchoolAgent,
    Category.PROGRAM.value: ProgramAgent,
}

# One lock per profile id while a run for it is in flight
_profile_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _profile_lock(profile_id: str) -> asyncio.Lock:
    lock = _profile_locks.get(profile_id)
    if lock is None:
        lock = asyncio.Lock()
        _profile_locks[profile_id] = lock
    return lock


class ProfileNotFoundError(LookupError):
    """The profile id does not resolve. The only hard stop for a run."""

    def __init__(self, profile_id: str):
        super().__init__(f"Profile not found: {profile_id}")
        self.profile_id = profile_id


class RecommendationEngine:
    """
    Wires the stage calculator, agents, ranker and persistence together.

    The dismiss and insert steps share the given session and are committed
    together before the per-profile lock is released, so a queued run for the
    same profile always sees the previous batch.
    """

    def __init__(
        self,
        db: Session,
        llm: Optional[StructuredLLM] = None,
        agents: Optional[Sequence[CategoryAgent]] = None,
        master_agent: Optional[MasterAgent] = None,
        timeout: Optional[float] = None,
    ):
        self.db = db
        self.llm = llm or default_llm
        if agents is None:
            agents = [agent_cls(db, llm=self.llm, timeout=timeout) for agent_cls in AGENT_REGISTRY.values()]
        self.agents: Dict[str, CategoryAgent] = {Category(a.category).value: a for a in agents}
        self.master_agent = master_agent or MasterAgent(llm=self.llm, timeout=timeout)

    def select_agents(self, stage: StageInfo) -> List[CategoryAgent]:
        return [agent for category, agent in self.agents.items() if category in stage.recommendation_types]

    async def generate(self, profile_id: str, on_date: Optional[date] = None) -> GenerateRecommendationsResult:
        """
        Generate, rank and persist a fresh recommendation batch.

        Args:
            profile_id: Student profile id
            on_date: Reference date for stage and program year (defaults to today)

        Raises:
            ProfileNotFoundError: profile id does not resolve
        """
        async with _profile_lock(profile_id):
            return await self._generate(profile_id, on_date or date.today())

    async def _generate(self, profile_id: str, on_date: date) -> GenerateRecommendationsResult:
        start_time = time.perf_counter()
        logger.info(f"🚀 Starting recommendation pipeline for profile {profile_id}")

        # Step 1: Snapshot
        profile = load_profile_snapshot(self.db, profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)

        # Step 2: Stage. Stored grade only stands in when graduation year is unknown.
        stage = get_student_stage(
            profile.graduation_year,
            on_date,
            grade=profile.grade if profile.graduation_year is None else None,
        )
        logger.info(f"🎯 Stage: {stage.stage} ({stage.grade}, {stage.season}) -> {stage.recommendation_types}")

        # Step 3: Preferences
        preferences = load_preferences(self.db, profile_id)

        input = RecommendationInput(profile=profile, stage=stage, preferences=preferences, on_date=on_date)

        # Step 4: Concurrent fan-out; every agent settles before consolidation
        # Only the LLM calls overlap; each agent's catalog queries run on the loop thread
        selected = self.select_agents(stage)
        outcomes: List[AgentOutcome] = list(await asyncio.gather(*(agent.run(input) for agent in selected)))
        by_category: Dict[str, List[GeneratedRecommendation]] = {
            Category(agent.category).value: outcome.recommendations
            for agent, outcome in zip(selected, outcomes)
        }
        school_recs = by_category.get(Category.SCHOOL.value, [])
        program_recs = by_category.get(Category.PROGRAM.value, [])
        logger.info(f"📦 Fan-out complete: {len(school_recs)} school, {len(program_recs)} program")

        # Step 5: Consolidation
        general_recs: List[GeneratedRecommendation] = []
        if Category.GENERAL.value in stage.recommendation_types:
            master_outcome = await self.master_agent.run(input, school_recs, program_recs)
            outcomes.append(master_outcome)
            general_recs = master_outcome.recommendations

        # Step 6: Merge and rank
        all_recommendations = prioritize_recommendations([*school_recs, *program_recs, *general_recs])

        # Step 7: Persist
        saved_count = save_recommendations(
            self.db,
            profile_id,
            all_recommendations,
            create_profile_hash(profile),
        )
        self.db.commit()

        failed_sources = [o.source for o in outcomes if o.failed]
        if failed_sources:
            logger.warning(f"⚠️ Degraded run for profile {profile_id}: {failed_sources} returned no results")

        processing_time = (time.perf_counter() - start_time) * 1000
        logger.info(f"✨ Recommendation pipeline complete: {saved_count} saved ({processing_time:.2f}ms)")

        return GenerateRecommendationsResult(
            recommendations=all_recommendations,
            stage=stage,
            saved_count=saved_count,
            failed_sources=failed_sources,
        )


# Convenience function for simple usage
async def generate_recommendations(
    db: Session,
    profile_id: str,
    on_date: Optional[date] = None,
    llm: Optional[StructuredLLM] = None,
) -> GenerateRecommendationsResult:
    engine = RecommendationEngine(db, llm=llm)
    return await engine.generate(profile_id, on_date=on_date)
