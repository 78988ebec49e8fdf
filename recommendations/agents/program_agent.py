"""
Program Agent

Generates summer program recommendations. Filters the program catalog by
stage, program year and grade eligibility, then asks the model to pick the
best fits from that candidate list.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from .base import CategoryAgent
from ..ai.guidelines import HOLISTIC_RUBRIC, MATCH_LEVEL_GUIDE
from ..ai.llm import ModelTier, StructuredLLM
from ..ai import prompt_builder as pb
from ..logic.catalog import find_eligible_programs
from ..logic.constants import PROGRAM_CUTOFF_STAGES, Category, Priority, Season
from ..logic.contracts import GeneratedRecommendation, ProgramCandidate, RecommendationInput, StageInfo
from ..logic.stage import grade_to_number

logger = logging.getLogger(__name__)


class ProgramPick(BaseModel):
    program_id: str = Field(description="The ID of the program from the list")
    reasoning: str = Field(
        description="3-5 sentences explaining why this program is a good fit, considering the student's "
        "interests, activities, and how it would strengthen their college application"
    )
    match_level: Priority = Field(
        description="How well this program matches the student holistically"
    )
    priority: Priority = Field(description="How important this recommendation is for the student to consider")
    action_items: List[str] = Field(default_factory=list, description="2-4 specific next steps for this program")


class ProgramRecommendationSchema(BaseModel):
    recommendations: List[ProgramPick]
    summary: Optional[str] = Field(default=None, description="Brief overview of the program recommendations")


def get_target_program_year(stage: StageInfo, on_date: date) -> int:
    """Outside summer, this year's programs are already underway or closed; look at next year."""
    if stage.season == Season.SUMMER.value:
        return on_date.year
    return on_date.year + 1


class ProgramAgent(CategoryAgent):
    name = "program_agent"
    category = Category.PROGRAM
    model_tier = ModelTier.FAST

    def __init__(self, db: Session, llm: Optional[StructuredLLM] = None, timeout: Optional[float] = None):
        super().__init__(llm=llm, timeout=timeout)
        self.db = db

    def get_eligible_programs(self, input: RecommendationInput) -> List[ProgramCandidate]:
        return find_eligible_programs(
            self.db,
            grade_number=grade_to_number(input.stage.grade),
            target_year=get_target_program_year(input.stage, input.on_date),
            exclude_ids=input.profile.existing_summer_program_ids,
        )

    async def _generate(self, input: RecommendationInput) -> List[GeneratedRecommendation]:
        profile, stage = input.profile, input.stage
        logger.info(f"[{self.name}] Starting program recommendations for {profile.first_name}")

        if stage.stage in {s.value for s in PROGRAM_CUTOFF_STAGES}:
            logger.info(f"[{self.name}] Skipping - too late for seniors ({stage.stage})")
            return []

        candidates = self.get_eligible_programs(input)
        logger.info(f"[{self.name}] Found {len(candidates)} eligible programs in catalog")
        if not candidates:
            return []

        prompt = build_program_prompt(input, candidates)
        result = await self.llm.generate_object(prompt, ProgramRecommendationSchema, self.model_tier)
        return self._to_recommendations(result, input, candidates)

    def _to_recommendations(
        self,
        result: ProgramRecommendationSchema,
        input: RecommendationInput,
        candidates: List[ProgramCandidate],
    ) -> List[GeneratedRecommendation]:
        program_map: Dict[str, ProgramCandidate] = {p.id: p for p in candidates}
        existing_ids = set(input.profile.existing_summer_program_ids)
        seen_ids = set()
        recommendations = []

        for pick in result.recommendations:
            program_id = pick.program_id.strip()
            if program_id not in program_map or program_id in existing_ids or program_id in seen_ids:
                logger.debug(f"[{self.name}] Dropping unresolvable or listed program id '{pick.program_id}'")
                continue
            seen_ids.add(program_id)

            program = program_map[program_id]
            recommendations.append(
                GeneratedRecommendation(
                    category=Category.PROGRAM,
                    title=program.name,
                    subtitle=program.organization,
                    reasoning=pick.reasoning,
                    # match level drives display priority
                    priority=pick.match_level,
                    action_items=pick.action_items,
                    relevant_grade=input.stage.grade,
                    expires_at=program.application_deadline,
                    summer_program_id=program.id,
                )
            )

        return recommendations


def build_program_prompt(input: RecommendationInput, programs: List[ProgramCandidate]) -> str:
    profile, preferences = input.profile, input.preferences
    parts: List[str] = []

    parts.append(
        "You are a college admissions expert helping a high school student find summer programs "
        "that will strengthen their application."
    )
    parts.append("")
    parts.append("## Student Profile")
    parts.append("")
    parts.extend(pb.identity_lines(profile))
    parts.extend(pb.academics_lines(profile, include_rank=False))
    if profile.sat_total:
        parts.append(f"- SAT: {profile.sat_total}")
    if profile.act_composite:
        parts.append(f"- ACT: {profile.act_composite}")
    parts.extend(pb.activities_lines(profile, heading="Activities & Interests"))
    parts.extend(pb.awards_lines(profile, heading="Awards"))
    parts.extend(pb.interests_lines(profile))

    if preferences is not None and preferences.program_preferences:
        parts.append("")
        parts.append("### What They're Looking For")
        parts.append(preferences.program_preferences)

    parts.append("")
    parts.append("## Available Programs")
    parts.append("")
    parts.append("Here are the summer programs available for this student's grade level:")
    parts.append("")

    for program in programs:
        parts.append(f"### {program.name} (ID: {program.id})")
        parts.append(f"- Organization: {program.organization}")
        if program.category:
            parts.append(f"- Category: {program.category}")
        if program.focus_areas:
            parts.append(f"- Focus areas: {', '.join(program.focus_areas)}")
        if program.application_deadline:
            parts.append(f"- Deadline: {program.application_deadline.isoformat()}")
        if program.llm_context:
            parts.append(f"- Notes: {program.llm_context}")
        parts.append("")

    parts.append("## Instructions")
    parts.append("")
    parts.append("Based on this student's complete profile, recommend 3-5 programs that would be the best fit.")
    parts.append("Only use program IDs from the list above. Do not make up IDs.")
    parts.append("")
    parts.append("For each program recommendation, provide a HOLISTIC assessment considering:")
    parts.extend(pb.bullets(HOLISTIC_RUBRIC))
    parts.append("")
    parts.append("For match_level, assess holistically:")
    parts.extend(pb.bullets(MATCH_LEVEL_GUIDE))
    parts.append("")
    parts.append("Write detailed reasoning (3-5 sentences) explaining WHY this program is a good fit and how it would help them.")
    parts.append("Include 2-4 specific, actionable next steps for each program.")

    return "\n".join(parts)
