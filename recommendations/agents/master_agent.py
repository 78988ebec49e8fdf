"""
Master Consolidation Agent

Reviews the school and program recommendations already generated and adds
a few general, action-oriented recommendations that complement them.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field

from .base import BaseAgent
from ..ai.guidelines import GENERAL_EXAMPLES
from ..ai.llm import ModelTier
from ..ai import prompt_builder as pb
from ..logic.constants import REASONING_EXCERPT_CHARS, Category, Priority
from ..logic.contracts import AgentOutcome, GeneratedRecommendation, RecommendationInput

logger = logging.getLogger(__name__)


class GeneralPick(BaseModel):
    title: str = Field(description="Short title for the recommendation")
    reasoning: str = Field(description="2-3 sentences explaining the recommendation")
    priority: Priority = Field(description="Urgency of this recommendation")
    action_items: List[str] = Field(default_factory=list, description="Specific next steps")


class MasterRecommendationSchema(BaseModel):
    general_recommendations: List[GeneralPick]
    consolidation_notes: Optional[str] = Field(
        default=None, description="Any observations about the overall recommendations"
    )


class MasterAgent(BaseAgent):
    name = "master_agent"
    model_tier = ModelTier.FAST

    async def run(
        self,
        input: RecommendationInput,
        school_recommendations: List[GeneratedRecommendation],
        program_recommendations: List[GeneratedRecommendation],
    ) -> AgentOutcome:
        return await self._guarded(
            self._consolidate(input, school_recommendations, program_recommendations)
        )

    async def consolidate(
        self,
        input: RecommendationInput,
        school_recommendations: List[GeneratedRecommendation],
        program_recommendations: List[GeneratedRecommendation],
    ) -> List[GeneratedRecommendation]:
        outcome = await self.run(input, school_recommendations, program_recommendations)
        return outcome.recommendations

    async def _consolidate(
        self,
        input: RecommendationInput,
        school_recommendations: List[GeneratedRecommendation],
        program_recommendations: List[GeneratedRecommendation],
    ) -> List[GeneratedRecommendation]:
        logger.info(
            f"[{self.name}] Starting consolidation with {len(school_recommendations)} school "
            f"and {len(program_recommendations)} program recs"
        )

        prompt = build_consolidation_prompt(input, school_recommendations, program_recommendations)
        result = await self.llm.generate_object(prompt, MasterRecommendationSchema, self.model_tier)

        return [
            GeneratedRecommendation(
                category=Category.GENERAL,
                title=pick.title,
                reasoning=pick.reasoning,
                priority=pick.priority,
                action_items=pick.action_items,
                relevant_grade=input.stage.grade,
            )
            for pick in result.general_recommendations
        ]


def _excerpt_lines(recommendations: List[GeneratedRecommendation]) -> List[str]:
    return [
        f"- {rec.title}: {rec.reasoning[:REASONING_EXCERPT_CHARS]}..."
        for rec in recommendations
    ]


def build_consolidation_prompt(
    input: RecommendationInput,
    school_recs: List[GeneratedRecommendation],
    program_recs: List[GeneratedRecommendation],
) -> str:
    profile, stage, preferences = input.profile, input.stage, input.preferences
    parts: List[str] = []

    parts.append("You are a college admissions counselor reviewing recommendations for a student.")
    parts.append("")
    parts.append("## Student Context")
    parts.append(f"**Name:** {profile.first_name}")
    parts.append(f"**Grade:** {profile.grade or stage.grade}")
    parts.append(f"**Stage:** {stage.description}")
    parts.append(f"**Current Priorities:** {', '.join(stage.priorities) or 'None listed'}")
    if profile.interests:
        parts.append(f"**Interests:** {', '.join(profile.interests)}")
    if profile.aspirations:
        parts.append(f"**Aspirations:** {profile.aspirations}")
    if not profile.sat_total and not profile.act_composite:
        parts.append("**Testing:** No SAT/ACT scores on record")
    if not any(a.is_leadership for a in profile.top_activities):
        parts.append("**Leadership:** No leadership roles on record")
    if preferences is not None and preferences.general_preferences:
        parts.append(f"**What They're Looking For:** {preferences.general_preferences}")

    parts.append("")
    parts.append("## Existing Recommendations")

    if school_recs:
        parts.append("")
        parts.append("### School Recommendations")
        parts.extend(_excerpt_lines(school_recs))

    if program_recs:
        parts.append("")
        parts.append("### Program Recommendations")
        parts.extend(_excerpt_lines(program_recs))

    if not school_recs and not program_recs:
        parts.append("No school or program recommendations yet.")

    parts.append("")
    parts.append("## Instructions")
    parts.append("")
    parts.append("Based on the student's profile and the existing recommendations, generate 2-4 GENERAL recommendations.")
    parts.append("These should be actionable advice that complements the school and program recommendations.")
    parts.append("Do not repeat any school or program listed above.")
    parts.append("")
    parts.append("Focus on:")
    parts.append(f"- Actions relevant to a {stage.grade} grade student in {stage.season}")
    parts.append("- Gaps in their profile that could be strengthened")
    parts.append("- Time-sensitive opportunities or deadlines")
    parts.append("- Activities or achievements that would support their goals")
    parts.append("")
    parts.append("Examples of good general recommendations:")
    parts.extend(pb.bullets(GENERAL_EXAMPLES))

    return "\n".join(parts)
