"""
School Agent

Generates college recommendations from the model's own knowledge of
colleges, then links each name to the school catalog where possible.
Unmatched names are kept as free-text recommendations.
"""

import logging
from typing import List, Optional

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from .base import CategoryAgent
from ..ai.guidelines import HOLISTIC_RUBRIC, SCHOOL_MIX_GUIDE
from ..ai.llm import ModelTier, StructuredLLM
from ..ai import prompt_builder as pb
from ..logic.catalog import match_school_by_name
from ..logic.constants import Category, Priority, SchoolTier
from ..logic.contracts import GeneratedRecommendation, RecommendationInput

logger = logging.getLogger(__name__)


class SchoolPick(BaseModel):
    name: str = Field(description="Full official name of the college")
    tier: SchoolTier = Field(description="Classification based on the student's profile")
    reasoning: str = Field(description="2-3 sentences explaining why this school is a good fit")
    fit_score: float = Field(ge=0.0, le=1.0, description="How well this school matches the student (0-1)")
    priority: Priority = Field(description="How important this recommendation is")
    action_items: List[str] = Field(default_factory=list, description="Specific next steps for this school")


class SchoolRecommendationSchema(BaseModel):
    recommendations: List[SchoolPick]
    summary: Optional[str] = Field(default=None, description="Brief overview of the school recommendations")


class SchoolAgent(CategoryAgent):
    name = "school_agent"
    category = Category.SCHOOL
    model_tier = ModelTier.ADVISOR

    def __init__(self, db: Session, llm: Optional[StructuredLLM] = None, timeout: Optional[float] = None):
        super().__init__(llm=llm, timeout=timeout)
        self.db = db

    async def _generate(self, input: RecommendationInput) -> List[GeneratedRecommendation]:
        profile = input.profile
        logger.info(f"[{self.name}] Starting school recommendations for {profile.first_name}")

        prompt = build_school_prompt(input)
        result = await self.llm.generate_object(prompt, SchoolRecommendationSchema, self.model_tier)
        return self._to_recommendations(result, input)

    def _to_recommendations(
        self,
        result: SchoolRecommendationSchema,
        input: RecommendationInput,
    ) -> List[GeneratedRecommendation]:
        profile = input.profile
        existing_names = {name.strip().lower() for name in profile.existing_school_names}
        existing_ids = set(profile.existing_school_ids)
        seen_names = set()
        seen_titles = set()
        seen_ids = set()
        recommendations = []

        for pick in result.recommendations:
            key = pick.name.strip().lower()
            if not key or key in existing_names or key in seen_names:
                logger.debug(f"[{self.name}] Dropping '{pick.name}' (already listed or repeated)")
                continue
            seen_names.add(key)

            school = match_school_by_name(self.db, pick.name)
            title = school.name if school is not None else pick.name.strip()
            if title.lower() in existing_names or (school is not None and school.id in existing_ids):
                logger.debug(f"[{self.name}] Dropping '{pick.name}' (matches listed school {title})")
                continue
            # Different spellings can resolve to the same catalog row
            if title.lower() in seen_titles or (school is not None and school.id in seen_ids):
                logger.debug(f"[{self.name}] Dropping '{pick.name}' (duplicate of {title})")
                continue
            seen_titles.add(title.lower())
            if school is not None:
                seen_ids.add(school.id)

            tier = SchoolTier(pick.tier).value
            recommendations.append(
                GeneratedRecommendation(
                    category=Category.SCHOOL,
                    title=title,
                    subtitle=f"{tier.capitalize()} School",
                    reasoning=pick.reasoning,
                    fit_score=pick.fit_score,
                    priority=pick.priority,
                    action_items=pick.action_items,
                    relevant_grade=input.stage.grade,
                    school_id=school.id if school is not None else None,
                )
            )

        matched = sum(1 for r in recommendations if r.school_id)
        logger.info(f"[{self.name}] Linked {matched}/{len(recommendations)} schools to the catalog")
        return recommendations


def build_school_prompt(input: RecommendationInput) -> str:
    profile, stage, preferences = input.profile, input.stage, input.preferences
    parts: List[str] = []

    parts.append("You are a college admissions expert helping a high school student build their college list.")
    parts.append("")
    parts.append("## Student Profile")
    parts.append("")
    parts.extend(pb.identity_lines(profile, include_high_school=True))
    parts.extend(pb.academics_lines(profile))
    parts.extend(pb.testing_lines(profile))
    parts.extend(pb.activities_lines(profile))
    parts.extend(pb.awards_lines(profile))
    parts.extend(pb.interests_lines(profile))
    parts.extend(pb.school_preferences_lines(preferences))
    parts.extend(pb.stage_lines(stage))

    parts.append("")
    parts.append("## Instructions")
    parts.append("")
    parts.append("Based on this profile, recommend 5-8 colleges. Include a mix of:")
    parts.extend(pb.bullets(SCHOOL_MIX_GUIDE))
    parts.append("")
    parts.append("Assess each college holistically, considering:")
    parts.extend(pb.bullets(HOLISTIC_RUBRIC))
    parts.append("")

    if profile.existing_school_names:
        parts.append("The student already has these schools on their list. Do NOT recommend any of them:")
        parts.extend(pb.bullets(profile.existing_school_names))
        parts.append("")

    parts.append("Use each college's full official name so it can be matched to our records.")
    parts.append("For each school, explain why it's a good fit considering their academics, interests, and preferences.")
    parts.append("Use your knowledge of these colleges to assess fit - you don't need to list specific statistics.")

    return "\n".join(parts)
