"""
Recommendation Logic Module

Stage calculation, data contracts and ranking for the recommendation engine.
Storage-facing modules (snapshot, catalog, persistence, engine) are imported
directly from their submodules.
"""

from .contracts import (
    StageInfo,
    StudentProfileSnapshot,
    RecommendationPreferencesInput,
    RecommendationInput,
    GeneratedRecommendation,
    AgentOutcome,
    GenerateRecommendationsResult,
    ProgramCandidate,
)
from .constants import Category, Priority, Season, StudentStage, RecommendationStatus
from .stage import get_student_stage, current_student_stage
from .ranker import prioritize_recommendations

__all__ = [
    # Stage
    "get_student_stage",
    "current_student_stage",

    # Ranking
    "prioritize_recommendations",

    # Contracts
    "StageInfo",
    "StudentProfileSnapshot",
    "RecommendationPreferencesInput",
    "RecommendationInput",
    "GeneratedRecommendation",
    "AgentOutcome",
    "GenerateRecommendationsResult",
    "ProgramCandidate",

    # Enums
    "Category",
    "Priority",
    "Season",
    "StudentStage",
    "RecommendationStatus",
]
