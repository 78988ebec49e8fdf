"""
College admissions recommendation engine.

Staged pipeline: stage calculation -> category agents (in parallel) ->
consolidation -> ranking -> versioned persistence.
"""

from .logic.engine import RecommendationEngine, ProfileNotFoundError, generate_recommendations
from .logic.persistence import (
    get_recommendations,
    dismiss_recommendation,
    save_recommendation,
    mark_recommendation_acted_upon,
)
from .logic.stage import get_student_stage

__all__ = [
    "RecommendationEngine",
    "ProfileNotFoundError",
    "generate_recommendations",
    "get_recommendations",
    "dismiss_recommendation",
    "save_recommendation",
    "mark_recommendation_acted_upon",
    "get_student_stage",
]
