"""
Ranker

Orders the merged recommendation list so concrete, scored options surface
above general advice.
"""

from typing import List

from .constants import CATEGORY_ORDER, PRIORITY_ORDER, UNSET_PRIORITY_ORDER
from .contracts import GeneratedRecommendation


def _sort_key(rec: GeneratedRecommendation):
    return (
        PRIORITY_ORDER.get(rec.priority, UNSET_PRIORITY_ORDER),
        CATEGORY_ORDER.get(rec.category, len(CATEGORY_ORDER)),
        -(rec.fit_score or 0.0),
    )


def prioritize_recommendations(
    recommendations: List[GeneratedRecommendation]
) -> List[GeneratedRecommendation]:
    """
    Sort by priority (high > medium > low > unset), then category
    (school > program > activity > general), then fit score descending.

    Stable: ties keep their input order. The input list is not modified.

    Args:
        recommendations: Merged output of all agents

    Returns:
        New sorted list
    """
    return sorted(recommendations, key=_sort_key)
