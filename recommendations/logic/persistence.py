"""
Recommendation Persistence & Versioning

Each engine run soft-deletes the profile's active batch and inserts the new
one, stamped with the profile hash it was generated from. Rows are never
edited after insert apart from status transitions.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import case
from sqlalchemy.orm import Session

from .constants import (
    CATEGORY_ORDER,
    GENERATED_BY,
    PRIORITY_ORDER,
    UNSET_PRIORITY_ORDER,
    RecommendationStatus,
)
from .contracts import GeneratedRecommendation, StudentProfileSnapshot
from .snapshot import create_profile_hash
from ..models import Recommendation

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def save_recommendations(
    db: Session,
    profile_id: str,
    recommendations: List[GeneratedRecommendation],
    profile_version: str,
) -> int:
    """
    Replace the profile's active batch.

    1. Mark every active row for the profile as dismissed
    2. Insert the new batch as active, display_order = list position

    Both steps share the caller's session and land in one commit.

    Returns:
        Number of rows inserted
    """
    # Rows added by an earlier call in this session must be visible to the update
    db.flush()

    dismissed = (
        db.query(Recommendation)
        .filter(
            Recommendation.student_profile_id == profile_id,
            Recommendation.status == RecommendationStatus.ACTIVE.value,
        )
        .update(
            {
                Recommendation.status: RecommendationStatus.DISMISSED.value,
                Recommendation.dismissed_at: _now(),
            },
            synchronize_session="evaluate",
        )
    )

    rows = [
        Recommendation(
            student_profile_id=profile_id,
            category=rec.category,
            title=rec.title,
            subtitle=rec.subtitle,
            reasoning=rec.reasoning,
            fit_score=rec.fit_score,
            priority=rec.priority,
            action_items=list(rec.action_items),
            relevant_grade=rec.relevant_grade,
            expires_at=rec.expires_at,
            school_id=rec.school_id,
            summer_program_id=rec.summer_program_id,
            status=RecommendationStatus.ACTIVE.value,
            generated_by=GENERATED_BY,
            profile_version=profile_version,
            display_order=index,
        )
        for index, rec in enumerate(recommendations)
    ]
    db.add_all(rows)
    db.flush()

    logger.info(f"Profile {profile_id}: dismissed {dismissed} previous, saved {len(rows)} new recommendations")
    return len(rows)


def get_recommendations(db: Session, profile_id: str) -> List[Recommendation]:
    """Active recommendations ordered by priority tier, category tier, display order."""
    priority_rank = case(PRIORITY_ORDER, value=Recommendation.priority, else_=UNSET_PRIORITY_ORDER)
    category_rank = case(CATEGORY_ORDER, value=Recommendation.category, else_=len(CATEGORY_ORDER))

    return (
        db.query(Recommendation)
        .filter(
            Recommendation.student_profile_id == profile_id,
            Recommendation.status == RecommendationStatus.ACTIVE.value,
        )
        .order_by(priority_rank, category_rank, Recommendation.display_order.asc())
        .all()
    )


def _update_status(db: Session, recommendation_id: str, **changes) -> Optional[Recommendation]:
    rec = db.get(Recommendation, recommendation_id)
    if rec is None:
        return None
    for field, value in changes.items():
        setattr(rec, field, value)
    db.flush()
    return rec


def dismiss_recommendation(
    db: Session,
    recommendation_id: str,
    feedback: Optional[str] = None,
) -> Optional[Recommendation]:
    return _update_status(
        db,
        recommendation_id,
        status=RecommendationStatus.DISMISSED.value,
        user_feedback=feedback,
        dismissed_at=_now(),
    )


def save_recommendation(db: Session, recommendation_id: str) -> Optional[Recommendation]:
    """Bookmark a suggestion."""
    return _update_status(
        db,
        recommendation_id,
        status=RecommendationStatus.SAVED.value,
        saved_at=_now(),
    )


def mark_recommendation_acted_upon(db: Session, recommendation_id: str) -> Optional[Recommendation]:
    return _update_status(db, recommendation_id, status=RecommendationStatus.ACTED_UPON.value)


# =============================================================================
# CHANGE DETECTION
# =============================================================================

def get_active_profile_version(db: Session, profile_id: str) -> Optional[str]:
    """profile_version of the newest active batch, or None when there is none."""
    row = (
        db.query(Recommendation.profile_version)
        .filter(
            Recommendation.student_profile_id == profile_id,
            Recommendation.status == RecommendationStatus.ACTIVE.value,
        )
        .order_by(Recommendation.generated_at.desc())
        .first()
    )
    return row.profile_version if row else None


def needs_regeneration(db: Session, profile: StudentProfileSnapshot) -> bool:
    """True when there is no active batch or its hash differs from the profile's."""
    active_version = get_active_profile_version(db, profile.id)
    return active_version is None or active_version != create_profile_hash(profile)
