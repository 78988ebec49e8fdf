"""
Recommendation API Routes

Exposes the recommendation engine via REST API.
"""

from typing import Optional, Dict, Any
from fastapi import APIRouter, Depends, HTTPException, Body
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from db import get_session
from .logic.engine import RecommendationEngine, ProfileNotFoundError
from .logic.persistence import (
    get_recommendations,
    dismiss_recommendation,
    save_recommendation,
    mark_recommendation_acted_upon,
)
from .logic.contracts import StageInfo
from .logic.stage import current_student_stage
from .models import Recommendation, StudentProfile


router = APIRouter(prefix="/recommendations", tags=["recommendations"])


# =============================================================================
# REQUEST/RESPONSE SCHEMAS
# =============================================================================

class DismissRequest(BaseModel):
    """Optional feedback when dismissing a recommendation."""
    feedback: Optional[str] = Field(
        default=None,
        max_length=2000,
        description="Why the student dismissed this suggestion"
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/health", summary="Recommendation engine health check")
def health_check():
    """Check if recommendation engine is operational."""
    return {"status": "ok", "engine": "recommendation", "version": "1.0.0"}


@router.post("/{profile_id}/generate", summary="Generate a fresh recommendation batch")
async def generate(profile_id: str, db: Session = Depends(get_session)):
    """
    Run the full pipeline for a profile and return the saved active batch.

    **Response:**
    - `recommendations`: Active rows, highest priority first
    - `stage`: The stage the batch was generated for
    - `saved_count`: Rows written
    - `failed_sources`: Agents that failed and contributed nothing
    """
    # Session queries run on the event loop thread; the awaited LLM calls are
    # the only suspension points. Agents share this one session, so it must
    # not be handed to worker threads.
    engine = RecommendationEngine(db)
    try:
        result = await engine.generate(profile_id)
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")

    saved = get_recommendations(db, profile_id)
    return {
        "success": True,
        "recommendations": [_serialize_recommendation(r) for r in saved],
        "stage": result.stage.model_dump(),
        "saved_count": result.saved_count,
        "failed_sources": result.failed_sources,
    }


@router.get("/{profile_id}", summary="Get active recommendations")
def list_recommendations(profile_id: str, db: Session = Depends(get_session)):
    profile = _get_profile_or_404(db, profile_id)
    recommendations = get_recommendations(db, profile_id)
    stage = _current_stage(profile)

    last_generated = max((r.generated_at for r in recommendations if r.generated_at), default=None)
    return {
        "recommendations": [_serialize_recommendation(r) for r in recommendations],
        "stage": stage.model_dump(),
        "last_generated": last_generated.isoformat() if last_generated else None,
    }


@router.get("/{profile_id}/stage", summary="Get the student's current stage")
def get_stage(profile_id: str, db: Session = Depends(get_session)):
    profile = _get_profile_or_404(db, profile_id)
    return _current_stage(profile).model_dump()


@router.post("/items/{recommendation_id}/dismiss", summary="Dismiss a recommendation")
def dismiss(
    recommendation_id: str,
    payload: Optional[DismissRequest] = Body(default=None),
    db: Session = Depends(get_session),
):
    feedback = payload.feedback if payload else None
    rec = dismiss_recommendation(db, recommendation_id, feedback=feedback)
    return _serialize_or_404(rec)


@router.post("/items/{recommendation_id}/save", summary="Bookmark a recommendation")
def save(recommendation_id: str, db: Session = Depends(get_session)):
    return _serialize_or_404(save_recommendation(db, recommendation_id))


@router.post("/items/{recommendation_id}/acted-upon", summary="Mark a recommendation as acted upon")
def acted_upon(recommendation_id: str, db: Session = Depends(get_session)):
    return _serialize_or_404(mark_recommendation_acted_upon(db, recommendation_id))


# =============================================================================
# HELPERS
# =============================================================================

def _get_profile_or_404(db: Session, profile_id: str) -> StudentProfile:
    profile = db.get(StudentProfile, profile_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


def _current_stage(profile: StudentProfile) -> StageInfo:
    # Stored grade only stands in when graduation year is unknown
    grade = profile.grade if profile.graduation_year is None else None
    return current_student_stage(profile.graduation_year, grade=grade)


def _serialize_or_404(rec: Optional[Recommendation]) -> Dict[str, Any]:
    if rec is None:
        raise HTTPException(status_code=404, detail="Recommendation not found")
    return _serialize_recommendation(rec)


def _serialize_recommendation(rec: Recommendation) -> Dict[str, Any]:
    """Convert a Recommendation row to a JSON-serializable dict."""
    return {
        "id": rec.id,
        "category": rec.category,
        "title": rec.title,
        "subtitle": rec.subtitle,
        "reasoning": rec.reasoning,
        "fit_score": round(rec.fit_score, 3) if rec.fit_score is not None else None,
        "priority": rec.priority,
        "action_items": rec.action_items or [],
        "relevant_grade": rec.relevant_grade,
        "expires_at": rec.expires_at.isoformat() if rec.expires_at else None,
        "school_id": rec.school_id,
        "summer_program_id": rec.summer_program_id,
        "status": rec.status,
        "user_feedback": rec.user_feedback,
        "profile_version": rec.profile_version,
        "display_order": rec.display_order,
        "generated_at": rec.generated_at.isoformat() if rec.generated_at else None,
        "dismissed_at": rec.dismissed_at.isoformat() if rec.dismissed_at else None,
        "saved_at": rec.saved_at.isoformat() if rec.saved_at else None,
    }
