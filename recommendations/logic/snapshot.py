"""
Profile Snapshot Loader

Reads a student's academics, testing, activities, awards, interests and
existing school/program lists into a flat StudentProfileSnapshot for the agents.
"""

import base64
import json
import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from .constants import HIGH_TIER_AWARD_LEVELS, MAX_TOP_ACTIVITIES, MAX_TOP_AWARDS
from .contracts import (
    RecommendationPreferencesInput,
    StudentProfileSnapshot,
    TopActivity,
    TopAward,
)
from ..models import (
    AboutMe,
    Academics,
    ACTScore,
    Activity,
    Award,
    RecommendationPreferences,
    SATScore,
    School,
    StudentProfile,
    StudentSchool,
    StudentSummerProgram,
)

logger = logging.getLogger(__name__)


def load_profile_snapshot(db: Session, profile_id: str) -> Optional[StudentProfileSnapshot]:
    """
    Build the snapshot for one engine run.

    Returns None when the profile id does not resolve.
    """
    profile = db.get(StudentProfile, profile_id)
    if profile is None:
        logger.info(f"Profile {profile_id} not found")
        return None

    academics = db.query(Academics).filter(Academics.student_profile_id == profile_id).first()

    sat = (
        db.query(SATScore)
        .filter(SATScore.student_profile_id == profile_id, SATScore.is_primary.is_(True))
        .first()
    )
    act = (
        db.query(ACTScore)
        .filter(ACTScore.student_profile_id == profile_id, ACTScore.is_primary.is_(True))
        .first()
    )

    # Leadership or spike activities only, display order kept
    activities = (
        db.query(Activity)
        .filter(
            Activity.student_profile_id == profile_id,
            or_(Activity.is_leadership.is_(True), Activity.is_spike.is_(True)),
        )
        .order_by(Activity.display_order.asc(), Activity.id.asc())
        .limit(MAX_TOP_ACTIVITIES)
        .all()
    )

    # Local/school awards stay out of prompt context
    awards = (
        db.query(Award)
        .filter(
            Award.student_profile_id == profile_id,
            Award.level.in_(HIGH_TIER_AWARD_LEVELS),
        )
        .order_by(Award.display_order.asc(), Award.id.asc())
        .limit(MAX_TOP_AWARDS)
        .all()
    )

    about_me = db.query(AboutMe).filter(AboutMe.student_profile_id == profile_id).first()

    school_rows = (
        db.query(StudentSchool.school_id, School.name)
        .join(School, StudentSchool.school_id == School.id)
        .filter(StudentSchool.student_profile_id == profile_id)
        .all()
    )

    program_ids = [
        row.summer_program_id
        for row in db.query(StudentSummerProgram.summer_program_id)
        .filter(
            StudentSummerProgram.student_profile_id == profile_id,
            StudentSummerProgram.summer_program_id.isnot(None),
        )
        .all()
    ]

    return StudentProfileSnapshot(
        id=profile.id,
        first_name=profile.first_name,
        last_name=profile.last_name,
        grade=profile.grade,
        graduation_year=profile.graduation_year,
        high_school_name=profile.high_school_name,
        high_school_state=profile.high_school_state,
        high_school_type=profile.high_school_type,
        residency_status=profile.residency_status,

        gpa_unweighted=academics.gpa_unweighted if academics else None,
        gpa_weighted=academics.gpa_weighted if academics else None,
        class_rank=academics.class_rank if academics else None,
        class_size=academics.class_size if academics else None,

        sat_total=sat.total if sat else None,
        act_composite=act.composite if act else None,

        top_activities=[
            TopActivity(
                title=a.title,
                organization=a.organization or "",
                is_leadership=bool(a.is_leadership),
                is_spike=bool(a.is_spike),
            )
            for a in activities
        ],
        top_awards=[TopAward(title=a.title, level=a.level) for a in awards],

        interests=list(about_me.interests or []) if about_me else [],
        values=list(about_me.values or []) if about_me else [],
        aspirations=about_me.aspirations if about_me else None,

        existing_school_ids=[row.school_id for row in school_rows],
        existing_school_names=[row.name for row in school_rows],
        existing_summer_program_ids=program_ids,
    )


def load_preferences(db: Session, profile_id: str) -> Optional[RecommendationPreferencesInput]:
    prefs = (
        db.query(RecommendationPreferences)
        .filter(RecommendationPreferences.student_profile_id == profile_id)
        .first()
    )
    if prefs is None:
        return None

    return RecommendationPreferencesInput(
        school_preferences=prefs.school_preferences,
        program_preferences=prefs.program_preferences,
        general_preferences=prefs.general_preferences,
        preferred_regions=list(prefs.preferred_regions or []),
        avoid_regions=list(prefs.avoid_regions or []),
        preferred_school_size=prefs.preferred_school_size,
        require_need_blind=bool(prefs.require_need_blind),
        require_merit_scholarships=bool(prefs.require_merit_scholarships),
    )


def create_profile_hash(profile: StudentProfileSnapshot) -> str:
    """
    Coarse fingerprint of the profile fields that drive recommendations.
    Counts stand in for the lists themselves.
    """
    hash_data = {
        "grade": profile.grade,
        "gpa": profile.gpa_unweighted,
        "sat": profile.sat_total,
        "act": profile.act_composite,
        "activities": len(profile.top_activities),
        "awards": len(profile.top_awards),
        "interests": len(profile.interests),
    }
    encoded = json.dumps(hash_data, separators=(",", ":"))
    return base64.b64encode(encoded.encode("utf-8")).decode("ascii")
