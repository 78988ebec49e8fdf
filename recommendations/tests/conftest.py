from datetime import date
from typing import Any, Dict, List, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base
from recommendations.models import (
    AboutMe,
    Academics,
    Activity,
    Award,
    SATScore,
    School,
    StudentProfile,
    StudentSchool,
    StudentSummerProgram,
    SummerProgram,
)


# ── Fake LLM ──────────────────────────────────────────────────────────────────

class FakeLLM:
    """
    Scripted stand-in for StructuredLLM.

    responses maps schema class name -> payload dict (validated against the
    schema) or an Exception instance (raised).
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None):
        self.responses = dict(responses or {})
        self.calls: List[dict] = []

    async def generate_object(self, prompt, schema, tier=None):
        self.calls.append({"prompt": prompt, "schema": schema.__name__, "tier": tier})
        response = self.responses.get(schema.__name__)
        if isinstance(response, Exception):
            raise response
        if response is None:
            raise RuntimeError(f"No scripted response for {schema.__name__}")
        return schema.model_validate(response)

    def prompts_for(self, schema_name: str) -> List[str]:
        return [c["prompt"] for c in self.calls if c["schema"] == schema_name]


# ── Database fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def db_override(session_factory):
    """Replacement for db.get_session that commits like the real session scope."""

    def _get_session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return _get_session


# ── Data builders ─────────────────────────────────────────────────────────────

# Aug 15 2025 - Aug 14 2026 academic year: class of 2027 are juniors
JUNIOR_FALL_DATE = date(2025, 10, 1)


def make_profile(db, **overrides) -> StudentProfile:
    fields = {
        "first_name": "Maya",
        "last_name": "Chen",
        "grade": "11th",
        "graduation_year": 2027,
        "high_school_name": "Lincoln High School",
        "high_school_state": "CA",
        "high_school_type": "public",
    }
    fields.update(overrides)
    profile = StudentProfile(**fields)
    db.add(profile)
    db.flush()
    return profile


def make_full_profile(db, **overrides) -> StudentProfile:
    profile = make_profile(db, **overrides)
    db.add_all([
        Academics(student_profile_id=profile.id, gpa_unweighted=3.85, gpa_weighted=4.3, class_rank=12, class_size=410),
        SATScore(student_profile_id=profile.id, total=1480, is_primary=True),
        SATScore(student_profile_id=profile.id, total=1390, is_primary=False),
        Activity(student_profile_id=profile.id, title="Robotics Team Captain", organization="FRC Team 254",
                 is_leadership=True, is_spike=True, display_order=0),
        Activity(student_profile_id=profile.id, title="Math Tutor", organization="Library",
                 is_leadership=False, is_spike=False, display_order=1),
        Award(student_profile_id=profile.id, title="AIME Qualifier", level="national", display_order=0),
        Award(student_profile_id=profile.id, title="Honor Roll", level="school", display_order=1),
        AboutMe(student_profile_id=profile.id, interests=["robotics", "machine learning"],
                values=["curiosity"], aspirations="Build assistive robots"),
    ])
    db.flush()
    return profile


def make_school(db, name: str, **overrides) -> School:
    school = School(name=name, **overrides)
    db.add(school)
    db.flush()
    return school


def make_program(db, name: str, **overrides) -> SummerProgram:
    fields = {
        "organization": "Test Org",
        "program_year": 2026,
        "is_active": True,
        "focus_areas": ["STEM"],
    }
    fields.update(overrides)
    program = SummerProgram(name=name, **fields)
    db.add(program)
    db.flush()
    return program


def add_school_to_list(db, profile: StudentProfile, school: School) -> None:
    db.add(StudentSchool(student_profile_id=profile.id, school_id=school.id))
    db.flush()


def add_program_to_list(db, profile: StudentProfile, program: SummerProgram) -> None:
    db.add(StudentSummerProgram(student_profile_id=profile.id, summer_program_id=program.id))
    db.flush()
