"""
Data Contracts for the Recommendation Engine

Defines Pydantic models passed between the stage calculator, the snapshot
loader, the agents, the ranker and the persistence layer.
"""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field

from .constants import Category, Priority, Season, StudentStage


# =============================================================================
# STAGE
# =============================================================================

class StageInfo(BaseModel):
    """Derived stage of a student. recommendation_types is a function of stage."""
    stage: StudentStage
    grade: str
    season: Season
    graduation_year: int
    description: str
    priorities: List[str] = Field(default_factory=list)
    recommendation_types: List[Category] = Field(default_factory=list)

    class Config:
        use_enum_values = True
        frozen = True


# =============================================================================
# INPUT CONTRACTS
# =============================================================================

class TopActivity(BaseModel):
    title: str
    organization: str = ""
    is_leadership: bool = False
    is_spike: bool = False


class TopAward(BaseModel):
    title: str
    level: str


class StudentProfileSnapshot(BaseModel):
    """
    Flattened, read-only view of a student's profile for one engine run.
    existing_* fields are the "do not recommend again" exclusion sets.
    """
    id: str
    first_name: str
    last_name: Optional[str] = None
    grade: Optional[str] = None
    graduation_year: Optional[int] = None
    high_school_name: Optional[str] = None
    high_school_state: Optional[str] = None
    high_school_type: Optional[str] = None
    residency_status: Optional[str] = None

    # Academics
    gpa_unweighted: Optional[float] = None
    gpa_weighted: Optional[float] = None
    class_rank: Optional[int] = None
    class_size: Optional[int] = None

    # Testing (primary scores only)
    sat_total: Optional[int] = None
    act_composite: Optional[int] = None

    top_activities: List[TopActivity] = Field(default_factory=list)
    top_awards: List[TopAward] = Field(default_factory=list)

    # About me
    interests: List[str] = Field(default_factory=list)
    values: List[str] = Field(default_factory=list)
    aspirations: Optional[str] = None

    # Already on the student's lists
    existing_school_ids: List[str] = Field(default_factory=list)
    existing_school_names: List[str] = Field(default_factory=list)
    existing_summer_program_ids: List[str] = Field(default_factory=list)

    class Config:
        frozen = True


class RecommendationPreferencesInput(BaseModel):
    school_preferences: Optional[str] = None
    program_preferences: Optional[str] = None
    general_preferences: Optional[str] = None
    preferred_regions: List[str] = Field(default_factory=list)
    avoid_regions: List[str] = Field(default_factory=list)
    preferred_school_size: Optional[str] = None
    require_need_blind: bool = False
    require_merit_scholarships: bool = False


class RecommendationInput(BaseModel):
    """Everything an agent needs for one run. on_date is the run's reference date."""
    profile: StudentProfileSnapshot
    stage: StageInfo
    preferences: Optional[RecommendationPreferencesInput] = None
    on_date: date


# =============================================================================
# OUTPUT CONTRACTS
# =============================================================================

class GeneratedRecommendation(BaseModel):
    """
    Unit flowing through the pipeline and the unit persisted.
    school_id / summer_program_id are only set for confident catalog matches.
    """
    category: Category
    title: str
    subtitle: Optional[str] = None
    reasoning: str
    fit_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    priority: Optional[Priority] = None
    action_items: List[str] = Field(default_factory=list)
    relevant_grade: Optional[str] = None
    expires_at: Optional[date] = None

    school_id: Optional[str] = None
    summer_program_id: Optional[str] = None

    class Config:
        use_enum_values = True


class AgentOutcome(BaseModel):
    """
    Tagged agent result. Keeps "the model found nothing" apart from
    "the call failed" even though both flatten to an empty list.
    """
    source: str
    status: str  # ok/failed
    recommendations: List[GeneratedRecommendation] = Field(default_factory=list)
    error: Optional[str] = None
    elapsed_ms: Optional[float] = None

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def ok(cls, source: str, recommendations: List[GeneratedRecommendation], elapsed_ms: Optional[float] = None) -> "AgentOutcome":
        return cls(source=source, status="ok", recommendations=recommendations, elapsed_ms=elapsed_ms)

    @classmethod
    def failure(cls, source: str, error: str, elapsed_ms: Optional[float] = None) -> "AgentOutcome":
        return cls(source=source, status="failed", error=error, elapsed_ms=elapsed_ms)


class GenerateRecommendationsResult(BaseModel):
    recommendations: List[GeneratedRecommendation] = Field(default_factory=list)
    stage: StageInfo
    saved_count: int = 0

    # Sources whose outcome was a failure (empty list substituted)
    failed_sources: List[str] = Field(default_factory=list)


# =============================================================================
# INTERMEDIATE DATA STRUCTURES
# =============================================================================

class ProgramCandidate(BaseModel):
    """Catalog summer program eligible for a student, as shown to the program agent."""
    id: str
    name: str
    organization: str
    category: Optional[str] = None
    focus_areas: List[str] = Field(default_factory=list)
    min_grade: Optional[int] = None
    max_grade: Optional[int] = None
    application_deadline: Optional[date] = None
    llm_context: Optional[str] = None
