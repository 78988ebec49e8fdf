# Export all recommendation models for easy imports
from .base import Base
from .profile import (
    StudentProfile,
    Academics,
    SATScore,
    ACTScore,
    Activity,
    Award,
    AboutMe,
    StudentSchool,
    StudentSummerProgram,
    RecommendationPreferences,
)
from .catalog import School, SummerProgram
from .recommendation import Recommendation

__all__ = [
    "Base",
    "StudentProfile",
    "Academics",
    "SATScore",
    "ACTScore",
    "Activity",
    "Award",
    "AboutMe",
    "StudentSchool",
    "StudentSummerProgram",
    "RecommendationPreferences",
    "School",
    "SummerProgram",
    "Recommendation",
]
