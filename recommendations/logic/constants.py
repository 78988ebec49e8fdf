"""
Recommendation Engine Constants

Defines the enums, ordering tiers, caps and policy tables shared by the
stage calculator, agents, ranker and persistence layer.
"""

from enum import Enum
from typing import Dict, List

# =============================================================================
# ENUMS
# =============================================================================

class Category(str, Enum):
    """Recommendation category. Set by the producing agent, never changed."""
    SCHOOL = "school"
    PROGRAM = "program"
    ACTIVITY = "activity"
    GENERAL = "general"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Season(str, Enum):
    FALL = "fall"
    WINTER = "winter"
    SPRING = "spring"
    SUMMER = "summer"


class StudentStage(str, Enum):
    """Position in the admissions timeline: grade prefix x season."""
    FRESHMAN_FALL = "freshman_fall"
    FRESHMAN_WINTER = "freshman_winter"
    FRESHMAN_SPRING = "freshman_spring"
    FRESHMAN_SUMMER = "freshman_summer"
    SOPHOMORE_FALL = "sophomore_fall"
    SOPHOMORE_WINTER = "sophomore_winter"
    SOPHOMORE_SPRING = "sophomore_spring"
    SOPHOMORE_SUMMER = "sophomore_summer"
    JUNIOR_FALL = "junior_fall"
    JUNIOR_WINTER = "junior_winter"
    JUNIOR_SPRING = "junior_spring"
    JUNIOR_SUMMER = "junior_summer"
    SENIOR_FALL = "senior_fall"
    SENIOR_WINTER = "senior_winter"
    SENIOR_SPRING = "senior_spring"
    POST_GRADUATION = "post_graduation"


class RecommendationStatus(str, Enum):
    ACTIVE = "active"
    DISMISSED = "dismissed"
    SAVED = "saved"
    ACTED_UPON = "acted_upon"


class SchoolTier(str, Enum):
    REACH = "reach"
    TARGET = "target"
    SAFETY = "safety"


# =============================================================================
# GRADES
# =============================================================================

GRADE_GRADUATED = "graduated"
GRADE_PRE_HIGH_SCHOOL = "pre-high-school"
TERMINAL_GRADES = (GRADE_GRADUATED, GRADE_PRE_HIGH_SCHOOL)

# years until graduation -> grade label
YEARS_TO_GRADE: Dict[int, str] = {
    4: "8th",   # rising freshman
    3: "9th",
    2: "10th",
    1: "11th",
    0: "12th",
}

GRADE_PREFIX: Dict[str, str] = {
    "9th": "freshman",
    "10th": "sophomore",
    "11th": "junior",
    "12th": "senior",
}
DEFAULT_GRADE_PREFIX = "freshman"

GRADE_NUMBER: Dict[str, int] = {
    "8th": 8,
    "9th": 9,
    "10th": 10,
    "11th": 11,
    "12th": 12,
}
DEFAULT_GRADE_NUMBER = 11  # assume junior when unknown

# Academic year (and fall) starts on this month/day
ACADEMIC_YEAR_START = (8, 15)

# =============================================================================
# ORDERING TIERS (lower sorts first)
# =============================================================================

PRIORITY_ORDER: Dict[str, int] = {
    Priority.HIGH.value: 0,
    Priority.MEDIUM.value: 1,
    Priority.LOW.value: 2,
}
UNSET_PRIORITY_ORDER = 3

CATEGORY_ORDER: Dict[str, int] = {
    Category.SCHOOL.value: 0,
    Category.PROGRAM.value: 1,
    Category.ACTIVITY.value: 2,
    Category.GENERAL.value: 3,
}

# =============================================================================
# SNAPSHOT / PROMPT CAPS
# =============================================================================

MAX_TOP_ACTIVITIES = 5
MAX_TOP_AWARDS = 5
HIGH_TIER_AWARD_LEVELS: List[str] = ["national", "international", "state"]

MAX_PROGRAM_CANDIDATES = 20
REASONING_EXCERPT_CHARS = 100

# Stages where summer programs are no longer worth recommending
PROGRAM_CUTOFF_STAGES = (StudentStage.SENIOR_WINTER, StudentStage.SENIOR_SPRING)

GENERATED_BY = "recommendation_engine"

# =============================================================================
# STAGE POLICY TABLE
# =============================================================================

ALL_CATEGORIES: List[str] = [c.value for c in Category]

STAGE_DETAILS: Dict[str, dict] = {
    StudentStage.FRESHMAN_FALL.value: {
        "description": "Start of high school - exploration phase",
        "priorities": [
            "Join clubs and activities",
            "Build good study habits",
            "Explore interests",
        ],
        "recommendation_types": ["activity", "general"],
    },
    StudentStage.FRESHMAN_WINTER.value: {
        "description": "First semester wrapping up",
        "priorities": [
            "Finish strong in first semester",
            "Reflect on activities and interests",
            "Consider next semester courses",
        ],
        "recommendation_types": ["activity", "general"],
    },
    StudentStage.FRESHMAN_SPRING.value: {
        "description": "Finding your footing",
        "priorities": [
            "Maintain grades",
            "Deepen activity involvement",
            "Consider summer opportunities",
        ],
        "recommendation_types": ["program", "activity", "general"],
    },
    StudentStage.FRESHMAN_SUMMER.value: {
        "description": "First summer - exploration",
        "priorities": [
            "Summer programs or camps",
            "Volunteer work",
            "Skill development",
        ],
        "recommendation_types": ["program", "activity", "general"],
    },
    StudentStage.SOPHOMORE_FALL.value: {
        "description": "Building momentum",
        "priorities": [
            "Take challenging courses",
            "Develop leadership in activities",
            "Start PSAT prep",
        ],
        "recommendation_types": ["program", "activity", "general"],
    },
    StudentStage.SOPHOMORE_WINTER.value: {
        "description": "Mid-year momentum",
        "priorities": [
            "Maintain strong grades",
            "PSAT preparation",
            "Research summer opportunities",
        ],
        "recommendation_types": ["program", "activity", "general"],
    },
    StudentStage.SOPHOMORE_SPRING.value: {
        "description": "Strengthening profile",
        "priorities": [
            "Plan for junior year courses",
            "Research summer programs",
            "Consider standardized testing timeline",
        ],
        "recommendation_types": ["program", "activity", "general"],
    },
    StudentStage.SOPHOMORE_SUMMER.value: {
        "description": "Key summer for development",
        "priorities": [
            "Competitive summer programs",
            "Research opportunities",
            "Test prep if needed",
        ],
        "recommendation_types": ["program", "activity", "general"],
    },
    StudentStage.JUNIOR_FALL.value: {
        "description": "Critical junior year begins",
        "priorities": [
            "Focus on grades",
            "Take SAT/ACT",
            "Research colleges",
            "Pursue leadership roles",
        ],
        "recommendation_types": ["school", "program", "activity", "general"],
    },
    StudentStage.JUNIOR_WINTER.value: {
        "description": "Junior year in full swing",
        "priorities": [
            "Strong midterm grades",
            "Continue test prep",
            "Start college research",
            "Plan college visits",
        ],
        "recommendation_types": ["school", "program", "activity", "general"],
    },
    StudentStage.JUNIOR_SPRING.value: {
        "description": "Test season and college research",
        "priorities": [
            "Complete standardized testing",
            "Build college list",
            "Plan summer before senior year",
            "Visit colleges if possible",
        ],
        "recommendation_types": ["school", "program", "activity", "general"],
    },
    StudentStage.JUNIOR_SUMMER.value: {
        "description": "Final summer before applications",
        "priorities": [
            "Meaningful summer experience",
            "Start essays",
            "Finalize college list",
            "Research schools in depth",
        ],
        "recommendation_types": ["school", "general"],
    },
    StudentStage.SENIOR_FALL.value: {
        "description": "Application season",
        "priorities": [
            "Submit early applications",
            "Complete regular decision apps",
            "Maintain grades",
            "Request recommendations",
        ],
        "recommendation_types": ["school", "general"],
    },
    StudentStage.SENIOR_WINTER.value: {
        "description": "Application wrap-up",
        "priorities": [
            "Complete remaining applications",
            "Submit financial aid forms",
            "Keep grades up",
            "Wait for decisions",
        ],
        "recommendation_types": ["general"],
    },
    StudentStage.SENIOR_SPRING.value: {
        "description": "Decision time",
        "priorities": [
            "Compare offers",
            "Make final decision",
            "Handle waitlists",
            "Prepare for transition",
        ],
        "recommendation_types": ["general"],
    },
}

# Fallback for stage keys missing from the table
DEFAULT_STAGE_DETAILS: dict = {
    "description": "General guidance",
    "priorities": [],
    "recommendation_types": ALL_CATEGORIES,
}

TERMINAL_STAGE_DESCRIPTION = "Post-graduation or pre-high school"
