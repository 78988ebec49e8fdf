"""
Stage Calculator

Determines the student's current stage in the college application process
from their graduation year (or a known grade) and a reference date.

Stages decide which recommendation categories are relevant:
- 12th graders past fall get no summer program recommendations
- Freshmen in fall/winter get activity and general guidance only
- Juniors get every category
"""

from datetime import date
from typing import Optional

from .constants import (
    ACADEMIC_YEAR_START,
    DEFAULT_GRADE_NUMBER,
    DEFAULT_GRADE_PREFIX,
    DEFAULT_STAGE_DETAILS,
    GRADE_GRADUATED,
    GRADE_NUMBER,
    GRADE_PREFIX,
    GRADE_PRE_HIGH_SCHOOL,
    STAGE_DETAILS,
    TERMINAL_GRADES,
    TERMINAL_STAGE_DESCRIPTION,
    YEARS_TO_GRADE,
    Category,
    Season,
    StudentStage,
)
from .contracts import StageInfo


def _before_academic_year_start(on_date: date) -> bool:
    start_month, start_day = ACADEMIC_YEAR_START
    return (on_date.month, on_date.day) < (start_month, start_day)


def get_season(on_date: date) -> Season:
    """
    Fixed calendar seasons:
    - Winter: January 1 - February 28/29
    - Spring: March 1 - May 31
    - Summer: June 1 - August 14
    - Fall: August 15 - December 31
    """
    month = on_date.month
    if month <= 2:
        return Season.WINTER
    if month <= 5:
        return Season.SPRING
    if month <= 8 and _before_academic_year_start(on_date):
        return Season.SUMMER
    return Season.FALL


def get_current_academic_year(on_date: date) -> int:
    """Graduation year of the current seniors. Rolls over on August 15."""
    if _before_academic_year_start(on_date):
        return on_date.year
    return on_date.year + 1


def calculate_grade(graduation_year: int, on_date: date) -> str:
    years_until_graduation = graduation_year - get_current_academic_year(on_date)
    if years_until_graduation in YEARS_TO_GRADE:
        return YEARS_TO_GRADE[years_until_graduation]
    if years_until_graduation < 0:
        return GRADE_GRADUATED
    return GRADE_PRE_HIGH_SCHOOL


def get_student_stage(
    graduation_year: Optional[int],
    on_date: date,
    grade: Optional[str] = None,
) -> StageInfo:
    """
    Gets the full stage information for a student.

    Args:
        graduation_year: Student's graduation year. Defaults to the current
            juniors' class when missing.
        on_date: Reference date for season and grade derivation.
        grade: Known grade that overrides the derived one.

    Returns:
        StageInfo for the (grade, season) combination
    """
    effective_grad_year = graduation_year or get_current_academic_year(on_date) + 1
    effective_grade = grade or calculate_grade(effective_grad_year, on_date)
    season = get_season(on_date)

    if effective_grade in TERMINAL_GRADES:
        return StageInfo(
            stage=StudentStage.POST_GRADUATION,
            grade=effective_grade,
            season=season,
            graduation_year=effective_grad_year,
            description=TERMINAL_STAGE_DESCRIPTION,
            priorities=[],
            recommendation_types=[],
        )

    prefix = GRADE_PREFIX.get(effective_grade, DEFAULT_GRADE_PREFIX)
    stage_key = f"{prefix}_{season.value}"
    details = STAGE_DETAILS.get(stage_key, DEFAULT_STAGE_DETAILS)

    return StageInfo(
        stage=stage_key,
        grade=effective_grade,
        season=season,
        graduation_year=effective_grad_year,
        description=details["description"],
        priorities=list(details["priorities"]),
        recommendation_types=list(details["recommendation_types"]),
    )


def current_student_stage(graduation_year: Optional[int], grade: Optional[str] = None) -> StageInfo:
    """Stage as of today. Use at request boundaries only."""
    return get_student_stage(graduation_year, date.today(), grade=grade)


def is_recommendation_type_relevant(category: Category, stage: StageInfo) -> bool:
    return Category(category).value in stage.recommendation_types


def get_recommendation_type_priority(category: Category, stage: StageInfo) -> int:
    """Higher number = higher priority. Earlier in the stage's list wins; 0 when absent."""
    value = Category(category).value
    if value not in stage.recommendation_types:
        return 0
    return len(stage.recommendation_types) - stage.recommendation_types.index(value)


def grade_to_number(grade: Optional[str]) -> int:
    return GRADE_NUMBER.get(grade or "", DEFAULT_GRADE_NUMBER)
