"""
Catalog Queries

Reads catalog schools and summer programs for the agents:
- eligible programs for a grade and program year (program agent)
- best-effort school lookup from a free-text name (school agent)
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from .constants import MAX_PROGRAM_CANDIDATES
from .contracts import ProgramCandidate
from ..models import School, SummerProgram

logger = logging.getLogger(__name__)

_UNIVERSITY_OF = "university of "
_UNIVERSITY = " university"


def find_eligible_programs(
    db: Session,
    grade_number: int,
    target_year: int,
    exclude_ids: Iterable[str] = (),
    limit: int = MAX_PROGRAM_CANDIDATES,
) -> List[ProgramCandidate]:
    """
    Active programs for target_year whose inclusive grade window contains
    grade_number (NULL bounds are open), minus exclude_ids.

    Ordered by application deadline (earliest first, undated last), then name.
    """
    query = db.query(SummerProgram).filter(
        SummerProgram.is_active.is_(True),
        SummerProgram.program_year == target_year,
        or_(SummerProgram.min_grade.is_(None), SummerProgram.min_grade <= grade_number),
        or_(SummerProgram.max_grade.is_(None), SummerProgram.max_grade >= grade_number),
    )

    excluded = [pid for pid in exclude_ids if pid]
    if excluded:
        query = query.filter(SummerProgram.id.notin_(excluded))

    programs = (
        query.order_by(
            SummerProgram.application_deadline.is_(None),
            SummerProgram.application_deadline.asc(),
            SummerProgram.name.asc(),
        )
        .limit(limit)
        .all()
    )

    return [
        ProgramCandidate(
            id=p.id,
            name=p.name,
            organization=p.organization,
            category=p.category,
            focus_areas=list(p.focus_areas or []),
            min_grade=p.min_grade,
            max_grade=p.max_grade,
            application_deadline=p.application_deadline,
            llm_context=p.llm_context,
        )
        for p in programs
    ]


def school_name_variants(name: str) -> List[str]:
    """
    Spellings to try for a model-supplied college name, most literal first.

    "Stanford" -> ["Stanford", "University of Stanford", "Stanford University"]
    "University of Michigan" -> ["University of Michigan", "Michigan"]
    "Duke University" -> ["Duke University", "Duke"]
    """
    base = " ".join(name.split())
    if not base:
        return []

    lowered = base.lower()
    variants = [base]

    if lowered.startswith(_UNIVERSITY_OF):
        variants.append(base[len(_UNIVERSITY_OF):])
    elif not lowered.endswith(_UNIVERSITY):
        variants.append(f"University of {base}")

    if lowered.endswith(_UNIVERSITY):
        variants.append(base[: -len(_UNIVERSITY)])
    elif not lowered.startswith(_UNIVERSITY_OF):
        variants.append(f"{base} University")

    unique = []
    seen = set()
    for variant in variants:
        key = variant.lower().strip()
        if key and key not in seen:
            seen.add(key)
            unique.append(variant.strip())
    return unique


def match_school_by_name(db: Session, name: str) -> Optional[School]:
    """
    Resolve a free-text college name to a catalog row.

    For each variant: exact (case-insensitive), then prefix, then substring.
    Among several hits the shortest catalog name wins. Returns None when
    nothing matches.
    """
    lowered_name = func.lower(School.name)

    for variant in school_name_variants(name):
        needle = variant.lower()
        for criterion in (
            lowered_name == needle,
            lowered_name.startswith(needle, autoescape=True),
            lowered_name.contains(needle, autoescape=True),
        ):
            school = (
                db.query(School)
                .filter(criterion)
                .order_by(func.length(School.name).asc(), School.name.asc())
                .first()
            )
            if school is not None:
                return school

    logger.debug(f"No catalog school matched '{name}'")
    return None
