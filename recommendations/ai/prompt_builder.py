from typing import List, Optional, Type
import json

from pydantic import BaseModel

from .guidelines import ADVISOR_RULES, SYSTEM_ROLE_DEFINITION, JSON_OUTPUT_FORMAT_INSTRUCTION
from ..logic.contracts import RecommendationPreferencesInput, StageInfo, StudentProfileSnapshot


def build_system_prompt(schema: Type[BaseModel]) -> str:
    """Constructs the system prompt for a structured-output call."""
    rules_str = "\n".join([f"- {rule}" for rule in ADVISOR_RULES])
    schema_str = json.dumps(schema.model_json_schema(), indent=2)

    return f"""{SYSTEM_ROLE_DEFINITION}

RULES (NON-NEGOTIABLE):
{rules_str}

OUTPUT FORMAT:
{JSON_OUTPUT_FORMAT_INSTRUCTION.format(schema=schema_str)}
"""


def bullets(items: List[str]) -> List[str]:
    return [f"- {item}" for item in items]


def identity_lines(profile: StudentProfileSnapshot, include_high_school: bool = False) -> List[str]:
    lines = [
        f"**Name:** {profile.first_name} {profile.last_name or ''}".rstrip(),
        f"**Grade:** {profile.grade or 'Unknown'} (Class of {profile.graduation_year or 'Unknown'})",
    ]
    if include_high_school:
        lines.append(
            f"**High School:** {profile.high_school_name or 'Unknown'} ({profile.high_school_state or 'Unknown'})"
        )
        lines.append(f"**School Type:** {profile.high_school_type or 'Unknown'}")
    return lines


def academics_lines(profile: StudentProfileSnapshot, include_rank: bool = True) -> List[str]:
    lines = ["", "### Academics"]
    if profile.gpa_unweighted:
        lines.append(f"- GPA (Unweighted): {profile.gpa_unweighted:.2f}")
    if profile.gpa_weighted:
        lines.append(f"- GPA (Weighted): {profile.gpa_weighted:.2f}")
    if include_rank and profile.class_rank and profile.class_size:
        lines.append(f"- Class Rank: {profile.class_rank} of {profile.class_size}")
    return lines


def testing_lines(profile: StudentProfileSnapshot) -> List[str]:
    lines = ["", "### Testing"]
    if profile.sat_total:
        lines.append(f"- SAT: {profile.sat_total}")
    if profile.act_composite:
        lines.append(f"- ACT: {profile.act_composite}")
    if not profile.sat_total and not profile.act_composite:
        lines.append("- No test scores on record yet")
    return lines


def activities_lines(profile: StudentProfileSnapshot, heading: str = "Top Activities") -> List[str]:
    if not profile.top_activities:
        return []
    lines = ["", f"### {heading}"]
    for act in profile.top_activities:
        markers = []
        if act.is_leadership:
            markers.append("Leadership")
        if act.is_spike:
            markers.append("Spike")
        suffix = f" [{', '.join(markers)}]" if markers else ""
        org = f", {act.organization}" if act.organization else ""
        lines.append(f"- {act.title}{org}{suffix}")
    return lines


def awards_lines(profile: StudentProfileSnapshot, heading: str = "Notable Awards") -> List[str]:
    if not profile.top_awards:
        return []
    lines = ["", f"### {heading}"]
    lines.extend(f"- {award.title} ({award.level})" for award in profile.top_awards)
    return lines


def interests_lines(profile: StudentProfileSnapshot) -> List[str]:
    if not profile.interests and not profile.aspirations and not profile.values:
        return []
    lines = ["", "### Interests & Goals"]
    if profile.interests:
        lines.append(f"- Interests: {', '.join(profile.interests)}")
    if profile.values:
        lines.append(f"- Values: {', '.join(profile.values)}")
    if profile.aspirations:
        lines.append(f"- Aspirations: {profile.aspirations}")
    return lines


def school_preferences_lines(preferences: Optional[RecommendationPreferencesInput]) -> List[str]:
    if preferences is None:
        return []
    lines = ["", "### Student Preferences"]
    if preferences.school_preferences:
        lines.append(f"What they're looking for: {preferences.school_preferences}")
    if preferences.preferred_regions:
        lines.append(f"- Preferred regions: {', '.join(preferences.preferred_regions)}")
    if preferences.avoid_regions:
        lines.append(f"- Regions to avoid: {', '.join(preferences.avoid_regions)}")
    if preferences.preferred_school_size and preferences.preferred_school_size != "any":
        lines.append(f"- Preferred school size: {preferences.preferred_school_size}")
    if preferences.require_need_blind:
        lines.append("- Requires need-blind admission")
    if preferences.require_merit_scholarships:
        lines.append("- Interested in merit scholarships")
    return lines if len(lines) > 2 else []


def stage_lines(stage: StageInfo) -> List[str]:
    return [
        "",
        "### Current Stage",
        f"The student is in {stage.grade} grade, {stage.season}. {stage.description}",
        f"Current priorities: {', '.join(stage.priorities) or 'None listed'}",
    ]
