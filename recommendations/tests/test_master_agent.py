"""
Master consolidation agent tests.
"""

import asyncio
from datetime import date

from conftest import FakeLLM, make_full_profile, make_profile
from recommendations.agents.master_agent import MasterAgent, build_consolidation_prompt
from recommendations.logic.contracts import (
    GeneratedRecommendation,
    RecommendationInput,
    RecommendationPreferencesInput,
)
from recommendations.logic.snapshot import load_profile_snapshot
from recommendations.logic.stage import get_student_stage

ON_DATE = date(2025, 10, 1)

GENERAL_PAYLOAD = {
    "general_recommendations": [
        {
            "title": "Schedule the October SAT",
            "reasoning": "A second sitting could lift the score into range for reach schools.",
            "priority": "high",
            "action_items": ["Register by the deadline"],
        },
        {
            "title": "Start a college essay brainstorm",
            "reasoning": "Early drafts make senior fall far less stressful.",
            "priority": "low",
        },
    ],
    "consolidation_notes": "List is reach-heavy.",
}


def _input(db, profile, preferences=None):
    snapshot = load_profile_snapshot(db, profile.id)
    stage = get_student_stage(snapshot.graduation_year, ON_DATE)
    return RecommendationInput(profile=snapshot, stage=stage, preferences=preferences, on_date=ON_DATE)


def _rec(category, title, reasoning):
    return GeneratedRecommendation(category=category, title=title, reasoning=reasoning, priority="medium")


def test_outputs_are_general(db):
    profile = make_full_profile(db)
    llm = FakeLLM({"MasterRecommendationSchema": GENERAL_PAYLOAD})

    recs = asyncio.run(MasterAgent(llm=llm).consolidate(_input(db, profile), [], []))

    assert [r.title for r in recs] == ["Schedule the October SAT", "Start a college essay brainstorm"]
    assert all(r.category == "general" for r in recs)
    assert recs[0].priority == "high"
    assert recs[1].action_items == []
    assert recs[0].relevant_grade == "11th"


def test_prompt_truncates_reasoning_excerpts(db):
    profile = make_full_profile(db)
    long_reasoning = "x" * 150
    school = _rec("school", "Stanford University", long_reasoning)
    program = _rec("program", "Research Science Institute", "Short reason.")

    prompt = build_consolidation_prompt(_input(db, profile), [school], [program])

    assert f"- Stanford University: {'x' * 100}..." in prompt
    assert "x" * 101 not in prompt
    assert "### School Recommendations" in prompt
    assert "- Research Science Institute: Short reason...." in prompt
    assert "No school or program recommendations yet." not in prompt


def test_prompt_with_nothing_upstream(db):
    profile = make_profile(db)
    preferences = RecommendationPreferencesInput(general_preferences="Wants to study abroad")

    prompt = build_consolidation_prompt(_input(db, profile, preferences), [], [])

    assert "No school or program recommendations yet." in prompt
    assert "### School Recommendations" not in prompt
    assert "**Testing:** No SAT/ACT scores on record" in prompt
    assert "**Leadership:** No leadership roles on record" in prompt
    assert "**What They're Looking For:** Wants to study abroad" in prompt


def test_failure_yields_empty_list(db):
    profile = make_full_profile(db)
    llm = FakeLLM({"MasterRecommendationSchema": RuntimeError("upstream 500")})
    school = _rec("school", "Rice University", "Good fit.")

    outcome = asyncio.run(MasterAgent(llm=llm).run(_input(db, profile), [school], []))

    assert outcome.failed
    assert outcome.source == "master_agent"
    assert outcome.recommendations == []
