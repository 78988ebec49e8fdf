"""
School agent tests. Covers exclusion of listed schools, catalog linking and
degradation to an empty list on LLM errors or timeouts.
"""

import asyncio
from datetime import date

from conftest import FakeLLM, add_school_to_list, make_full_profile, make_profile, make_school
from recommendations.agents.school_agent import SchoolAgent, build_school_prompt
from recommendations.ai.llm import ModelTier
from recommendations.logic.contracts import RecommendationInput, RecommendationPreferencesInput
from recommendations.logic.snapshot import load_profile_snapshot
from recommendations.logic.stage import get_student_stage

ON_DATE = date(2025, 10, 1)


def _input(db, profile, preferences=None):
    snapshot = load_profile_snapshot(db, profile.id)
    stage = get_student_stage(snapshot.graduation_year, ON_DATE)
    return RecommendationInput(profile=snapshot, stage=stage, preferences=preferences, on_date=ON_DATE)


def _pick(name, tier="target", fit_score=0.7, priority="medium"):
    return {
        "name": name,
        "tier": tier,
        "reasoning": f"{name} has a strong engineering program.",
        "fit_score": fit_score,
        "priority": priority,
        "action_items": ["Visit campus"],
    }


class SlowLLM:
    async def generate_object(self, prompt, schema, tier=None):
        await asyncio.sleep(5)


def test_links_matches_and_keeps_unmatched(db):
    profile = make_full_profile(db)
    stanford = make_school(db, "Stanford University")
    llm = FakeLLM({"SchoolRecommendationSchema": {"recommendations": [
        _pick("Stanford", tier="reach", fit_score=0.9, priority="high"),
        _pick("Harvey Mudd College", tier="target"),
    ]}})

    recs = asyncio.run(SchoolAgent(db, llm=llm).generate(_input(db, profile)))

    assert [r.title for r in recs] == ["Stanford University", "Harvey Mudd College"]
    assert recs[0].school_id == stanford.id
    assert recs[0].subtitle == "Reach School"
    assert recs[0].fit_score == 0.9
    assert recs[0].priority == "high"
    assert recs[1].school_id is None
    assert recs[1].subtitle == "Target School"
    assert all(r.category == "school" for r in recs)
    assert llm.calls[0]["tier"] == ModelTier.ADVISOR


def test_listed_schools_dropped_case_insensitively(db):
    profile = make_full_profile(db)
    add_school_to_list(db, profile, make_school(db, "Duke University"))
    llm = FakeLLM({"SchoolRecommendationSchema": {"recommendations": [
        _pick("DUKE UNIVERSITY"),
        _pick("Rice University"),
    ]}})

    recs = asyncio.run(SchoolAgent(db, llm=llm).generate(_input(db, profile)))

    assert [r.title for r in recs] == ["Rice University"]


def test_listed_school_dropped_when_name_resolves_to_it(db):
    profile = make_full_profile(db)
    add_school_to_list(db, profile, make_school(db, "Duke University"))
    llm = FakeLLM({"SchoolRecommendationSchema": {"recommendations": [_pick("Duke")]}})

    recs = asyncio.run(SchoolAgent(db, llm=llm).generate(_input(db, profile)))

    assert recs == []


def test_repeated_names_collapse(db):
    profile = make_full_profile(db)
    llm = FakeLLM({"SchoolRecommendationSchema": {"recommendations": [
        _pick("Rice University"),
        _pick("rice university "),
    ]}})

    recs = asyncio.run(SchoolAgent(db, llm=llm).generate(_input(db, profile)))

    assert len(recs) == 1


def test_spellings_of_one_catalog_school_collapse(db):
    profile = make_full_profile(db)
    cmu = make_school(db, "Carnegie Mellon University")
    llm = FakeLLM({"SchoolRecommendationSchema": {"recommendations": [
        _pick("Carnegie Mellon", tier="reach"),
        _pick("Carnegie Mellon University", tier="target"),
        _pick("Rice University"),
    ]}})

    recs = asyncio.run(SchoolAgent(db, llm=llm).generate(_input(db, profile)))

    assert [(r.title, r.school_id) for r in recs] == [
        ("Carnegie Mellon University", cmu.id),
        ("Rice University", None),
    ]
    assert recs[0].subtitle == "Reach School"


def test_llm_error_yields_empty_list(db):
    profile = make_full_profile(db)
    llm = FakeLLM({"SchoolRecommendationSchema": ValueError("bad json")})
    agent = SchoolAgent(db, llm=llm)

    assert asyncio.run(agent.generate(_input(db, profile))) == []

    outcome = asyncio.run(agent.run(_input(db, profile)))
    assert outcome.failed
    assert outcome.source == "school_agent"


def test_schema_mismatch_yields_empty_list(db):
    profile = make_full_profile(db)
    llm = FakeLLM({"SchoolRecommendationSchema": {"recommendations": [{"name": "Rice University"}]}})

    outcome = asyncio.run(SchoolAgent(db, llm=llm).run(_input(db, profile)))

    assert outcome.failed
    assert outcome.recommendations == []


def test_timeout_yields_empty_list(db):
    profile = make_full_profile(db)

    outcome = asyncio.run(SchoolAgent(db, llm=SlowLLM(), timeout=0.05).run(_input(db, profile)))

    assert outcome.failed
    assert "timed out" in outcome.error
    assert outcome.recommendations == []


def test_prompt_contents(db):
    profile = make_full_profile(db)
    add_school_to_list(db, profile, make_school(db, "Duke University"))
    preferences = RecommendationPreferencesInput(
        school_preferences="Strong robotics labs",
        preferred_regions=["West Coast"],
        require_need_blind=True,
    )

    prompt = build_school_prompt(_input(db, profile, preferences))

    assert "**High School:** Lincoln High School (CA)" in prompt
    assert "- Class Rank: 12 of 410" in prompt
    assert "- SAT: 1480" in prompt
    assert "- Robotics Team Captain, FRC Team 254 [Leadership, Spike]" in prompt
    assert "- AIME Qualifier (national)" in prompt
    assert "What they're looking for: Strong robotics labs" in prompt
    assert "- Preferred regions: West Coast" in prompt
    assert "- Requires need-blind admission" in prompt
    assert "Do NOT recommend any of them" in prompt
    assert "- Duke University" in prompt
    assert "Critical junior year begins" in prompt


def test_prompt_without_list_or_scores(db):
    profile = make_profile(db)

    prompt = build_school_prompt(_input(db, profile))

    assert "Do NOT recommend" not in prompt
    assert "- No test scores on record yet" in prompt
    assert "Student Preferences" not in prompt
