from __future__ import annotations

from datetime import UTC, datetime

import pytest

from painmap.core.stats_engine import DateRange
from painmap.processing.summary_prompts import (
    AUDIENCE_CONTEXT,
    SAFETY_CLAUSE,
    SUMMARY_REQUIREMENTS,
    TONE_GUIDANCE,
    SummaryAudience,
    SummaryTone,
    build_summary_prompt,
    format_prompt_date,
    summary_requirements,
)

pytestmark = pytest.mark.unit

ALL_COMBINATIONS = [(tone, audience) for tone in SummaryTone for audience in SummaryAudience]


def test_requirements_table_covers_every_tone_and_audience() -> None:
    assert len(SUMMARY_REQUIREMENTS) == 25
    assert set(SUMMARY_REQUIREMENTS) == set(ALL_COMBINATIONS)
    assert set(TONE_GUIDANCE) == set(SummaryTone)
    assert set(AUDIENCE_CONTEXT) == set(SummaryAudience)
    for block in SUMMARY_REQUIREMENTS.values():
        assert block.startswith("Requirements:\n- ")


@pytest.mark.parametrize(("tone", "audience"), ALL_COMBINATIONS)
def test_build_summary_prompt_renders_each_combination(
    tone: SummaryTone,
    audience: SummaryAudience,
) -> None:
    prompt = build_summary_prompt(
        period="Last Week",
        region="Lower Back",
        frequency=7,
        median_score=6.5,
        tone=tone,
        audience=audience,
    )

    assert f"Generate a {tone} summary about pain tracking data for a {audience}." in prompt
    assert TONE_GUIDANCE[tone] in prompt
    assert AUDIENCE_CONTEXT[audience] in prompt
    assert summary_requirements(tone, audience) in prompt
    assert SAFETY_CLAUSE in prompt
    assert "- Number of pain entries: 7" in prompt
    assert "- Median pain score: 6.5/10" in prompt
    assert prompt.endswith("Generate your summary now:")


def test_safety_clause_forbids_directives() -> None:
    assert "Directives telling the reader what they should do" in SAFETY_CLAUSE
    assert "Medical diagnoses or assessments" in SAFETY_CLAUSE


def test_build_summary_prompt_is_deterministic() -> None:
    kwargs = {
        "period": "Last Month",
        "region": "Neck",
        "frequency": 3,
        "median_score": 4.0,
        "tone": SummaryTone.FACTUAL,
        "audience": SummaryAudience.RESEARCH,
    }

    assert build_summary_prompt(**kwargs) == build_summary_prompt(**kwargs)


def test_build_summary_prompt_formats_integral_score_without_decimal() -> None:
    prompt = build_summary_prompt(
        period="Last Week",
        region="Neck",
        frequency=2,
        median_score=7.0,
    )

    assert "- Median pain score: 7/10" in prompt
    assert "7.0" not in prompt


def test_build_summary_prompt_includes_date_range_instruction() -> None:
    date_range = DateRange(
        start=datetime(2024, 1, 5, 8, tzinfo=UTC),
        end=datetime(2024, 1, 12, 20, tzinfo=UTC),
    )

    prompt = build_summary_prompt(
        period="Last Week",
        region="Neck",
        frequency=2,
        median_score=3.5,
        date_range=date_range,
    )

    assert "- Specific Date Range: Jan 5, 2024 to Jan 12, 2024" in prompt
    assert (
        "Include both the relative time period (Last Week) and the specific dates "
        "(Jan 5, 2024 to Jan 12, 2024) in your summary."
    ) in prompt


def test_build_summary_prompt_zero_entries_uses_no_data_branch() -> None:
    prompt = build_summary_prompt(
        period="Last Week",
        region="Right Knee",
        frequency=0,
        median_score=0,
        tone=SummaryTone.ENCOURAGING,
        audience=SummaryAudience.FAMILY,
    )

    assert "CRITICAL: The number of entries is ZERO (0)" in prompt
    assert "pain-free" in prompt
    assert "That's wonderful" in prompt
    assert "You haven't logged any data yet for Right Knee" in prompt
    assert "Median pain score" not in prompt
    assert SAFETY_CLAUSE in prompt
    assert summary_requirements(SummaryTone.ENCOURAGING, SummaryAudience.FAMILY) in prompt
    assert prompt.endswith("no data has been logged yet for this region:")


def test_format_prompt_date_is_locale_independent() -> None:
    assert format_prompt_date(datetime(2024, 12, 31, tzinfo=UTC)) == "Dec 31, 2024"
    assert format_prompt_date(datetime(2023, 5, 1, tzinfo=UTC)) == "May 1, 2023"
