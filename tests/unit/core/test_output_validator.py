from __future__ import annotations

import pytest

from painmap.core.output_validator import (
    check_logical_consistency,
    find_hallucinated_regions,
    find_medical_advice,
    mentions_frequency,
    mentions_median_score,
    number_word,
    validate_summary,
)

pytestmark = pytest.mark.unit

VALID_SUMMARY = (
    "During last week, you recorded 7 pain entries for your lower back, with a median "
    "pain level of 8/10."
)


def test_validate_summary_accepts_grounded_text() -> None:
    verdict = validate_summary(
        summary=VALID_SUMMARY,
        region="Lower Back",
        frequency=7,
        median_score=8,
    )

    assert verdict.is_valid is True
    assert verdict.errors == ()
    assert verdict.warnings == ()


def test_validate_summary_flags_hallucinated_region() -> None:
    verdict = validate_summary(
        summary="You logged 4 entries for your neck and back, median score 5/10.",
        region="Neck",
        frequency=4,
        median_score=5,
    )

    assert verdict.is_valid is False
    assert verdict.errors == ('Hallucinated region(s) detected: "back" (expected only "Neck")',)


def test_find_hallucinated_regions_allows_related_region_names() -> None:
    assert find_hallucinated_regions("Your back felt tense.", "Lower Back") == []
    assert find_hallucinated_regions("Your upper back felt tense.", "Lower Back") == [
        "upper back"
    ]


@pytest.mark.parametrize(
    ("summary", "region"),
    [
        ("You logged 4 entries for your neck, median 5/10; your backs hurt.", "back"),
        ("You logged 4 entries for your neck, median 5/10, plus a backache.", "back"),
        ("You logged 4 entries for your neck, median 5/10, and some headaches.", "head"),
    ],
)
def test_validate_summary_flags_plural_and_compound_regions(summary: str, region: str) -> None:
    verdict = validate_summary(summary=summary, region="Neck", frequency=4, median_score=5)

    assert verdict.is_valid is False
    assert region in find_hallucinated_regions(summary, "Neck")
    assert verdict.errors[0].startswith("Hallucinated region(s) detected:")


def test_find_hallucinated_regions_accepts_summary_without_any_region() -> None:
    assert find_hallucinated_regions("Seven entries were logged.", "Left Ankle") == []


def test_validate_summary_reports_missing_frequency_and_score() -> None:
    verdict = validate_summary(
        summary="Your neck was logged several times this week with moderate pain.",
        region="Neck",
        frequency=4,
        median_score=6.5,
    )

    assert "Missing frequency data: Expected mention of 4 entries/occurrences" in verdict.errors
    assert "Missing median score data: Expected mention of score 6.5/10" in verdict.errors


def test_mentions_frequency_accepts_digits_and_number_words() -> None:
    assert mentions_frequency("You logged three entries.", 3) is True
    assert mentions_frequency("Logged 12 times.", 12) is True
    assert mentions_frequency("Logged twelve times.", 12) is False


def test_mentions_median_score_accepts_exact_rounded_and_words() -> None:
    assert mentions_median_score("Median 6.5 out of 10.", 6.5) is True
    assert mentions_median_score("Around 7/10 on average.", 6.5) is True
    assert mentions_median_score("Around seven on average.", 6.5) is True
    assert mentions_median_score("Around two on average.", 6.5) is False


def test_number_word_covers_zero_to_ten() -> None:
    assert number_word(0) == "zero"
    assert number_word(10) == "ten"
    assert number_word(11) is None
    assert number_word(-1) is None


def test_check_logical_consistency_warns_on_mismatched_descriptors() -> None:
    warnings = check_logical_consistency(
        "Pain was rare and mild, 8 entries at 8/10.",
        frequency=8,
        median_score=8,
    )

    assert warnings == [
        'Inconsistent frequency: frequency is 8 (high) but summary uses "low" descriptor "rare"',
        'Inconsistent severity: median score is 8/10 (severe) but summary uses "mild" '
        'descriptor "mild"',
    ]


def test_check_logical_consistency_ignores_moderate_bands() -> None:
    assert check_logical_consistency("Frequent and severe pain.", frequency=5, median_score=5) == []


def test_check_logical_consistency_low_values_with_high_descriptors() -> None:
    warnings = check_logical_consistency(
        "Frequent, intense episodes.",
        frequency=2,
        median_score=2,
    )

    assert len(warnings) == 2
    assert '"high" descriptor "frequent"' in warnings[0]
    assert '"severe" descriptor "intense"' in warnings[1]


def test_check_logical_consistency_flags_severe_for_low_median() -> None:
    warnings = check_logical_consistency("Pain was severe.", frequency=4, median_score=3)

    assert warnings == [
        'Inconsistent severity: median score is 3/10 (mild) but summary uses "severe" '
        'descriptor "severe"'
    ]


def test_check_logical_consistency_ignores_descriptors_inside_longer_words() -> None:
    assert (
        check_logical_consistency(
            "They persevered; rarely a fewfold rise",
            frequency=8,
            median_score=2,
        )
        == []
    )


def test_warnings_do_not_block_acceptance() -> None:
    verdict = validate_summary(
        summary=VALID_SUMMARY + " You should see a doctor about this; you may have a strain.",
        region="Lower Back",
        frequency=7,
        median_score=8,
    )

    assert verdict.is_valid is True
    assert verdict.warnings == (
        'Possible medical advice detected: "should see a doctor", "you may have"',
    )


def test_find_medical_advice_is_case_insensitive() -> None:
    assert find_medical_advice("Please CONSULT A PHYSICIAN.") == ["consult a physician"]


def test_validate_summary_length_bounds() -> None:
    short = validate_summary(summary="7 at 8/10", region="Neck", frequency=7, median_score=8)
    verbose = validate_summary(
        summary=VALID_SUMMARY + " Data" * 200,
        region="Lower Back",
        frequency=7,
        median_score=8,
    )

    assert short.is_valid is False
    assert (
        "Summary too short (less than 20 characters); too short to be meaningful" in short.errors
    )
    assert verbose.is_valid is True
    assert verbose.warnings == ("Summary might be too verbose (over 1000 characters)",)


def test_validate_summary_runs_every_check() -> None:
    verdict = validate_summary(summary="Knee pain.", region="Neck", frequency=3, median_score=4)

    assert len(verdict.errors) == 4
