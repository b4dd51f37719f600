"""
Deterministic checks of generated summaries against the input statistics.

Errors block acceptance of a candidate; warnings are reported alongside an
accepted summary and never change control flow.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from painmap.core.stats_engine import format_score, round_half_up

DEFAULT_MIN_SUMMARY_LENGTH = 20
DEFAULT_MAX_SUMMARY_LENGTH = 1000

BODY_REGIONS: Final[tuple[str, ...]] = (
    "lower back",
    "upper back",
    "back",
    "neck",
    "shoulder",
    "shoulders",
    "arm",
    "arms",
    "elbow",
    "elbows",
    "wrist",
    "wrists",
    "hand",
    "hands",
    "hip",
    "hips",
    "knee",
    "knees",
    "ankle",
    "ankles",
    "foot",
    "feet",
    "leg",
    "legs",
    "chest",
    "abdomen",
    "head",
    "jaw",
    "face",
)

NUMBER_WORDS: Final[tuple[str, ...]] = (
    "zero",
    "one",
    "two",
    "three",
    "four",
    "five",
    "six",
    "seven",
    "eight",
    "nine",
    "ten",
)

MEDICAL_ADVICE_PHRASES: Final[tuple[str, ...]] = (
    "should see a doctor",
    "consult a physician",
    "seek medical attention",
    "recommend treatment",
    "diagnosis",
    "prescribe",
    "medication",
    "you should take",
    "try this treatment",
    "this indicates",
    "this suggests you have",
    "you may have",
    "likely suffering from",
    "probably have",
    "could be a sign of",
)


def _word_patterns(*words: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE) for word in words)


# Moderate bands never produce a warning; they are listed for completeness.
FREQUENCY_DESCRIPTORS: Final[dict[str, tuple[re.Pattern[str], ...]]] = {
    "low": _word_patterns("low", "rare", "infrequent", "occasional", "few", "minimal"),
    "moderate": _word_patterns("moderate", "several", "some", "regular"),
    "high": _word_patterns("high", "frequent", "often", "many", "numerous", "considerable"),
}
SEVERITY_DESCRIPTORS: Final[dict[str, tuple[re.Pattern[str], ...]]] = {
    "low": _word_patterns("mild", "slight", "minimal", "minor"),
    "moderate": _word_patterns("moderate", "noticeable", "significant"),
    "high": _word_patterns("severe", "intense", "extreme", "major", "substantial"),
}


@dataclass(frozen=True, slots=True)
class ValidationVerdict:
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


def number_word(value: int) -> str | None:
    if 0 <= value < len(NUMBER_WORDS):
        return NUMBER_WORDS[value]
    return None


def find_hallucinated_regions(summary: str, expected_region: str) -> list[str]:
    """
    Catalogue regions mentioned in ``summary`` that are unrelated to the expected one.

    A catalogue region that contains, or is contained in, the expected region
    ("back" for "Lower Back") is compatible. Omitting the expected region is
    accepted, since summaries may refer to it indirectly. Matching is by
    substring, so plurals and compounds ("backs", "headache") also count.
    """
    summary_lower = summary.lower()
    expected_lower = expected_region.strip().lower()
    hallucinated: list[str] = []
    for region in BODY_REGIONS:
        if region in expected_lower or expected_lower in region:
            continue
        if region in summary_lower:
            hallucinated.append(region)
    return hallucinated


def mentions_frequency(summary: str, frequency: int) -> bool:
    summary_lower = summary.lower()
    variations = [
        f"{frequency}",
        f"{frequency} time",
        f"{frequency} entr",
        f"{frequency} occurrence",
        f"{frequency} instance",
    ]
    word = number_word(frequency)
    if word is not None:
        variations.append(word)
    return any(variation in summary_lower for variation in variations)


def mentions_median_score(summary: str, median_score: float) -> bool:
    summary_lower = summary.lower()
    exact = format_score(median_score)
    rounded = str(round_half_up(median_score))
    variations = [
        exact,
        rounded,
        f"{exact}/10",
        f"{rounded}/10",
        f"{exact} out of 10",
        f"{rounded} out of 10",
    ]
    word = number_word(round_half_up(median_score))
    if word is not None:
        variations.append(word)
    return any(variation in summary_lower for variation in variations)


def _first_descriptor(summary: str, patterns: tuple[re.Pattern[str], ...]) -> str | None:
    for pattern in patterns:
        match = pattern.search(summary)
        if match is not None:
            return match.group(0).lower()
    return None


def check_logical_consistency(summary: str, frequency: int, median_score: float) -> list[str]:
    warnings: list[str] = []
    score_label = format_score(median_score)

    if frequency <= 2:
        found = _first_descriptor(summary, FREQUENCY_DESCRIPTORS["high"])
        if found is not None:
            warnings.append(
                f"Inconsistent frequency: frequency is {frequency} (low) but summary uses "
                f'"high" descriptor "{found}"'
            )
    elif frequency >= 7:
        found = _first_descriptor(summary, FREQUENCY_DESCRIPTORS["low"])
        if found is not None:
            warnings.append(
                f"Inconsistent frequency: frequency is {frequency} (high) but summary uses "
                f'"low" descriptor "{found}"'
            )

    if median_score <= 3:
        found = _first_descriptor(summary, SEVERITY_DESCRIPTORS["high"])
        if found is not None:
            warnings.append(
                f"Inconsistent severity: median score is {score_label}/10 (mild) but summary "
                f'uses "severe" descriptor "{found}"'
            )
    elif median_score >= 7:
        found = _first_descriptor(summary, SEVERITY_DESCRIPTORS["low"])
        if found is not None:
            warnings.append(
                f"Inconsistent severity: median score is {score_label}/10 (severe) but summary "
                f'uses "mild" descriptor "{found}"'
            )

    return warnings


def find_medical_advice(summary: str) -> list[str]:
    summary_lower = summary.lower()
    return [phrase for phrase in MEDICAL_ADVICE_PHRASES if phrase in summary_lower]


def _quoted(values: list[str]) -> str:
    return ", ".join(f'"{value}"' for value in values)


def validate_summary(
    *,
    summary: str,
    region: str,
    frequency: int,
    median_score: float,
    min_length: int = DEFAULT_MIN_SUMMARY_LENGTH,
    max_length: int = DEFAULT_MAX_SUMMARY_LENGTH,
) -> ValidationVerdict:
    """Run every check; none of them short-circuits the others."""
    errors: list[str] = []
    warnings: list[str] = []

    hallucinated = find_hallucinated_regions(summary, region)
    if hallucinated:
        errors.append(
            f"Hallucinated region(s) detected: {_quoted(hallucinated)} "
            f'(expected only "{region}")'
        )

    if not mentions_frequency(summary, frequency):
        errors.append(
            f"Missing frequency data: Expected mention of {frequency} entries/occurrences"
        )
    if not mentions_median_score(summary, median_score):
        errors.append(
            f"Missing median score data: Expected mention of score "
            f"{format_score(median_score)}/10"
        )

    warnings.extend(check_logical_consistency(summary, frequency, median_score))

    advice_phrases = find_medical_advice(summary)
    if advice_phrases:
        warnings.append(f"Possible medical advice detected: {_quoted(advice_phrases)}")

    if len(summary) < min_length:
        errors.append(
            f"Summary too short (less than {min_length} characters); "
            "too short to be meaningful"
        )
    if len(summary) > max_length:
        warnings.append(f"Summary might be too verbose (over {max_length} characters)")

    return ValidationVerdict(errors=tuple(errors), warnings=tuple(warnings))
