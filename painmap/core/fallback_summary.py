"""
Deterministic template summaries used when generated text cannot be accepted.
"""

from __future__ import annotations

from painmap.core.stats_engine import format_score


def severity_description(score: float) -> str:
    if score <= 2:
        return "mild"
    if score <= 4:
        return "moderate"
    if score <= 6:
        return "moderate to severe"
    if score <= 8:
        return "severe"
    return "very severe"


def build_fallback_summary(
    *,
    period: str,
    region: str,
    frequency: int,
    median_score: float,
) -> str:
    if frequency == 0:
        return (
            f"You haven't logged any pain data for your {region.lower()} during "
            f"{period.lower()} yet. When you start tracking this region, your data "
            "will appear here."
        )

    entry_label = "entry" if frequency == 1 else "entries"
    return (
        f"During {period.lower()}, you recorded {frequency} pain {entry_label} for your "
        f"{region.lower()}, with a median pain level of {format_score(median_score)}/10 "
        f"({severity_description(median_score)}). This data helps track your pain "
        "patterns over time."
    )
