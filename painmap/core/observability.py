"""
Prometheus metrics registry and helper recorders.
"""

from __future__ import annotations

from prometheus_client import Counter

SUMMARY_ATTEMPTS_TOTAL = Counter(
    "summary_attempts_total",
    "Summary generation attempts by result.",
    ["result"],
)
SUMMARY_OUTCOMES_TOTAL = Counter(
    "summary_outcomes_total",
    "Final summary outcomes by provenance.",
    ["provenance"],
)
SUMMARY_VALIDATION_FINDINGS_TOTAL = Counter(
    "summary_validation_findings_total",
    "Validator findings on generated summaries by severity.",
    ["severity"],
)
SUMMARY_TRANSPORT_ERRORS_TOTAL = Counter(
    "summary_transport_errors_total",
    "Generation capability failures by classified reason.",
    ["reason"],
)


def record_summary_attempt(*, result: str) -> None:
    SUMMARY_ATTEMPTS_TOTAL.labels(result=result.strip() or "unknown").inc()


def record_summary_outcome(*, provenance: str) -> None:
    SUMMARY_OUTCOMES_TOTAL.labels(provenance=provenance.strip() or "unknown").inc()


def record_validation_findings(*, errors: int, warnings: int) -> None:
    SUMMARY_VALIDATION_FINDINGS_TOTAL.labels(severity="error").inc(max(0, errors))
    SUMMARY_VALIDATION_FINDINGS_TOTAL.labels(severity="warning").inc(max(0, warnings))


def record_transport_error(*, reason: str) -> None:
    SUMMARY_TRANSPORT_ERRORS_TOTAL.labels(reason=reason.strip() or "unknown").inc()
