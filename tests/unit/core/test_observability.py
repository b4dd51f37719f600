from __future__ import annotations

import pytest
from prometheus_client import REGISTRY

from painmap.core.observability import (
    record_summary_attempt,
    record_summary_outcome,
    record_transport_error,
    record_validation_findings,
)
from painmap.processing.summary_orchestrator import (
    SummaryEvent,
    SummaryEventKind,
    log_summary_event,
)

pytestmark = pytest.mark.unit


def _sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_recorders_increment_labelled_counters() -> None:
    attempts_before = _sample("summary_attempts_total", {"result": "accepted"})
    outcomes_before = _sample("summary_outcomes_total", {"provenance": "fallback"})
    errors_before = _sample("summary_validation_findings_total", {"severity": "error"})
    transport_before = _sample("summary_transport_errors_total", {"reason": "unknown"})

    record_summary_attempt(result="accepted")
    record_summary_outcome(provenance="fallback")
    record_validation_findings(errors=2, warnings=0)
    record_transport_error(reason="  ")

    assert _sample("summary_attempts_total", {"result": "accepted"}) == attempts_before + 1
    assert _sample("summary_outcomes_total", {"provenance": "fallback"}) == outcomes_before + 1
    assert _sample("summary_validation_findings_total", {"severity": "error"}) == errors_before + 2
    assert _sample("summary_transport_errors_total", {"reason": "unknown"}) == transport_before + 1


def test_log_summary_event_records_transport_failure() -> None:
    before = _sample("summary_transport_errors_total", {"reason": "timeout"})

    log_summary_event(
        SummaryEvent(
            kind=SummaryEventKind.TRANSPORT_FAILED,
            attempt=1,
            max_attempts=3,
            region="Neck",
            period="Last Week",
            reason="timeout",
            detail="slow",
            delay_seconds=1.0,
        )
    )

    assert _sample("summary_transport_errors_total", {"reason": "timeout"}) == before + 1
