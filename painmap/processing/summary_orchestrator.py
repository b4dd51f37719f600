"""
Generate, validate, retry, and fall back for one pain summary request.

Each attempt sends the same prompt to the text generator. Generator failures
back off linearly in the attempt number; validation failures back off by a
flat base delay. Once attempts run out (or the optional deadline elapses) the
deterministic fallback text is returned, or ``SummaryGenerationError`` is
raised when fallback is disabled.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

import structlog

from painmap.core.config import settings
from painmap.core.fallback_summary import build_fallback_summary
from painmap.core.observability import (
    record_summary_attempt,
    record_summary_outcome,
    record_transport_error,
    record_validation_findings,
)
from painmap.core.output_validator import (
    DEFAULT_MAX_SUMMARY_LENGTH,
    DEFAULT_MIN_SUMMARY_LENGTH,
    ValidationVerdict,
    validate_summary,
)
from painmap.core.stats_engine import DateRange
from painmap.processing.llm_client import TextGenerator, TransportFailureError, error_reason
from painmap.processing.summary_prompts import (
    DEFAULT_AUDIENCE,
    DEFAULT_TONE,
    SummaryAudience,
    SummaryTone,
    build_summary_prompt,
)

logger = structlog.get_logger(__name__)

_PREVIEW_CHARS = 150


class SummaryProvenance(StrEnum):
    GENERATED = "generated"
    FALLBACK = "fallback"


class SummaryEventKind(StrEnum):
    ATTEMPT_STARTED = "attempt_started"
    TRANSPORT_FAILED = "transport_failed"
    VALIDATION_FAILED = "validation_failed"
    ACCEPTED = "accepted"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    FALLBACK = "fallback"
    FAILED = "failed"


class SummaryValidationError(Exception):
    """A generated candidate was rejected by the output validator."""

    def __init__(self, verdict: ValidationVerdict) -> None:
        super().__init__("Summary failed validation: " + "; ".join(verdict.errors))
        self.verdict = verdict


class SummaryGenerationError(RuntimeError):
    """Attempts were exhausted and fallback is disabled."""

    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


@dataclass(frozen=True, slots=True)
class SummaryOptions:
    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    fallback_enabled: bool = True
    validation_enabled: bool = True
    deadline_seconds: float | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            msg = "Summary options require max_attempts >= 1"
            raise ValueError(msg)
        if self.base_delay_seconds < 0:
            msg = "Summary options require base_delay_seconds >= 0"
            raise ValueError(msg)
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            msg = "Summary options require deadline_seconds > 0 when set"
            raise ValueError(msg)

    @classmethod
    def from_settings(cls) -> SummaryOptions:
        return cls(
            max_attempts=settings.SUMMARY_MAX_ATTEMPTS,
            base_delay_seconds=settings.SUMMARY_RETRY_BASE_DELAY_SECONDS,
            fallback_enabled=settings.SUMMARY_FALLBACK_ENABLED,
            validation_enabled=settings.SUMMARY_VALIDATION_ENABLED,
            deadline_seconds=settings.SUMMARY_DEADLINE_SECONDS,
        )


@dataclass(frozen=True, slots=True)
class SummaryRequest:
    period: str
    region: str
    frequency: int
    median_score: float
    tone: SummaryTone = DEFAULT_TONE
    audience: SummaryAudience = DEFAULT_AUDIENCE
    date_range: DateRange | None = None


@dataclass(frozen=True, slots=True)
class SummaryOutcome:
    text: str
    provenance: SummaryProvenance
    attempts: int
    verdict: ValidationVerdict | None = None
    last_error: BaseException | None = None

    @property
    def warnings(self) -> tuple[str, ...]:
        if self.verdict is None:
            return ()
        return self.verdict.warnings


@dataclass(frozen=True, slots=True)
class SummaryEvent:
    kind: SummaryEventKind
    attempt: int
    max_attempts: int
    region: str
    period: str
    reason: str | None = None
    detail: str | None = None
    preview: str | None = None
    delay_seconds: float | None = None
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


SummaryObserver = Callable[[SummaryEvent], None]


def _preview(text: str) -> str:
    if len(text) > _PREVIEW_CHARS:
        return text[:_PREVIEW_CHARS] + "..."
    return text


def log_summary_event(event: SummaryEvent) -> None:
    """Default observer: structured log line plus Prometheus counters."""
    log = logger.bind(
        region=event.region,
        period=event.period,
        attempt=event.attempt,
        max_attempts=event.max_attempts,
    )
    if event.kind == SummaryEventKind.ATTEMPT_STARTED:
        log.debug("Summary generation attempt started")
    elif event.kind == SummaryEventKind.TRANSPORT_FAILED:
        record_summary_attempt(result="transport_error")
        record_transport_error(reason=event.reason or "unknown")
        log.warning(
            "Summary generation attempt failed",
            reason=event.reason,
            detail=event.detail,
            retry_in_seconds=event.delay_seconds,
        )
    elif event.kind == SummaryEventKind.VALIDATION_FAILED:
        record_summary_attempt(result="validation_error")
        record_validation_findings(errors=len(event.errors), warnings=len(event.warnings))
        log.warning(
            "Summary failed validation",
            summary_preview=event.preview,
            errors=list(event.errors),
            warnings=list(event.warnings),
            retry_in_seconds=event.delay_seconds,
        )
    elif event.kind == SummaryEventKind.ACCEPTED:
        record_summary_attempt(result="accepted")
        record_summary_outcome(provenance=SummaryProvenance.GENERATED)
        record_validation_findings(errors=0, warnings=len(event.warnings))
        if event.warnings:
            log.warning(
                "Summary passed validation with warnings",
                summary_preview=event.preview,
                warnings=list(event.warnings),
            )
        else:
            log.info("Summary accepted")
    elif event.kind == SummaryEventKind.DEADLINE_EXCEEDED:
        log.warning("Summary deadline elapsed; aborting pending attempts", detail=event.detail)
    elif event.kind == SummaryEventKind.FALLBACK:
        record_summary_outcome(provenance=SummaryProvenance.FALLBACK)
        log.warning("Falling back to deterministic summary", reason=event.reason)
    elif event.kind == SummaryEventKind.FAILED:
        record_summary_outcome(provenance="failed")
        log.error("Summary generation failed", reason=event.reason, detail=event.detail)


@dataclass(slots=True)
class _RunState:
    attempts: int = 0
    last_error: BaseException | None = None
    last_verdict: ValidationVerdict | None = None


class GenerationOrchestrator:
    """Drive one text generator through the accept / retry / fallback state machine."""

    def __init__(
        self,
        *,
        generator: TextGenerator,
        options: SummaryOptions | None = None,
        observer: SummaryObserver | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        min_length: int = DEFAULT_MIN_SUMMARY_LENGTH,
        max_length: int = DEFAULT_MAX_SUMMARY_LENGTH,
    ) -> None:
        self.generator = generator
        self.options = options or SummaryOptions()
        self.observer = observer or log_summary_event
        self._sleep = sleep
        self.min_length = min_length
        self.max_length = max_length

    async def run(self, request: SummaryRequest) -> SummaryOutcome:
        prompt = build_summary_prompt(
            period=request.period,
            region=request.region,
            frequency=request.frequency,
            median_score=request.median_score,
            tone=request.tone,
            audience=request.audience,
            date_range=request.date_range,
        )
        state = _RunState()
        try:
            async with asyncio.timeout(self.options.deadline_seconds):
                return await self._run_attempts(request=request, prompt=prompt, state=state)
        except TimeoutError as exc:
            # Attempt-level timeouts are handled inside the loop; this is the deadline.
            detail = f"Summary deadline of {self.options.deadline_seconds}s elapsed"
            self._emit(
                SummaryEventKind.DEADLINE_EXCEEDED,
                request=request,
                attempt=state.attempts,
                detail=detail,
            )
            state.last_error = exc
            return self._finish_exhausted(
                request=request,
                state=state,
                reason="deadline",
                detail=detail,
            )

    async def _run_attempts(
        self,
        *,
        request: SummaryRequest,
        prompt: str,
        state: _RunState,
    ) -> SummaryOutcome:
        max_attempts = self.options.max_attempts
        for attempt in range(1, max_attempts + 1):
            state.attempts = attempt
            self._emit(SummaryEventKind.ATTEMPT_STARTED, request=request, attempt=attempt)

            try:
                candidate = await self.generator.generate(prompt)
                if not isinstance(candidate, str) or not candidate.strip():
                    msg = "Empty response from text generator"
                    raise TransportFailureError(msg)
            except Exception as exc:
                state.last_error = exc
                delay = self.options.base_delay_seconds * attempt
                has_next = attempt < max_attempts
                self._emit(
                    SummaryEventKind.TRANSPORT_FAILED,
                    request=request,
                    attempt=attempt,
                    reason=error_reason(exc),
                    detail=str(exc),
                    delay_seconds=delay if has_next else None,
                )
                if has_next:
                    await self._sleep(delay)
                    continue
                return self._finish_exhausted(
                    request=request,
                    state=state,
                    reason=error_reason(exc),
                    detail=str(exc),
                )

            if not self.options.validation_enabled:
                return self._accept(request=request, candidate=candidate, verdict=None, state=state)

            verdict = validate_summary(
                summary=candidate,
                region=request.region,
                frequency=request.frequency,
                median_score=request.median_score,
                min_length=self.min_length,
                max_length=self.max_length,
            )
            state.last_verdict = verdict
            if verdict.is_valid:
                return self._accept(
                    request=request,
                    candidate=candidate,
                    verdict=verdict,
                    state=state,
                )

            validation_error = SummaryValidationError(verdict)
            state.last_error = validation_error
            has_next = attempt < max_attempts
            self._emit(
                SummaryEventKind.VALIDATION_FAILED,
                request=request,
                attempt=attempt,
                preview=_preview(candidate),
                errors=verdict.errors,
                warnings=verdict.warnings,
                delay_seconds=self.options.base_delay_seconds if has_next else None,
            )
            if has_next:
                await self._sleep(self.options.base_delay_seconds)
                continue
            return self._finish_exhausted(
                request=request,
                state=state,
                reason="validation_error",
                detail=str(validation_error),
            )

        msg = "Summary attempt loop exhausted without a terminal state"
        raise RuntimeError(msg)

    def _accept(
        self,
        *,
        request: SummaryRequest,
        candidate: str,
        verdict: ValidationVerdict | None,
        state: _RunState,
    ) -> SummaryOutcome:
        self._emit(
            SummaryEventKind.ACCEPTED,
            request=request,
            attempt=state.attempts,
            preview=_preview(candidate),
            warnings=verdict.warnings if verdict is not None else (),
        )
        return SummaryOutcome(
            text=candidate,
            provenance=SummaryProvenance.GENERATED,
            attempts=state.attempts,
            verdict=verdict,
        )

    def _finish_exhausted(
        self,
        *,
        request: SummaryRequest,
        state: _RunState,
        reason: str,
        detail: str,
    ) -> SummaryOutcome:
        if self.options.fallback_enabled:
            self._emit(
                SummaryEventKind.FALLBACK,
                request=request,
                attempt=state.attempts,
                reason=reason,
                detail=detail,
            )
            return SummaryOutcome(
                text=build_fallback_summary(
                    period=request.period,
                    region=request.region,
                    frequency=request.frequency,
                    median_score=request.median_score,
                ),
                provenance=SummaryProvenance.FALLBACK,
                attempts=state.attempts,
                verdict=state.last_verdict,
                last_error=state.last_error,
            )

        self._emit(
            SummaryEventKind.FAILED,
            request=request,
            attempt=state.attempts,
            reason=reason,
            detail=detail,
        )
        msg = f"Failed to generate summary after {state.attempts} attempts: {detail}"
        raise SummaryGenerationError(msg, attempts=state.attempts) from state.last_error

    def _emit(
        self,
        kind: SummaryEventKind,
        *,
        request: SummaryRequest,
        attempt: int,
        reason: str | None = None,
        detail: str | None = None,
        preview: str | None = None,
        delay_seconds: float | None = None,
        errors: tuple[str, ...] = (),
        warnings: tuple[str, ...] = (),
    ) -> None:
        self.observer(
            SummaryEvent(
                kind=kind,
                attempt=attempt,
                max_attempts=self.options.max_attempts,
                region=request.region,
                period=request.period,
                reason=reason,
                detail=detail,
                preview=preview,
                delay_seconds=delay_seconds,
                errors=errors,
                warnings=warnings,
            )
        )


async def produce_summary(
    *,
    generator: TextGenerator,
    period: str,
    region: str,
    frequency: int,
    median_score: float,
    tone: SummaryTone = DEFAULT_TONE,
    audience: SummaryAudience = DEFAULT_AUDIENCE,
    date_range: DateRange | None = None,
    options: SummaryOptions | None = None,
    observer: SummaryObserver | None = None,
) -> str:
    """Return accepted generated text or the fallback summary for one region."""
    orchestrator = GenerationOrchestrator(
        generator=generator,
        options=options,
        observer=observer,
    )
    outcome = await orchestrator.run(
        SummaryRequest(
            period=period,
            region=region,
            frequency=frequency,
            median_score=median_score,
            tone=tone,
            audience=audience,
            date_range=date_range,
        )
    )
    return outcome.text
