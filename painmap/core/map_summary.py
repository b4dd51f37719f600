"""
Caller-facing pain map summaries: statistics, generated text, and fallbacks.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import structlog

from painmap.core.config import settings
from painmap.core.fallback_summary import build_fallback_summary
from painmap.core.stats_engine import DateRange, PainDataMaps, RegionStat, summarize_region
from painmap.processing.llm_client import (
    LLMChatRoute,
    OpenAITextGenerator,
    TextGenerator,
    create_client_optional,
)
from painmap.processing.summary_orchestrator import (
    GenerationOrchestrator,
    SummaryGenerationError,
    SummaryObserver,
    SummaryOptions,
    SummaryOutcome,
    SummaryProvenance,
    SummaryRequest,
)
from painmap.processing.summary_prompts import SummaryAudience, SummaryTone

logger = structlog.get_logger(__name__)


class MapSummaryService:
    """Summarise logged body-map pain per region, with or without an LLM."""

    def __init__(
        self,
        generator: TextGenerator | None = None,
        *,
        client: Any | None = None,
        model: str | None = None,
        api_mode: str | None = None,
        provider: str | None = None,
        base_url: str | None = None,
        options: SummaryOptions | None = None,
        observer: SummaryObserver | None = None,
        default_tone: SummaryTone | None = None,
        default_audience: SummaryAudience | None = None,
    ) -> None:
        self.model = model or settings.LLM_SUMMARY_MODEL
        self.api_mode = api_mode or settings.LLM_SUMMARY_API_MODE
        self.provider = provider or settings.LLM_PRIMARY_PROVIDER
        self.base_url = base_url or settings.LLM_PRIMARY_BASE_URL
        self.options = options or SummaryOptions.from_settings()
        self.observer = observer
        self.default_tone = default_tone or SummaryTone(settings.SUMMARY_DEFAULT_TONE)
        self.default_audience = default_audience or SummaryAudience(
            settings.SUMMARY_DEFAULT_AUDIENCE
        )
        self.generator = generator if generator is not None else self._build_generator(client)

    def _build_generator(self, client: Any | None) -> TextGenerator | None:
        resolved_client = (
            client
            if client is not None
            else create_client_optional(
                api_key=settings.OPENAI_API_KEY,
                base_url=self.base_url,
                timeout_seconds=settings.LLM_REQUEST_TIMEOUT_SECONDS,
            )
        )
        if resolved_client is None:
            return None
        return OpenAITextGenerator(
            route=LLMChatRoute(
                provider=self.provider,
                model=self.model,
                client=resolved_client,
                api_mode=self.api_mode,
            ),
            temperature=settings.LLM_SUMMARY_TEMPERATURE,
            max_output_tokens=settings.LLM_SUMMARY_MAX_OUTPUT_TOKENS,
        )

    @staticmethod
    def sum_region(period: str, maps: PainDataMaps, region: str) -> RegionStat:
        return summarize_region(period, maps, region)

    @staticmethod
    def summarise(period: str, region: str, frequency: int, median_score: float) -> str:
        """Deterministic summary that never calls the text generator."""
        return build_fallback_summary(
            period=period,
            region=region,
            frequency=frequency,
            median_score=median_score,
        )

    async def generate(
        self,
        *,
        period: str,
        region: str,
        frequency: int,
        median_score: float,
        tone: SummaryTone | None = None,
        audience: SummaryAudience | None = None,
        date_range: DateRange | None = None,
        options: SummaryOptions | None = None,
    ) -> SummaryOutcome:
        run_options = options or self.options
        request = SummaryRequest(
            period=period,
            region=region,
            frequency=frequency,
            median_score=median_score,
            tone=tone or self.default_tone,
            audience=audience or self.default_audience,
            date_range=date_range,
        )

        if self.generator is None:
            return self._unconfigured_outcome(request=request, options=run_options)

        orchestrator = GenerationOrchestrator(
            generator=self.generator,
            options=run_options,
            observer=self.observer,
            min_length=settings.SUMMARY_MIN_LENGTH,
            max_length=settings.SUMMARY_MAX_LENGTH,
        )
        return await orchestrator.run(request)

    async def summarise_with_llm(
        self,
        period: str,
        region: str,
        frequency: int,
        median_score: float,
        *,
        tone: SummaryTone | None = None,
        audience: SummaryAudience | None = None,
        date_range: DateRange | None = None,
        options: SummaryOptions | None = None,
    ) -> str:
        outcome = await self.generate(
            period=period,
            region=region,
            frequency=frequency,
            median_score=median_score,
            tone=tone,
            audience=audience,
            date_range=date_range,
            options=options,
        )
        return outcome.text

    async def summarise_region_with_llm(
        self,
        period: str,
        maps: PainDataMaps,
        region: str,
        *,
        tone: SummaryTone | None = None,
        audience: SummaryAudience | None = None,
        options: SummaryOptions | None = None,
    ) -> SummaryOutcome:
        stat = self.sum_region(period, maps, region)
        return await self.generate(
            period=period,
            region=region,
            frequency=stat.frequency,
            median_score=stat.median_score,
            tone=tone,
            audience=audience,
            date_range=stat.date_range,
            options=options,
        )

    async def summarise_regions(
        self,
        period: str,
        maps: PainDataMaps,
        regions: Sequence[str],
        *,
        tone: SummaryTone | None = None,
        audience: SummaryAudience | None = None,
        options: SummaryOptions | None = None,
    ) -> list[SummaryOutcome]:
        """Summarise independent regions concurrently; results keep the input order."""
        return list(
            await asyncio.gather(
                *(
                    self.summarise_region_with_llm(
                        period,
                        maps,
                        region,
                        tone=tone,
                        audience=audience,
                        options=options,
                    )
                    for region in regions
                )
            )
        )

    def _unconfigured_outcome(
        self,
        *,
        request: SummaryRequest,
        options: SummaryOptions,
    ) -> SummaryOutcome:
        if not options.fallback_enabled:
            msg = "Failed to generate summary after 0 attempts: no text generator configured"
            raise SummaryGenerationError(msg, attempts=0)
        logger.warning(
            "No LLM client configured; using fallback summary",
            region=request.region,
            period=request.period,
        )
        return SummaryOutcome(
            text=self.summarise(
                request.period,
                request.region,
                request.frequency,
                request.median_score,
            ),
            provenance=SummaryProvenance.FALLBACK,
            attempts=0,
        )


async def generate_quick_summary(
    period: str,
    region: str,
    frequency: int,
    median_score: float,
    *,
    generator: TextGenerator | None = None,
) -> str:
    """Generate a summary with the configured default tone and audience."""
    service = MapSummaryService(generator)
    return await service.summarise_with_llm(period, region, frequency, median_score)


async def generate_custom_summary(
    period: str,
    region: str,
    frequency: int,
    median_score: float,
    *,
    tone: SummaryTone = SummaryTone.COMPASSIONATE,
    audience: SummaryAudience = SummaryAudience.PATIENT,
    generator: TextGenerator | None = None,
) -> str:
    service = MapSummaryService(generator)
    return await service.summarise_with_llm(
        period,
        region,
        frequency,
        median_score,
        tone=tone,
        audience=audience,
    )
