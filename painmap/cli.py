"""
Pain map summary command-line interface.
"""

from __future__ import annotations

import argparse
import asyncio
import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from painmap.core.config import settings
from painmap.core.logging_setup import configure_logging
from painmap.core.map_summary import MapSummaryService
from painmap.core.stats_engine import PainDataMaps, PainEntry, RegionStat, format_score
from painmap.processing.summary_orchestrator import SummaryGenerationError, SummaryOptions
from painmap.processing.summary_prompts import (
    SummaryAudience,
    SummaryTone,
    build_summary_prompt,
    format_prompt_date,
)


def _parse_iso_datetime(value: str) -> datetime:
    normalized = value.strip()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    return datetime.fromisoformat(normalized)


def _parse_entry(raw: dict[str, Any]) -> PainEntry:
    return PainEntry(
        region=str(raw["region"]),
        severity=float(raw["severity"]),
        timestamp=_parse_iso_datetime(str(raw["timestamp"])),
    )


def load_pain_maps(path: str) -> dict[str, list[PainEntry]]:
    """Read a JSON object mapping period labels to lists of entries."""
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        msg = f"Pain data file '{path}' must contain a JSON object keyed by period"
        raise ValueError(msg)
    return {
        str(period): [_parse_entry(raw) for raw in entries or []]
        for period, entries in payload.items()
    }


def _format_stat_lines(stat: RegionStat) -> list[str]:
    lines = [
        f"# {stat.region} ({stat.period})",
        f"  Frequency: {stat.frequency} entries",
        f"  Median score: {format_score(stat.median_score)}/10",
        f"  Total entries: {stat.total_entries}",
    ]
    if stat.date_range is not None:
        lines.append(
            f"  Date range: {format_prompt_date(stat.date_range.start)} to "
            f"{format_prompt_date(stat.date_range.end)}"
        )
    else:
        lines.append("  Date range: none")
    return lines


def _build_options(args: argparse.Namespace) -> SummaryOptions:
    return SummaryOptions(
        max_attempts=max(1, args.max_attempts),
        base_delay_seconds=max(0.0, args.base_delay),
        fallback_enabled=not args.no_fallback,
        validation_enabled=not args.no_validation,
        deadline_seconds=args.deadline,
    )


def _run_stats(*, data: str, period: str, regions: list[str]) -> int:
    maps = load_pain_maps(data)
    for region in regions:
        for line in _format_stat_lines(MapSummaryService.sum_region(period, maps, region)):
            print(line)
    return 0


def _run_prompt(
    *,
    data: str,
    period: str,
    region: str,
    tone: SummaryTone,
    audience: SummaryAudience,
) -> int:
    stat = MapSummaryService.sum_region(period, load_pain_maps(data), region)
    print(
        build_summary_prompt(
            period=period,
            region=region,
            frequency=stat.frequency,
            median_score=stat.median_score,
            tone=tone,
            audience=audience,
            date_range=stat.date_range,
        )
    )
    return 0


def _run_fallback(*, data: str, period: str, region: str) -> int:
    stat = MapSummaryService.sum_region(period, load_pain_maps(data), region)
    print(MapSummaryService.summarise(period, region, stat.frequency, stat.median_score))
    return 0


async def _run_summarize(
    *,
    maps: PainDataMaps,
    period: str,
    regions: list[str],
    tone: SummaryTone,
    audience: SummaryAudience,
    options: SummaryOptions,
) -> int:
    service = MapSummaryService(options=options)
    try:
        outcomes = await service.summarise_regions(
            period,
            maps,
            regions,
            tone=tone,
            audience=audience,
        )
    except SummaryGenerationError as exc:
        print(f"Summary generation failed: {exc}")
        return 2

    for region, outcome in zip(regions, outcomes, strict=True):
        if len(regions) > 1:
            print(f"# {region} [{outcome.provenance}]")
        print(outcome.text)
    return 0


def _add_data_arguments(parser: argparse.ArgumentParser, *, multiple_regions: bool) -> None:
    parser.add_argument(
        "--data",
        required=True,
        help="Path to JSON file mapping period labels to pain entries.",
    )
    parser.add_argument(
        "--period",
        required=True,
        help='Period label to summarise, e.g. "Last Week".',
    )
    if multiple_regions:
        parser.add_argument(
            "--region",
            action="append",
            required=True,
            help="Body region (repeat to summarise several regions).",
        )
    else:
        parser.add_argument("--region", required=True, help="Body region to summarise.")


def _add_style_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--tone",
        type=SummaryTone,
        choices=list(SummaryTone),
        default=SummaryTone(settings.SUMMARY_DEFAULT_TONE),
        help="Emotional register of the summary.",
    )
    parser.add_argument(
        "--audience",
        type=SummaryAudience,
        choices=list(SummaryAudience),
        default=SummaryAudience(settings.SUMMARY_DEFAULT_AUDIENCE),
        help="Intended reader of the summary.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="painmap")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL for this invocation.",
    )
    subparsers = parser.add_subparsers(dest="command")

    stats_parser = subparsers.add_parser(
        "stats",
        help="Show frequency, median score, and date range for regions.",
    )
    _add_data_arguments(stats_parser, multiple_regions=True)

    prompt_parser = subparsers.add_parser(
        "prompt",
        help="Print the exact prompt sent to the text generator.",
    )
    _add_data_arguments(prompt_parser, multiple_regions=False)
    _add_style_arguments(prompt_parser)

    fallback_parser = subparsers.add_parser(
        "fallback",
        help="Print the deterministic summary without calling the LLM.",
    )
    _add_data_arguments(fallback_parser, multiple_regions=False)

    summarize_parser = subparsers.add_parser(
        "summarize",
        help="Generate validated LLM summaries, falling back to templates.",
    )
    _add_data_arguments(summarize_parser, multiple_regions=True)
    _add_style_arguments(summarize_parser)
    summarize_parser.add_argument(
        "--max-attempts",
        type=int,
        default=settings.SUMMARY_MAX_ATTEMPTS,
        help="Generation attempts before falling back.",
    )
    summarize_parser.add_argument(
        "--base-delay",
        type=float,
        default=settings.SUMMARY_RETRY_BASE_DELAY_SECONDS,
        help="Base delay in seconds between attempts.",
    )
    summarize_parser.add_argument(
        "--deadline",
        type=float,
        default=settings.SUMMARY_DEADLINE_SECONDS,
        help="Overall deadline in seconds per region.",
    )
    summarize_parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Fail instead of returning the template summary.",
    )
    summarize_parser.add_argument(
        "--no-validation",
        action="store_true",
        help="Accept any non-empty generated text without validation.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level)

    if args.command == "stats":
        return _run_stats(data=args.data, period=args.period, regions=args.region)
    if args.command == "prompt":
        return _run_prompt(
            data=args.data,
            period=args.period,
            region=args.region,
            tone=args.tone,
            audience=args.audience,
        )
    if args.command == "fallback":
        return _run_fallback(data=args.data, period=args.period, region=args.region)
    if args.command == "summarize":
        if args.deadline is not None and args.deadline <= 0:
            parser.error("--deadline must be greater than 0 seconds")
        return asyncio.run(
            _run_summarize(
                maps=load_pain_maps(args.data),
                period=args.period,
                regions=args.region,
                tone=args.tone,
                audience=args.audience,
                options=_build_options(args),
            )
        )

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
