from __future__ import annotations

import logging

import pytest
import structlog

from painmap.core.logging_setup import _resolve_level, configure_logging

pytestmark = pytest.mark.unit


def test_resolve_level_accepts_names_and_defaults_to_info() -> None:
    assert _resolve_level("debug") == logging.DEBUG
    assert _resolve_level("WARNING") == logging.WARNING
    assert _resolve_level("verbose") == logging.INFO


def test_configure_logging_writes_json_to_stderr(capsys) -> None:
    configure_logging(level="info", log_format="json")

    structlog.get_logger("painmap.test").info("Summary accepted", region="Neck")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert '"event": "Summary accepted"' in captured.err
    assert '"region": "Neck"' in captured.err


def test_configure_logging_filters_below_level(capsys) -> None:
    configure_logging(level="warning", log_format="console")

    structlog.get_logger("painmap.test").info("hidden")

    assert "hidden" not in capsys.readouterr().err
