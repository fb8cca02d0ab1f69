"""Regression tests for process-wide structlog configuration."""

from __future__ import annotations

import pytest
import structlog

import app.logging_config as logging_config_module
from app.logging_config import configure_logging


def test_logging_configure_routes_log_lines_to_stderr(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Write log lines to stderr and keep stdout free for command output.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        capsys: Pytest output capture fixture.

    Returns:
        None: Assertions validate stream routing and level filtering.

    Raises:
        AssertionError: Raised when log lines reach stdout or levels are not filtered.
    """

    monkeypatch.setattr(logging_config_module, "_configured", False)
    configure_logging("INFO")
    # Already configured, so the DEBUG level request is ignored.
    configure_logging("DEBUG")

    logger = structlog.get_logger("tests.logging")
    logger.info("Conversion batch started", batch_id="batch-log")
    logger.debug("hidden debug line")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Conversion batch started" in captured.err
    assert "batch_id=batch-log" in captured.err
    assert "hidden debug line" not in captured.err
