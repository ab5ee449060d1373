"""Tests for logging integration across simready modules."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Generator
from typing import Any

import pytest

from simready import ProjectConfiguration
from simready.readiness import evaluate
from simready.simulation import RunOrchestrator, RunRegistry, RunRequest, validate_config
from simready.simulation.parsers import ErrorReport


class TestNullHandler:
    """The library root logger must have a NullHandler by default."""

    def test_null_handler_attached(self) -> None:
        root_logger = logging.getLogger("simready")
        handler_types = [type(h) for h in root_logger.handlers]
        assert logging.NullHandler in handler_types

    def test_no_output_by_default(
        self, capfd: pytest.CaptureFixture[str], complete_config: ProjectConfiguration
    ) -> None:
        """Without user configuration, simready should produce no output."""
        evaluate(complete_config)
        validate_config(complete_config)
        captured = capfd.readouterr()
        assert captured.out == ""
        assert captured.err == ""


class TestConfigLogging:
    def test_from_dict_logs(self, complete_metadata: dict[str, object]) -> None:
        with _capture_logs("simready.config") as records:
            ProjectConfiguration.from_dict(complete_metadata, source="project.json")
        messages = [r.getMessage() for r in records]
        assert any("Loaded project configuration from project.json" in m for m in messages)


class TestReadinessLogging:
    def test_evaluate_logs_statuses(self, complete_config: ProjectConfiguration) -> None:
        with _capture_logs("simready.readiness") as records:
            evaluate(complete_config)
        messages = [r.getMessage() for r in records]
        assert any("Evaluated checklist" in m and "geometry=ok" in m for m in messages)


class TestSimulationLogging:
    def test_err_parse_logs(self, sample_err: str) -> None:
        with _capture_logs("simready.simulation.parsers.err") as records:
            ErrorReport.from_string(sample_err)
        assert any(r.levelno == logging.INFO and "Parsed .err output" in r.getMessage() for r in records)

    def test_validate_config_logs(self, complete_config: ProjectConfiguration) -> None:
        with _capture_logs("simready.simulation.validation") as records:
            validate_config(complete_config)
        messages = [r.getMessage() for r in records]
        assert any("Configuration validation complete" in m for m in messages)

    def test_run_lifecycle_logs(self, boundary: Any, run_request: RunRequest) -> None:
        orchestrator = RunOrchestrator(boundary, registry=RunRegistry())
        with _capture_logs("simready.simulation") as records:
            orchestrator.submit(run_request)
            boundary.emit_exit({"exitCode": 0, "runId": "r1"})
        messages = [r.getMessage() for r in records]
        assert any("Submitting run r1" in m for m in messages)
        assert any("Registered run r1" in m for m in messages)
        assert any("Run r1 exited with code 0" in m for m in messages)

    def test_cross_talk_logged_at_debug(self, boundary: Any, run_request: RunRequest) -> None:
        orchestrator = RunOrchestrator(boundary)
        orchestrator.submit(run_request)
        with _capture_logs("simready.simulation.orchestrator") as records:
            boundary.emit_output({"chunk": "x", "runId": "other"})
        assert any(r.levelno == logging.DEBUG and "Discarding output for run other" in r.getMessage() for r in records)

    def test_launch_failure_logged(self, boundary_factory: Any, run_request: RunRequest) -> None:
        def _explode(b: Any, request: object) -> None:
            raise OSError("spawn failed")

        orchestrator = RunOrchestrator(boundary_factory(on_run=_explode))
        with _capture_logs("simready.simulation.orchestrator") as records:
            orchestrator.submit(run_request)
        errors = [r for r in records if r.levelno == logging.ERROR]
        assert errors
        assert errors[0].exc_info is not None


@contextlib.contextmanager
def _capture_logs(
    logger_name: str,
    level: int = logging.DEBUG,
) -> Generator[list[logging.LogRecord], None, None]:
    """Context manager that captures log records from a named logger."""
    records: list[logging.LogRecord] = []
    handler = logging.Handler()
    handler.emit = lambda record: records.append(record)  # type: ignore[assignment]
    handler.setLevel(level)
    target_logger = logging.getLogger(logger_name)
    target_logger.setLevel(level)
    target_logger.addHandler(handler)
    try:
        yield records
    finally:
        target_logger.removeHandler(handler)
        target_logger.setLevel(logging.WARNING)
