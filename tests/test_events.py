"""Tests for boundary event normalization."""

from __future__ import annotations

from typing import Any

import pytest

from simready.simulation.events import ExitEvent, OutputEvent, normalize_exit, normalize_output

# ---------------------------------------------------------------------------
# normalize_output
# ---------------------------------------------------------------------------


class TestNormalizeOutput:
    def test_legacy_string(self) -> None:
        event = normalize_output("Warming up {1}\n")
        assert event == OutputEvent("Warming up {1}\n")
        assert event.run_id is None

    def test_structured(self) -> None:
        event = normalize_output({"chunk": "Starting Simulation\n", "runId": "annual-1", "stream": "stdout"})
        assert event.chunk == "Starting Simulation\n"
        assert event.run_id == "annual-1"
        assert event.stream == "stdout"

    def test_snake_case_keys(self) -> None:
        assert normalize_output({"chunk": "x", "run_id": "r2"}).run_id == "r2"

    def test_bytes_chunk(self) -> None:
        assert normalize_output(b"abc").chunk == "abc"

    def test_empty_run_id_is_unscoped(self) -> None:
        assert normalize_output({"chunk": "x", "runId": ""}).run_id is None

    @pytest.mark.parametrize(("run_id", "expected"), [(42, "42"), (0, "0"), (False, "False"), ("", None), (None, None)])
    def test_run_id_coercion(self, run_id: Any, expected: str | None) -> None:
        assert normalize_output({"chunk": "x", "runId": run_id}).run_id == expected
        assert normalize_exit({"runId": run_id}).run_id == expected

    @pytest.mark.parametrize("payload", [None, {}, {"runId": "r1"}])
    def test_missing_chunk_is_empty(self, payload: Any) -> None:
        assert normalize_output(payload).chunk == ""

    def test_normalized_event_passes_through(self) -> None:
        event = OutputEvent("a", "r1")
        assert normalize_output(event) is event


# ---------------------------------------------------------------------------
# normalize_exit
# ---------------------------------------------------------------------------


class TestNormalizeExit:
    def test_legacy_code(self) -> None:
        assert normalize_exit(1) == ExitEvent(exit_code=1)

    @pytest.mark.parametrize("payload", [None, "1", True, float("nan"), [], {}])
    def test_non_numeric_is_zero(self, payload: Any) -> None:
        assert normalize_exit(payload).exit_code == 0

    def test_float_code(self) -> None:
        assert normalize_exit(2.0).exit_code == 2

    def test_structured(self) -> None:
        event = normalize_exit(
            {
                "exitCode": 1,
                "runId": "r1",
                "outputDir": "runs/annual",
                "errContent": "** Fatal ** boom",
                "csvContents": {"eplusout.csv": "a,b\n"},
            }
        )
        assert event.exit_code == 1
        assert event.run_id == "r1"
        assert event.output_dir == "runs/annual"
        assert event.error_log == "** Fatal ** boom"
        assert event.artifacts == {"eplusout.csv": "a,b\n"}

    def test_structured_error_log_key(self) -> None:
        assert normalize_exit({"errorLog": "log"}).error_log == "log"

    def test_malformed_artifacts(self) -> None:
        assert normalize_exit({"artifacts": ["a"]}).artifacts == {}
