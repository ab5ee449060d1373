"""Tests for the simready command-line interface."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from simready.readiness._cli import main

# ---------------------------------------------------------------------------
# Fixtures: project and diagnostic files
# ---------------------------------------------------------------------------


@pytest.fixture
def project_file(tmp_path: Path, complete_metadata: dict[str, Any]) -> Path:
    p = tmp_path / "project.json"
    p.write_text(json.dumps(complete_metadata))
    return p


@pytest.fixture
def bare_project_file(tmp_path: Path) -> Path:
    p = tmp_path / "bare.json"
    p.write_text("{}")
    return p


@pytest.fixture
def diagnostics_file(tmp_path: Path) -> Path:
    p = tmp_path / "diagnostics.json"
    p.write_text(json.dumps({"geometry": {"totals": {"zones": 2}}, "issues": []}))
    return p


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    code = exc_info.value.code
    return code if isinstance(code, int) else 0


# ---------------------------------------------------------------------------
# checklist
# ---------------------------------------------------------------------------


class TestChecklistCommand:
    def test_ready_project(
        self, project_file: Path, diagnostics_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = _run(["checklist", str(project_file), "--diagnostics", str(diagnostics_file)])
        out = capsys.readouterr().out
        assert code == 0
        assert "[OK] 1. Geometry" in out
        assert "[OK] 7. Run EnergyPlus" in out

    def test_bare_project_exits_1(self, bare_project_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run(["checklist", str(bare_project_file)])
        out = capsys.readouterr().out
        assert code == 1
        assert "[ERROR] 5. Weather & Location" in out
        assert "actions:" in out

    def test_json_output(
        self, project_file: Path, diagnostics_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _run(["checklist", str(project_file), "--diagnostics", str(diagnostics_file), "--json"])
        data = json.loads(capsys.readouterr().out)
        assert [s["id"] for s in data["steps"]] == [
            "geometry",
            "constructions",
            "schedules-loads",
            "thermostats-ideal-loads",
            "weather-location",
            "idf-generation",
            "run-energyplus",
        ]
        assert data["summary"] == {"status": "ok", "errors": 0, "warnings": 0}

    def test_no_runner(self, project_file: Path, diagnostics_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run(["checklist", str(project_file), "--diagnostics", str(diagnostics_file), "--no-runner", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["steps"][6]["status"] == "warning"
        assert data["summary"]["warnings"] == 1

    def test_diagnostics_with_missing_construction(
        self, project_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        diag = tmp_path / "diag.json"
        diag.write_text(json.dumps({"constructions": {"missingConstructions": ["RoofX"]}}))
        code = _run(["checklist", str(project_file), "--diagnostics", str(diag)])
        assert code == 1
        assert "[ERROR] 2. Constructions & Materials" in capsys.readouterr().out

    def test_file_not_found(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run(["checklist", "/nonexistent/project.json"])
        assert code == 2
        assert "file not found" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        p = tmp_path / "broken.json"
        p.write_text("{not json")
        assert _run(["checklist", str(p)]) == 2
        assert "invalid JSON" in capsys.readouterr().err

    def test_diagnostics_must_be_object(
        self, project_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        diag = tmp_path / "diag.json"
        diag.write_text("[]")
        assert _run(["checklist", str(project_file), "--diagnostics", str(diag)]) == 2
        assert "must be a JSON object" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# preflight
# ---------------------------------------------------------------------------


class TestPreflightCommand:
    def test_complete_request(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run(["preflight", "--epw", "w.epw", "--exe", "/opt/ep/energyplus"])
        assert code == 0
        assert "No blocking issues found." in capsys.readouterr().out

    def test_missing_exe(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run(["preflight", "--epw", "w.epw"])
        out = capsys.readouterr().out
        assert code == 1
        assert "[ERROR] EnergyPlus executable path is required." in out

    def test_epw_from_project(self, project_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run(["preflight", "--project", str(project_file), "--exe", "/opt/ep/energyplus", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data == {"ok": True, "issues": []}

    def test_json_issues(self, capsys: pytest.CaptureFixture[str]) -> None:
        _run(["preflight", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert data["ok"] is False
        assert [i["code"] for i in data["issues"]] == ["EP_RUN_MISSING_EPW", "EP_RUN_MISSING_EXE"]


class TestNoCommand:
    def test_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run([]) == 2
        assert "checklist" in capsys.readouterr().out
