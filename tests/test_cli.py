"""Tests for the layerconf command line tool."""

from __future__ import annotations

import json
import plistlib
from pathlib import Path

import pytest

from layerconf.cli import main


def test_main_layers_file_environment_and_overrides(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "base.json"
    path.write_text(json.dumps({"properties": {"mode": "dev", "region": "eu"}}))
    monkeypatch.setenv("LAYERCONF_CLI_REGION", "us")

    exit_code = main(
        [
            "--file",
            str(path),
            "--env-prefix",
            "LAYERCONF_CLI_",
            "--mode=prod",
            "--db:connection_uri=postgres://localhost/app",
        ]
    )

    assert exit_code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["properties"] == {"mode": "prod", "region": "eu", "LAYERCONF_CLI_REGION": "us"}
    assert output["connections"] == [{"name": "db", "uri": "postgres://localhost/app"}]


def test_main_prints_plist(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["--format", "plist", "--mode=prod"])

    assert exit_code == 0
    output = capsys.readouterr().out
    assert plistlib.loads(output.encode("utf-8")) == {"properties": {"mode": "prod"}}


def test_main_reports_load_errors(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["--file", str(tmp_path / "missing.json")])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Config file not found" in captured.err
