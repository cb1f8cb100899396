"""Tests for the command-line interface."""

import tempfile
from pathlib import Path

from click.testing import CliRunner

from inputdefense.cli import main


def _run(tmpdir: str, *args: str):
    return CliRunner().invoke(main, ["--data-dir", tmpdir, *args])


def test_check_text_valid():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = _run(tmpdir, "check-text", "Hello, World! 123")
        assert result.exit_code == 0
        assert "Valid" in result.output


def test_check_text_rejected():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = _run(tmpdir, "check-text", "<script>alert(1)</script>")
        assert result.exit_code == 1
        assert "malicious" in result.output


def test_check_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        good = Path(tmpdir) / "notes.txt"
        good.write_text("hello")
        assert _run(tmpdir, "check-file", str(good)).exit_code == 0

        bad = Path(tmpdir) / "setup.exe"
        bad.write_bytes(b"MZ")
        result = _run(tmpdir, "check-file", str(bad))
        assert result.exit_code == 1
        assert "Suspicious file name detected" in result.output


def test_rate_limit_persists_between_runs():
    with tempfile.TemporaryDirectory() as tmpdir:
        first = _run(tmpdir, "rate-limit", "search")
        second = _run(tmpdir, "rate-limit", "search")
        assert first.exit_code == 0
        assert "remaining=99" in first.output
        assert "remaining=98" in second.output

        _run(tmpdir, "rate-limit", "search", "--reset")
        assert "remaining=99" in _run(tmpdir, "rate-limit", "search").output


def test_store_round_trip():
    with tempfile.TemporaryDirectory() as tmpdir:
        assert _run(tmpdir, "store", "set", "prefs", '{"theme": "dark"}', "--encode").exit_code == 0
        result = _run(tmpdir, "store", "get", "prefs", "--decode")
        assert '"theme"' in result.output
        assert '"dark"' in result.output

        result = _run(tmpdir, "store", "clear")
        assert "Removed 1 entries" in result.output
        assert "No value" in _run(tmpdir, "store", "get", "prefs", "--decode").output


def test_violations_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = _run(tmpdir, "violations", "list")
        assert result.exit_code == 0
        assert "No violation reports" in result.output


def test_violations_export_csv():
    from inputdefense.reporting.violation_log import ViolationLog

    with tempfile.TemporaryDirectory() as tmpdir:
        ViolationLog(Path(tmpdir) / "violations").record("inline", "script-src")
        result = _run(tmpdir, "violations", "export", "--format", "csv")
        assert result.exit_code == 0
        assert result.output.startswith("id,received_at")
        assert "script-src" in result.output


def test_bad_config_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        config = Path(tmpdir) / "bad.yaml"
        config.write_text("validation: {nope: 1}")
        result = CliRunner().invoke(main, ["--config", str(config), "check-text", "hi"])
        assert result.exit_code != 0
        assert "nope" in result.output
