import json

import pytest
from click.testing import CliRunner

from passaudit.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestCheckCommand:
    def test_accepted(self, runner):
        result = runner.invoke(cli, ["--no-env", "check", "password"])
        assert result.exit_code == 0
        assert "STRONG" in result.output
        assert "lower_only" in result.output

    def test_rejected(self, runner):
        result = runner.invoke(cli, ["--no-env", "--preset", "basic", "check", "abc"])
        assert result.exit_code == 1
        assert "REJECTED" in result.output
        assert "password too short" in result.output

    def test_weak(self, runner):
        result = runner.invoke(cli, ["--no-env", "-p", "basic", "check", "password"])
        assert result.exit_code == 1
        assert "WEAK" in result.output

    def test_json_report(self, runner):
        result = runner.invoke(cli, ["--no-env", "check", "--json", "P@sswørd"])
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["accepted"] is True
        assert report["outcome"]["complexity_name"] == "extended_mixed"
        assert report["outcome"]["has_extended"] is True

    def test_prompt(self, runner):
        result = runner.invoke(cli, ["--no-env", "check"], input="aB3!aB3!\n")
        assert result.exit_code == 0
        assert "symbols_digits_mixed" in result.output
        assert "aB3!aB3!" not in result.output

    def test_config_file(self, runner, tmp_path):
        config = tmp_path / "password.conf"
        config.write_text("require_digits=yes\n")
        result = runner.invoke(cli, ["--no-env", "-c", str(config), "check", "letters"])
        assert result.exit_code == 1
        assert "password must contain digits" in result.output

    def test_missing_config_file(self, runner, tmp_path):
        missing = tmp_path / "missing.conf"
        result = runner.invoke(cli, ["--no-env", "-c", str(missing), "check", "x"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_environment_policy(self, runner, monkeypatch, tmp_path):
        monkeypatch.setenv("PASSAUDIT_MIN_LENGTH", "30")
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(cli, ["check", "short"])
        assert result.exit_code == 1
        assert "password too short" in result.output


class TestBatchCommand:
    def test_batch(self, runner, tmp_path):
        passwords = tmp_path / "passwords.txt"
        passwords.write_text("abc\n\nCorrect-Horse-9\nplainpassword\n", encoding="utf-8")
        output = tmp_path / "reports.json"

        result = runner.invoke(cli, [
            "--no-env", "-p", "basic", "batch", str(passwords), "-o", str(output)
        ])
        assert result.exit_code == 1
        assert "3 audited" in result.output
        assert "Correct-Horse-9" not in result.output

        reports = json.loads(output.read_text(encoding="utf-8"))
        assert [r["line"] for r in reports] == [1, 3, 4]
        assert reports[0]["outcome"]["error"] == "too_short"
        assert reports[1]["outcome"]["complexity_name"] == "symbols_digits_mixed"
        assert reports[2]["severity"] == "medium"

    def test_batch_undecodable_file(self, runner, tmp_path):
        passwords = tmp_path / "passwords.txt"
        passwords.write_bytes(b"good\n\xff\xfebad\n")
        result = runner.invoke(cli, ["--no-env", "batch", str(passwords)])
        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeDecodeError)
        assert "Failed to read password file" in result.output

    def test_batch_all_accepted(self, runner, tmp_path):
        passwords = tmp_path / "passwords.txt"
        passwords.write_text("one\ntwo\n", encoding="utf-8")
        result = runner.invoke(cli, ["--no-env", "batch", str(passwords)])
        assert result.exit_code == 0
        assert "2 audited" in result.output


class TestPresetsCommand:
    def test_lists_presets(self, runner):
        result = runner.invoke(cli, ["--no-env", "presets"])
        assert result.exit_code == 0
        for name in ("none", "basic", "strict", "unicode"):
            assert name in result.output
