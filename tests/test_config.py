import logging
import os

import pytest

from passaudit import Complexity, Policy
from passaudit.config import (
    PRESETS,
    PolicyConfigParser,
    get_preset,
    load_policy,
    parse_bool,
    policy_from_env,
)


@pytest.fixture
def clean_env():
    """Remove PASSAUDIT_* variables set during the test, including by .env loading."""
    yield
    for name in list(os.environ):
        if name.startswith("PASSAUDIT_"):
            del os.environ[name]


class TestPresets:
    def test_known_presets(self):
        assert set(PRESETS) == {"none", "basic", "strict", "unicode"}
        assert get_preset("none") == Policy()
        strict = get_preset("strict")
        assert strict.min_length == 12
        assert strict.require_symbols
        assert strict.minimum_complexity == Complexity.SYMBOLS_DIGITS_MIXED

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Unknown preset"):
            get_preset("paranoid")


class TestPolicyConfigParser:
    def test_parse_key_values(self, tmp_path):
        config = tmp_path / "password.conf"
        config.write_text(
            "# password policy\n"
            "minlen=10\n"
            "\n"
            "; max length\n"
            "MAXLEN = 64\n"
            "require_digit=yes\n"
            "require_special=on\n"
            "minimum_complexity=symbols_mixed\n"
        )
        policy = PolicyConfigParser(str(config)).parse()
        assert policy == Policy(
            min_length=10,
            max_length=64,
            require_digits=True,
            require_symbols=True,
            minimum_complexity=Complexity.SYMBOLS_MIXED,
        )

    def test_pam_style_credits(self, tmp_path):
        config = tmp_path / "pwquality.conf"
        config.write_text("minlen=-9\nucredit=-1\nlcredit=0\ndcredit=0\nocredit=1\n")
        policy = PolicyConfigParser(str(config)).parse()
        assert policy.min_length == 9
        assert policy.require_upper is True
        assert policy.require_lower is False
        assert policy.require_digits is False
        assert policy.require_symbols is True

    def test_overrides_base(self, tmp_path):
        config = tmp_path / "password.conf"
        config.write_text("minlen=20\n")
        policy = PolicyConfigParser(str(config)).parse(base=get_preset("strict"))
        assert policy.min_length == 20
        assert policy.require_upper is True

    def test_skips_unknown_and_invalid(self, tmp_path, caplog):
        config = tmp_path / "password.conf"
        config.write_text("lockout=5\nminlen=abc\nrequire_upper=maybe\nnot a setting\n")
        with caplog.at_level(logging.DEBUG, logger="passaudit.config"):
            policy = PolicyConfigParser(str(config)).parse()
        assert policy == Policy()
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PolicyConfigParser(str(tmp_path / "missing.conf")).parse()

    def test_parse_bool(self):
        assert parse_bool("Enabled") is True
        assert parse_bool("off") is False
        assert parse_bool("-2") is True
        with pytest.raises(ValueError):
            parse_bool("sometimes")


class TestEnvironment:
    def test_overlay(self):
        environ = {
            "PASSAUDIT_MIN_LENGTH": "14",
            "PASSAUDIT_REQUIRE_EXTENDED": "true",
            "PASSAUDIT_MINIMUM_COMPLEXITY": "13",
            "PASSAUDIT_MAX_LENGTH": "",
            "UNRELATED": "1",
        }
        policy = policy_from_env(base=get_preset("basic"), environ=environ)
        assert policy.min_length == 14
        assert policy.max_length == 128
        assert policy.require_extended is True
        assert policy.require_lower is True
        assert policy.minimum_complexity == Complexity.EXTENDED_ONLY

    def test_invalid_value(self):
        with pytest.raises(ValueError, match="PASSAUDIT_REQUIRE_DIGITS"):
            policy_from_env(environ={"PASSAUDIT_REQUIRE_DIGITS": "perhaps"})


class TestLoadPolicy:
    def test_layers(self, tmp_path, monkeypatch, clean_env):
        config = tmp_path / "password.conf"
        config.write_text("minlen=16\n")
        monkeypatch.setenv("PASSAUDIT_MAX_LENGTH", "32")

        policy = load_policy(
            preset="strict",
            config_path=str(config),
            dotenv_path=str(tmp_path / "absent.env"),
        )
        assert policy.min_length == 16
        assert policy.max_length == 32
        assert policy.require_digits is True

    def test_dotenv_file(self, tmp_path, clean_env):
        dotenv = tmp_path / ".env"
        dotenv.write_text("PASSAUDIT_REQUIRE_UPPER=yes\n")
        policy = load_policy(dotenv_path=str(dotenv))
        assert policy.require_upper is True

    def test_environment_ignored(self, monkeypatch):
        monkeypatch.setenv("PASSAUDIT_MIN_LENGTH", "99")
        assert load_policy(preset="basic", use_env=False) == get_preset("basic")
