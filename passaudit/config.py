# =============================================================================
# passaudit - Policy Configuration
# =============================================================================
"""
Policy configuration: named presets, key=value policy files and
environment overrides.

A policy is assembled in layers: a preset, then a config file, then
PASSAUDIT_* environment variables (optionally loaded from a .env file).

Example config file:
    # /etc/passaudit.conf
    minlen=12
    ucredit=-1
    require_symbols=yes
    minimum_complexity=symbols_mixed
"""

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .auditor import Complexity, Policy

logger = logging.getLogger(__name__)


# =============================================================================
# Presets
# =============================================================================

PRESETS: Dict[str, Policy] = {
    "none": Policy(),
    "basic": Policy(
        min_length=8,
        max_length=128,
        require_lower=True,
        minimum_complexity=Complexity.DIGITS_MIXED,
    ),
    "strict": Policy(
        min_length=12,
        max_length=128,
        require_digits=True,
        require_lower=True,
        require_upper=True,
        require_symbols=True,
        minimum_complexity=Complexity.SYMBOLS_DIGITS_MIXED,
    ),
    "unicode": Policy(
        min_length=8,
        max_length=128,
        require_extended=True,
        minimum_complexity=Complexity.EXTENDED_ONLY,
    ),
}


def get_preset(name: str) -> Policy:
    """
    Look up a named preset.

    Raises:
        ValueError: If no preset has that name
    """
    try:
        return PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown preset: {name}. Available: {list(PRESETS.keys())}"
        ) from None


# =============================================================================
# Value Conversion
# =============================================================================

TRUE_VALUES = {"yes", "true", "1", "on", "enabled", "require"}
FALSE_VALUES = {"no", "false", "0", "off", "disabled"}


def parse_bool(value: str) -> bool:
    """
    Convert a config value to a boolean.

    PAM-style credits are accepted: a negative number means required.

    Raises:
        ValueError: If the value is not recognised
    """
    value_lower = value.strip().lower()
    if value_lower in TRUE_VALUES:
        return True
    if value_lower in FALSE_VALUES:
        return False
    try:
        return int(value_lower) < 0
    except ValueError:
        raise ValueError(f"Invalid boolean value '{value}'") from None


def parse_int(value: str) -> int:
    """Convert a config value to a non-negative int (PAM negatives use abs)."""
    try:
        return abs(int(value.strip()))
    except ValueError:
        raise ValueError(f"Invalid integer value '{value}'") from None


def convert_value(attr: str, value: str) -> Any:
    """Convert a raw string to the type of the given Policy attribute."""
    if attr == "minimum_complexity":
        return Complexity.parse(value)
    if attr.startswith("require_"):
        return parse_bool(value)
    return parse_int(value)


# =============================================================================
# Policy Configuration Parser
# =============================================================================

class PolicyConfigParser:
    """
    Parser for password policy configuration files.

    Supports key=value format with common key names:
    - minlen / min_length: Minimum password length
    - maxlen / max_length: Maximum password length (0 = unbounded)
    - require_digit / dcredit: Require digits
    - require_lower / lcredit: Require lowercase letters
    - require_upper / ucredit: Require uppercase letters
    - require_symbols / require_special / ocredit: Require symbols
    - require_extended / unicode: Require non-ASCII letters
    - minimum_complexity / complexity: Tier number or name
    """

    KEY_MAPPING: Dict[str, str] = {
        # Length settings
        "minlen": "min_length",
        "min_length": "min_length",
        "minlength": "min_length",
        "maxlen": "max_length",
        "max_length": "max_length",
        "maxlength": "max_length",
        # Character class settings
        "require_digit": "require_digits",
        "require_digits": "require_digits",
        "dcredit": "require_digits",
        "digits": "require_digits",
        "require_lower": "require_lower",
        "lcredit": "require_lower",
        "lowercase": "require_lower",
        "require_upper": "require_upper",
        "ucredit": "require_upper",
        "uppercase": "require_upper",
        "require_symbols": "require_symbols",
        "require_special": "require_symbols",
        "ocredit": "require_symbols",
        "special": "require_symbols",
        "require_extended": "require_extended",
        "extended": "require_extended",
        "unicode": "require_extended",
        # Strength gate
        "minimum_complexity": "minimum_complexity",
        "min_complexity": "minimum_complexity",
        "complexity": "minimum_complexity",
    }

    def __init__(self, config_path: str) -> None:
        """
        Initialize the parser.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)

    def parse(self, base: Optional[Policy] = None) -> Policy:
        """
        Parse the configuration file into a Policy.

        Args:
            base: Policy whose values are overridden by the file

        Returns:
            Policy with parsed settings

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If the file cannot be read
        """
        if not self.config_path.exists():
            logger.error(f"Config file not found: {self.config_path}")
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        logger.info(f"Parsing policy config: {self.config_path}")

        settings: Dict[str, Any] = {}
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                for line_num, line in enumerate(f, 1):
                    line = line.strip()

                    # Skip empty lines and comments
                    if not line or line.startswith("#") or line.startswith(";"):
                        continue

                    if "=" in line:
                        key, value = line.split("=", 1)
                        self._apply_setting(
                            settings, key.strip().lower(), value.strip(), line_num
                        )
                    else:
                        logger.debug(f"Line {line_num}: Invalid format, skipping: {line}")
        except (IOError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read config file: {e}")
            raise ValueError(f"Failed to read config file: {e}")

        policy = replace(base or Policy(), **settings)
        logger.info(
            f"Parsed policy: min_length={policy.min_length}, "
            f"max_length={policy.max_length}"
        )
        return policy

    def _apply_setting(
        self,
        settings: Dict[str, Any],
        key: str,
        value: str,
        line_num: int
    ) -> None:
        attr = self.KEY_MAPPING.get(key)

        if not attr:
            logger.debug(f"Line {line_num}: Unknown key '{key}', skipping")
            return

        try:
            settings[attr] = convert_value(attr, value)
        except ValueError as e:
            logger.warning(f"Line {line_num}: {e} for '{key}'")


# =============================================================================
# Environment Overrides
# =============================================================================

ENV_PREFIX = "PASSAUDIT_"

ENV_FIELDS = (
    "min_length",
    "max_length",
    "require_digits",
    "require_lower",
    "require_upper",
    "require_symbols",
    "require_extended",
    "minimum_complexity",
)


def policy_from_env(
    base: Optional[Policy] = None,
    environ: Optional[Mapping[str, str]] = None
) -> Policy:
    """
    Overlay PASSAUDIT_* environment variables onto a policy.

    Raises:
        ValueError: If a variable holds an invalid value
    """
    if environ is None:
        environ = os.environ

    settings: Dict[str, Any] = {}
    for attr in ENV_FIELDS:
        name = ENV_PREFIX + attr.upper()
        raw = environ.get(name)
        if raw is None or not raw.strip():
            continue
        try:
            settings[attr] = convert_value(attr, raw)
        except ValueError as e:
            raise ValueError(f"{name}: {e}") from None
        logger.debug(f"Environment override: {name}")

    return replace(base or Policy(), **settings)


def load_policy(
    preset: str = "none",
    config_path: Optional[str] = None,
    use_env: bool = True,
    dotenv_path: Optional[str] = None
) -> Policy:
    """
    Build a policy from a preset, a config file and the environment.

    Args:
        preset: Name of the starting preset
        config_path: Optional key=value policy file
        use_env: Apply PASSAUDIT_* environment variables
        dotenv_path: .env file to load before reading the environment
                     (searched for from the working directory when omitted)

    Returns:
        The assembled Policy
    """
    policy = get_preset(preset)
    logger.debug(f"Starting from preset: {preset}")

    if config_path:
        policy = PolicyConfigParser(config_path).parse(base=policy)

    if use_env:
        load_dotenv(dotenv_path=dotenv_path or find_dotenv(usecwd=True))
        policy = policy_from_env(base=policy)

    return policy
