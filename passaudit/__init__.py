# =============================================================================
# passaudit - Password Strength Auditor
# =============================================================================
"""
Password strength auditing package.

This package provides functionality for:
- Auditing a password against length and character-class requirements
- Estimating entropy and a 15-level complexity tier
- Loading policies from presets, config files and the environment
- Generating JSON reports for audit outcomes
"""

from .auditor import (
    CharacterClasses,
    Complexity,
    ErrorKind,
    Outcome,
    PasswordPolicyError,
    Policy,
    audit,
    classify,
    generate_report,
)
from .config import PRESETS, PolicyConfigParser, get_preset, load_policy, policy_from_env

__version__ = "1.0.0"

__all__ = [
    "CharacterClasses",
    "Complexity",
    "ErrorKind",
    "Outcome",
    "PasswordPolicyError",
    "Policy",
    "audit",
    "classify",
    "generate_report",
    "PRESETS",
    "PolicyConfigParser",
    "get_preset",
    "load_policy",
    "policy_from_env",
]
