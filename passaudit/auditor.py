# =============================================================================
# passaudit - Password Strength Auditor
# =============================================================================
"""
Password Strength Auditing Module

Evaluates a candidate password against a configurable policy and reports
a strength assessment.

Features:
- Enforce length bounds (measured in Unicode code points)
- Enforce required character classes (digits, lower, upper, symbols,
  extended Unicode letters)
- Estimate entropy as length * log2(alphabet size)
- Derive one of 15 ordered complexity tiers and gate "strong" on it
- Generate JSON reports for audit outcomes

Usage:
    from passaudit import Policy, audit

    outcome = audit("pass1234", Policy(min_length=8, require_digits=True))
    if outcome.ok:
        print(outcome.complexity.name, outcome.entropy)
"""

import logging
import math
import unicodedata
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# Character Classes
# =============================================================================

DIGITS = "0123456789"
LOWERCASE = "abcdefghijklmnopqrstuvwxyz"
UPPERCASE = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
SYMBOLS = "!@#$%^&*()-_=+[]{}|;:'\",.<>?/`~"

# Rough estimate for Unicode letters beyond ASCII
EXTENDED_CHARSET_SIZE = 100

_DIGIT_SET = frozenset(DIGITS)
_LOWER_SET = frozenset(LOWERCASE)
_UPPER_SET = frozenset(UPPERCASE)
_SYMBOL_SET = frozenset(SYMBOLS)

MAX_ASCII = 127


class Complexity(IntEnum):
    """
    Ordered complexity tiers, weakest first.

    Values are part of the contract: policies compare against them with >=.
    """

    DIGITS_ONLY = 0
    LOWER_ONLY = 1
    UPPER_ONLY = 2
    LOWER_DIGITS = 3
    UPPER_DIGITS = 4
    MIXED_ONLY = 5
    DIGITS_MIXED = 6
    SYMBOLS_ONLY = 7
    SYMBOLS_DIGITS = 8
    SYMBOLS_UPPER = 9
    SYMBOLS_LOWER = 10
    SYMBOLS_MIXED = 11
    SYMBOLS_DIGITS_MIXED = 12
    EXTENDED_ONLY = 13
    EXTENDED_MIXED = 14

    @classmethod
    def parse(cls, value: Any) -> "Complexity":
        """
        Resolve a tier from an int, a digit string or a tier name.

        Raises:
            ValueError: If the value names no tier
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid complexity tier: {value!r}")
        if isinstance(value, int):
            return cls(value)

        text = str(value).strip()
        if text.lstrip("-").isdigit():
            return cls(int(text))
        try:
            return cls[text.upper().replace("-", "_")]
        except KeyError:
            raise ValueError(f"Invalid complexity tier: {value!r}") from None


class ErrorKind(str, Enum):
    """Policy violations reported by an audit."""

    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    MISSING_DIGITS = "missing_digits"
    MISSING_LOWER = "missing_lower"
    MISSING_UPPER = "missing_upper"
    MISSING_SYMBOLS = "missing_symbols"
    MISSING_EXTENDED = "missing_extended"

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]


_ERROR_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.TOO_SHORT: "password too short",
    ErrorKind.TOO_LONG: "password too long",
    ErrorKind.MISSING_DIGITS: "password must contain digits",
    ErrorKind.MISSING_LOWER: "password must contain lowercase letters",
    ErrorKind.MISSING_UPPER: "password must contain uppercase letters",
    ErrorKind.MISSING_SYMBOLS: "password must contain symbols",
    ErrorKind.MISSING_EXTENDED: "password must contain extended Unicode characters",
}


class PasswordPolicyError(ValueError):
    """Raised by Outcome.raise_for_error() when a password violates a policy."""

    def __init__(self, kind: ErrorKind) -> None:
        super().__init__(kind.message)
        self.kind = kind


# =============================================================================
# Policy and Outcome Data Classes
# =============================================================================

@dataclass(frozen=True)
class Policy:
    """
    Requirements a password is audited against.

    A default Policy imposes no length bounds and no character classes.
    max_length of 0 means no upper bound.
    """
    min_length: int = 0
    max_length: int = 0
    require_digits: bool = False
    require_lower: bool = False
    require_upper: bool = False
    require_symbols: bool = False
    require_extended: bool = False
    minimum_complexity: int = 0

    def __post_init__(self) -> None:
        if self.min_length < 0:
            raise ValueError(f"min_length must be non-negative, got {self.min_length}")
        if self.max_length < 0:
            raise ValueError(f"max_length must be non-negative, got {self.max_length}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert policy to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class CharacterClasses:
    """Which character classes occur in a password."""
    digits: bool = False
    lower: bool = False
    upper: bool = False
    symbols: bool = False
    extended: bool = False

    @property
    def any_ascii(self) -> bool:
        return self.digits or self.lower or self.upper or self.symbols


@dataclass(frozen=True)
class Outcome:
    """
    Result of a single audit.

    When error is set the audit stopped early and only length is
    meaningful; the remaining fields keep their defaults.
    """
    length: int
    entropy: float = 0.0
    strong: bool = False
    complexity: Complexity = Complexity.DIGITS_ONLY
    has_extended: bool = False
    error: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> "Outcome":
        """
        Raise PasswordPolicyError if the audit failed.

        Returns:
            The outcome itself, for chaining
        """
        if self.error is not None:
            raise PasswordPolicyError(self.error)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert outcome to dictionary for JSON serialization."""
        return {
            "length": self.length,
            "entropy": self.entropy,
            "strong": self.strong,
            "complexity": int(self.complexity),
            "complexity_name": self.complexity.name.lower(),
            "has_extended": self.has_extended,
            "error": self.error.value if self.error else None,
        }


# =============================================================================
# Classification, Entropy and Complexity
# =============================================================================

def is_extended(char: str) -> bool:
    """True for letters outside the ASCII range."""
    return ord(char) > MAX_ASCII and unicodedata.category(char).startswith("L")


def classify(password: str) -> CharacterClasses:
    """Scan the password once and report which character classes occur."""
    digits = lower = upper = symbols = extended = False

    for char in password:
        if char in _DIGIT_SET:
            digits = True
        elif char in _LOWER_SET:
            lower = True
        elif char in _UPPER_SET:
            upper = True
        elif char in _SYMBOL_SET:
            symbols = True
        elif not extended and is_extended(char):
            extended = True

    return CharacterClasses(
        digits=digits,
        lower=lower,
        upper=upper,
        symbols=symbols,
        extended=extended,
    )


def charset_size(classes: CharacterClasses) -> int:
    """Estimate the alphabet size from the classes present."""
    size = 0
    if classes.digits:
        size += len(DIGITS)
    if classes.lower:
        size += len(LOWERCASE)
    if classes.upper:
        size += len(UPPERCASE)
    if classes.symbols:
        size += len(SYMBOLS)
    if classes.extended:
        size += EXTENDED_CHARSET_SIZE
    return size


def estimate_entropy(length: int, size: int) -> float:
    """
    Entropy estimate in bits: length * log2(size).

    An empty alphabet carries no information, so size 0 gives 0.0.
    """
    if size <= 0:
        return 0.0
    return length * math.log2(size)


def complexity_for(classes: CharacterClasses) -> Complexity:
    """
    Map the classes present to a complexity tier.

    Branches are checked in priority order and the first match wins, so
    overlapping combinations resolve by position rather than by how many
    classes are present (symbols+digits+lower is SYMBOLS_DIGITS).
    """
    digits, lower, upper, symbols = (
        classes.digits, classes.lower, classes.upper, classes.symbols
    )

    if classes.extended and not classes.any_ascii:
        return Complexity.EXTENDED_ONLY
    if classes.extended:
        return Complexity.EXTENDED_MIXED
    if symbols and digits and lower and upper:
        return Complexity.SYMBOLS_DIGITS_MIXED
    if symbols and digits:
        return Complexity.SYMBOLS_DIGITS
    if symbols and lower and upper:
        return Complexity.SYMBOLS_MIXED
    if symbols and lower:
        return Complexity.SYMBOLS_LOWER
    if symbols and upper:
        return Complexity.SYMBOLS_UPPER
    if symbols:
        return Complexity.SYMBOLS_ONLY
    if digits and lower and upper:
        return Complexity.DIGITS_MIXED
    if lower and digits:
        return Complexity.LOWER_DIGITS
    if upper and digits:
        return Complexity.UPPER_DIGITS
    if lower and upper:
        return Complexity.MIXED_ONLY
    if digits:
        return Complexity.DIGITS_ONLY
    if lower:
        return Complexity.LOWER_ONLY
    if upper:
        return Complexity.UPPER_ONLY
    # Nothing classifiable; fall back to the weakest tier
    return Complexity.DIGITS_ONLY


def _missing_requirement(
    policy: Policy,
    classes: CharacterClasses
) -> Optional[ErrorKind]:
    """Return the first required class that is absent, in fixed order."""
    if policy.require_digits and not classes.digits:
        return ErrorKind.MISSING_DIGITS
    if policy.require_lower and not classes.lower:
        return ErrorKind.MISSING_LOWER
    if policy.require_upper and not classes.upper:
        return ErrorKind.MISSING_UPPER
    if policy.require_symbols and not classes.symbols:
        return ErrorKind.MISSING_SYMBOLS
    if policy.require_extended and not classes.extended:
        return ErrorKind.MISSING_EXTENDED
    return None


# =============================================================================
# Auditor
# =============================================================================

def audit(password: str, policy: Optional[Policy] = None) -> Outcome:
    """
    Audit a password against a policy.

    Args:
        password: Candidate password; any Unicode string, including empty
        policy: Requirements to enforce (defaults to Policy())

    Returns:
        Outcome with entropy, complexity and verdict, or with error set
        when the policy was violated

    Raises:
        TypeError: If password is not a str
    """
    if not isinstance(password, str):
        raise TypeError(f"password must be str, not {type(password).__name__}")
    if policy is None:
        policy = Policy()

    length = len(password)

    if length < policy.min_length:
        return _rejected(length, ErrorKind.TOO_SHORT)

    if policy.max_length > 0 and length > policy.max_length:
        return _rejected(length, ErrorKind.TOO_LONG)

    classes = classify(password)

    missing = _missing_requirement(policy, classes)
    if missing is not None:
        return _rejected(length, missing)

    entropy = estimate_entropy(length, charset_size(classes))
    complexity = complexity_for(classes)
    strong = complexity >= policy.minimum_complexity

    logger.debug(
        f"Audit complete: length={length}, complexity={complexity.name}, "
        f"entropy={entropy:.2f}, strong={strong}"
    )
    return Outcome(
        length=length,
        entropy=entropy,
        strong=strong,
        complexity=complexity,
        has_extended=classes.extended,
    )


def _rejected(length: int, kind: ErrorKind) -> Outcome:
    logger.debug(f"Audit rejected: length={length}, error={kind.value}")
    return Outcome(length=length, error=kind)


# =============================================================================
# Reports
# =============================================================================

def generate_report(outcome: Outcome, policy: Policy) -> Dict[str, Any]:
    """
    Generate a JSON report from an audit outcome.

    Args:
        outcome: Outcome returned by audit()
        policy: Policy the password was audited against

    Returns:
        Report dictionary suitable for JSON output
    """
    if not outcome.ok:
        severity = "high"
    elif not outcome.strong:
        severity = "medium"
    else:
        severity = "low"

    return {
        "module": "password",
        "type": "strength_audit",
        "severity": severity,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "accepted": outcome.ok,
        "message": outcome.error.message if outcome.error else "password accepted",
        "outcome": outcome.to_dict(),
        "policy": policy.to_dict(),
    }
