"""Rule catalog: the built-in rules a schema can attach.

Fixed rules are module constants. Parameterized rules are factories:

    min_length(8)          -> LengthRule, len(value) >= 8
    matches("", "password") -> MatchRule, value == other

Nothing here has side effects; schemas copy entries before changing them.
"""

import math
import re
from numbers import Real
from typing import Optional, Union

from formrules.validation.models import (
    ErrorMessage,
    LengthRule,
    MatchRule,
    PatternRule,
    RuleFamily,
    RuleKind,
)

DEFAULT_MIN = 0

REQUIRED_ERROR = "is required"

# Basic email shape: local@domain.tld, no deliverability check
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

DIGIT = PatternRule(
    kind=RuleKind.DIGIT,
    family=RuleFamily.CHARACTER_CLASS,
    pattern=re.compile(r"\d"),
    error="must contain at least one digit",
)

SYMBOL = PatternRule(
    kind=RuleKind.SYMBOL,
    family=RuleFamily.CHARACTER_CLASS,
    pattern=re.compile(r"[^A-Za-z0-9\s]"),
    error="must contain at least one special character",
)

UPPERCASE = PatternRule(
    kind=RuleKind.UPPERCASE,
    family=RuleFamily.CHARACTER_CLASS,
    pattern=re.compile(r"[A-Z]"),
    error="must contain at least one uppercase character",
)

LOWERCASE = PatternRule(
    kind=RuleKind.LOWERCASE,
    family=RuleFamily.CHARACTER_CLASS,
    pattern=re.compile(r"[a-z]"),
    error="must contain at least one lowercase character",
)

EMAIL = PatternRule(
    kind=RuleKind.EMAIL,
    family=RuleFamily.EMAIL,
    pattern=_EMAIL_RE,
    error="must be a valid email address",
)


def validate_length(value) -> None:
    """Reject anything but a non-negative real number.

    Raises:
        TypeError: value is not a number (bools included)
        ValueError: value is negative or NaN
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise TypeError(ErrorMessage.INVALID_LENGTH_TYPE.value)
    if math.isnan(value) or value < DEFAULT_MIN:
        raise ValueError(ErrorMessage.INVALID_NUMBER.value)


def validate_string_input(value, property_name: str) -> None:
    """Reject anything but a non-empty string.

    Raises:
        TypeError: value is not a string
        ValueError: value is empty
    """
    if not isinstance(value, str):
        raise TypeError(ErrorMessage.INVALID_STRING_TYPE.for_property(property_name))
    if not value:
        raise ValueError(ErrorMessage.EMPTY_PROPERTY.for_property(property_name))


def min_length(n: Union[int, float]) -> LengthRule:
    validate_length(n)
    return LengthRule(
        kind=RuleKind.MINIMUM,
        limit=n,
        error=f"must be at least {n} characters long",
    )


def max_length(n: Union[int, float]) -> LengthRule:
    validate_length(n)
    return LengthRule(
        kind=RuleKind.MAXIMUM,
        limit=n,
        error=f"must be at most {n} characters long",
    )


def matches(value: str, property_name: str) -> MatchRule:
    """Rule requiring equality with the value of ``property_name``.

    ``value`` is unused; the comparison value is supplied at test time.
    """
    validate_string_input(property_name, "Matching property")
    return MatchRule(property_name=property_name, error=f"must match {property_name}")


def pattern(regex: Union[str, re.Pattern], error: Optional[str] = None) -> PatternRule:
    """Rule requiring ``regex`` to match somewhere in the value."""
    if isinstance(regex, str):
        validate_string_input(regex, "Pattern")
        regex = re.compile(regex)
    elif not isinstance(regex, re.Pattern):
        raise TypeError(ErrorMessage.INVALID_STRING_TYPE.for_property("Pattern"))

    return PatternRule(
        kind=RuleKind.PATTERN,
        family=RuleFamily.PATTERN,
        pattern=regex,
        error=error or f"must match pattern: {regex.pattern}",
    )
