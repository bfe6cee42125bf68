"""Validation models: rule kinds, rule variants, compiled schemas and results.

Rules are frozen. A schema that needs a different message gets a copy
through ``with_error``, so catalog entries can be shared between schemas.
"""

import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RuleKind(str, Enum):
    """Name of a rule slot in a schema. One rule per kind."""

    MINIMUM = "minimum"
    MAXIMUM = "maximum"
    DIGIT = "digit"
    SYMBOL = "symbol"
    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    PATTERN = "pattern"
    EMAIL = "email"
    MATCHING_PROPERTY = "matching_property"


class RuleFamily(str, Enum):
    """Variant tag used by compilation to pick which rules survive."""

    LENGTH = "length"
    CHARACTER_CLASS = "character_class"
    PATTERN = "pattern"
    EMAIL = "email"
    MATCH = "match"


# Kinds counted when deriving the minimum length
CHARACTER_CLASS_KINDS = (
    RuleKind.DIGIT,
    RuleKind.SYMBOL,
    RuleKind.UPPERCASE,
    RuleKind.LOWERCASE,
)


class ErrorMessage(str, Enum):
    """Messages for schema construction and compilation errors."""

    INVALID_NUMBER = "Length must be a non-negative number"
    INVALID_LENGTH_TYPE = "Length must be a number"
    INVALID_STRING_TYPE = "PROPERTY must be a string"
    EMPTY_PROPERTY = "PROPERTY cannot be an empty string"
    MIN_OVER_MAX = "Minimum length cannot be greater than maximum length"
    BOUND_BELOW_REQUIRED = (
        "Minimum and maximum length cannot be less than the number of required characters"
    )

    def for_property(self, name: str) -> str:
        return self.value.replace("PROPERTY", name)


class SchemaConfigurationError(ValueError):
    """Raised by ``Schema.compile()`` when rules contradict each other."""

    def __init__(self, code: ErrorMessage):
        super().__init__(code.value)
        self.code = code


class Rule(BaseModel, ABC):
    """A single named predicate plus the message shown when it fails."""

    model_config = ConfigDict(frozen=True)

    kind: RuleKind
    family: RuleFamily
    error: str

    @abstractmethod
    def test(self, value: str, other: Optional[str] = None) -> bool:
        """True if the value passes; ``other`` is the value to compare against, if any."""
        ...

    def check(self, value: str, other: Optional[str] = None) -> Optional[str]:
        """Return the error message, or None if the value passes."""
        return None if self.test(value, other) else self.error

    def with_error(self, error: Optional[str]) -> "Rule":
        """Copy of this rule with ``error`` as its message, if one is given."""
        if not error:
            return self
        return self.model_copy(update={"error": error})


class LengthRule(Rule):
    family: Literal[RuleFamily.LENGTH] = RuleFamily.LENGTH
    limit: Union[int, float]

    def test(self, value: str, other: Optional[str] = None) -> bool:
        if self.kind == RuleKind.MINIMUM:
            return len(value) >= self.limit
        return len(value) <= self.limit


class PatternRule(Rule):
    family: Literal[RuleFamily.CHARACTER_CLASS, RuleFamily.PATTERN, RuleFamily.EMAIL]
    pattern: re.Pattern

    def test(self, value: str, other: Optional[str] = None) -> bool:
        return self.pattern.search(value) is not None


class MatchRule(Rule):
    family: Literal[RuleFamily.MATCH] = RuleFamily.MATCH
    kind: Literal[RuleKind.MATCHING_PROPERTY] = RuleKind.MATCHING_PROPERTY
    property_name: str
    custom_error: bool = False

    def test(self, value: str, other: Optional[str] = None) -> bool:
        return value == (other or "")

    def with_error(self, error: Optional[str]) -> "MatchRule":
        if not error:
            return self
        return self.model_copy(update={"error": error, "custom_error": True})


# Any concrete rule, discriminated by family
AnyRule = Annotated[Union[LengthRule, PatternRule, MatchRule], Field(discriminator="family")]


class CompiledSchema(BaseModel):
    """The finalized, immutable output of ``Schema.compile()``."""

    model_config = ConfigDict(frozen=True)

    label: Optional[str] = None
    required: Optional[str] = Field(default=None, description="Required message; None if optional")
    matching_property: Optional[str] = None
    rules: tuple[AnyRule, ...] = ()

    @property
    def match_rule(self) -> Optional[MatchRule]:
        for rule in self.rules:
            if isinstance(rule, MatchRule):
                return rule
        return None

    def decorate(self, message: str) -> str:
        """Prefix a message with the schema label, if any."""
        return f"{self.label} {message}" if self.label else message


class FieldResult(BaseModel):
    """Outcome of validating one value."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def build(cls, errors: list[str]) -> "FieldResult":
        return cls(is_valid=not errors, errors=errors)

    def __bool__(self) -> bool:
        return self.is_valid


class FormResult(BaseModel):
    """Outcome of validating several properties, keyed by property name."""

    is_valid: bool
    errors: dict[str, list[str]] = Field(default_factory=dict)

    @classmethod
    def build(cls, errors: dict[str, list[str]]) -> "FormResult":
        errors = {name: messages for name, messages in errors.items() if messages}
        return cls(is_valid=not errors, errors=errors)

    def __bool__(self) -> bool:
        return self.is_valid
