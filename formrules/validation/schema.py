"""Schema builder: fluent, immutable description of one form field.

Every builder call returns a new Schema; the receiver is never changed, so a
base schema can be extended in several directions:

    password = Schema().min(8).max(64).has_digit().is_required()
    admin_password = password.has_symbol().label("Admin password")

``compile()`` resolves default bounds, checks that the rules can be
satisfied together and returns a frozen CompiledSchema. The validation
engine compiles automatically.
"""

import re
from typing import Optional, Union

import structlog

from formrules.config import get_settings
from formrules.validation import rules as catalog
from formrules.validation.models import (
    CHARACTER_CLASS_KINDS,
    CompiledSchema,
    ErrorMessage,
    LengthRule,
    Rule,
    RuleKind,
    SchemaConfigurationError,
)

logger = structlog.get_logger()

Number = Union[int, float]


class Schema:
    """Builder for the validation rules of a single property."""

    def __init__(self):
        self._rules: dict[RuleKind, Rule] = {}
        self._minimum: Optional[LengthRule] = None
        self._maximum: Optional[LengthRule] = None
        self._label: Optional[str] = None
        self._required: Optional[str] = None
        self._matching_property: Optional[str] = None

    def _replace(self, **changes) -> "Schema":
        clone = Schema.__new__(Schema)
        clone.__dict__.update(self.__dict__)
        clone._rules = dict(self._rules)
        for key, value in changes.items():
            setattr(clone, f"_{key}", value)
        return clone

    def _with_rule(self, rule: Rule, custom_error: Optional[str]) -> "Schema":
        clone = self._replace()
        # Re-setting a kind keeps its original position
        clone._rules[rule.kind] = rule.with_error(custom_error)
        return clone

    def __repr__(self) -> str:
        kinds = ", ".join(kind.value for kind in self._rules)
        return (
            f"Schema(label={self._label!r}, minimum={self.minimum}, maximum={self.maximum}, "
            f"rules=[{kinds}], required={self.required})"
        )

    # ── Length bounds ──

    def min(self, value: Number, custom_error: Optional[str] = None) -> "Schema":
        """Minimum number of characters.

        Raises:
            TypeError: value is not a number
            ValueError: value is negative
        """
        return self._replace(minimum=catalog.min_length(value).with_error(custom_error))

    @property
    def minimum(self) -> Number:
        """Explicit minimum, else the required-character count."""
        if self._minimum is not None:
            return self._minimum.limit
        return self.required_character_count

    def max(self, value: Number, custom_error: Optional[str] = None) -> "Schema":
        """Maximum number of characters.

        Raises:
            TypeError: value is not a number
            ValueError: value is negative
        """
        return self._replace(maximum=catalog.max_length(value).with_error(custom_error))

    @property
    def maximum(self) -> Number:
        """Explicit maximum, else the configured default."""
        if self._maximum is not None:
            return self._maximum.limit
        return get_settings().DEFAULT_MAX_LENGTH

    # ── Character classes ──

    def has_digit(self, custom_error: Optional[str] = None) -> "Schema":
        return self._with_rule(catalog.DIGIT, custom_error)

    @property
    def digit(self) -> bool:
        return RuleKind.DIGIT in self._rules

    def has_symbol(self, custom_error: Optional[str] = None) -> "Schema":
        return self._with_rule(catalog.SYMBOL, custom_error)

    @property
    def symbol(self) -> bool:
        return RuleKind.SYMBOL in self._rules

    def has_uppercase(self, custom_error: Optional[str] = None) -> "Schema":
        return self._with_rule(catalog.UPPERCASE, custom_error)

    @property
    def uppercase(self) -> bool:
        return RuleKind.UPPERCASE in self._rules

    def has_lowercase(self, custom_error: Optional[str] = None) -> "Schema":
        return self._with_rule(catalog.LOWERCASE, custom_error)

    @property
    def lowercase(self) -> bool:
        return RuleKind.LOWERCASE in self._rules

    def has_pattern(self, regex: Union[str, re.Pattern], custom_error: Optional[str] = None) -> "Schema":
        """Value must contain a match for ``regex``."""
        return self._with_rule(catalog.pattern(regex), custom_error)

    @property
    def pattern(self) -> bool:
        return RuleKind.PATTERN in self._rules

    @property
    def required_character_count(self) -> int:
        """Number of character-class rules; each needs at least one character."""
        return sum(1 for kind in CHARACTER_CLASS_KINDS if kind in self._rules)

    # ── Label, email, required, matching ──

    def label(self, name: str) -> "Schema":
        """Set the label prepended to this property's error messages.

        Raises:
            TypeError: name is not a string
            ValueError: name is empty
        """
        catalog.validate_string_input(name, "Label")
        return self._replace(label=name)

    @property
    def alias(self) -> Optional[str]:
        return self._label

    def is_email(self, custom_error: Optional[str] = None) -> "Schema":
        """Validate as an email address. Length and character rules are dropped on compile."""
        return self._with_rule(catalog.EMAIL, custom_error)

    @property
    def email(self) -> bool:
        return RuleKind.EMAIL in self._rules

    def is_required(self, custom_error: Optional[str] = None) -> "Schema":
        return self._replace(required=custom_error or catalog.REQUIRED_ERROR)

    @property
    def required(self) -> bool:
        return self._required is not None

    def matches(self, name: str, custom_error: Optional[str] = None) -> "Schema":
        """Value must equal the value of property ``name``.

        Every other rule except ``is_required`` is dropped on compile.

        Raises:
            TypeError: name is not a string
            ValueError: name is empty
        """
        rule = catalog.matches("", name)
        clone = self._with_rule(rule, custom_error)
        clone._matching_property = name
        return clone

    @property
    def matching_property(self) -> Optional[str]:
        return self._matching_property

    # ── Compilation ──

    def compile(self) -> CompiledSchema:
        """Resolve defaults, check rule consistency and freeze the schema.

        Rule families are exclusive in priority order: a match rule discards
        everything else, then an email rule discards length and character
        rules. Otherwise the rules are minimum, maximum, then the rest in the
        order they were first added.

        Raises:
            SchemaConfigurationError: minimum exceeds maximum, or a bound is
                below the number of required characters
        """
        if self._matching_property:
            return CompiledSchema(
                label=self._label,
                required=self._required,
                matching_property=self._matching_property,
                rules=(self._rules[RuleKind.MATCHING_PROPERTY],),
            )

        if RuleKind.EMAIL in self._rules:
            return CompiledSchema(
                label=self._label,
                required=self._required,
                rules=(self._rules[RuleKind.EMAIL],),
            )

        required_chars = self.required_character_count
        minimum = self._minimum or catalog.min_length(required_chars)
        maximum = self._maximum or catalog.max_length(get_settings().DEFAULT_MAX_LENGTH)

        if minimum.limit > maximum.limit:
            raise SchemaConfigurationError(ErrorMessage.MIN_OVER_MAX)

        if minimum.limit < required_chars or maximum.limit < required_chars:
            raise SchemaConfigurationError(ErrorMessage.BOUND_BELOW_REQUIRED)

        others = tuple(
            rule for kind, rule in self._rules.items()
            if kind not in (RuleKind.EMAIL, RuleKind.MATCHING_PROPERTY)
        )

        logger.debug(
            "schema_compiled",
            label=self._label,
            minimum=minimum.limit,
            maximum=maximum.limit,
            rules=[rule.kind.value for rule in others],
        )

        return CompiledSchema(
            label=self._label,
            required=self._required,
            rules=(minimum, maximum) + others,
        )
