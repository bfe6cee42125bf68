"""Field validation: rule catalog, schema builder and validation engine.

Usage:
    from formrules.validation import Schema, validate

    schema = Schema().min(5).max(7).has_digit().has_symbol()
    result = validate("abc1$de", schema)
    if not result.is_valid:
        # Render result.errors next to the input
"""

from formrules.validation.engine import ValidationEngine, validation_engine, validate
from formrules.validation.models import (
    CompiledSchema,
    ErrorMessage,
    FieldResult,
    FormResult,
    LengthRule,
    MatchRule,
    PatternRule,
    Rule,
    RuleFamily,
    RuleKind,
    SchemaConfigurationError,
)
from formrules.validation.schema import Schema

__all__ = [
    "ValidationEngine",
    "validation_engine",
    "validate",
    "Schema",
    "CompiledSchema",
    "ErrorMessage",
    "FieldResult",
    "FormResult",
    "LengthRule",
    "MatchRule",
    "PatternRule",
    "Rule",
    "RuleFamily",
    "RuleKind",
    "SchemaConfigurationError",
]
