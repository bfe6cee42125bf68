"""formrules: declarative validation for web form fields.

Usage:
    from formrules import Schema, FormState, validate

    schema = {
        "password": Schema().min(8).has_digit().is_required(),
        "confirm_password": Schema().matches("password").is_required(),
    }
    result = validate({"password": "hunter22", "confirm_password": ""}, schema)
    # result.errors == {"confirm_password": ["is required"]}
"""

from formrules.form import FormState
from formrules.validation import (
    CompiledSchema,
    FieldResult,
    FormResult,
    Schema,
    SchemaConfigurationError,
    ValidationEngine,
    validate,
    validation_engine,
)

__all__ = [
    "FormState",
    "Schema",
    "CompiledSchema",
    "FieldResult",
    "FormResult",
    "SchemaConfigurationError",
    "ValidationEngine",
    "validate",
    "validation_engine",
]
