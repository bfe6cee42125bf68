"""Validation Engine: evaluates values against schemas and reports errors.

Three shapes of input are supported:

    validate("s3cret!", password_schema)             -> FieldResult
    validate({"password": "a", "confirm": "b"}, confirm_schema)
                                                     -> FormResult (match pair)
    validate(form_values, {"password": ..., ...})    -> FormResult (whole form)

Failed validation is returned as data and is never raised. Only a schema
that cannot compile raises (SchemaConfigurationError).
"""

import time
from collections.abc import Mapping
from typing import Optional, Union

import structlog

from formrules.validation import rules as catalog
from formrules.validation.models import CompiledSchema, FieldResult, FormResult
from formrules.validation.schema import Schema

logger = structlog.get_logger()

SchemaLike = Union[Schema, CompiledSchema]

EMPTY_VALUE = ""


class ValidationEngine:
    """Compiles schemas on demand and evaluates them.

    Design principles:
        - Deterministic: same input → same output
        - Exhaustive: every violated rule is reported, except that an empty
          required field reports only the required message
        - Observable: logs every form validation with timing
    """

    def validate(
        self,
        data: Union[str, Mapping[str, Optional[str]]],
        schema: Union[SchemaLike, Mapping[str, SchemaLike]],
    ) -> Union[FieldResult, FormResult]:
        """Validate a value, a matching pair or a whole form.

        Args:
            data: A single value, or a mapping of property name → value
            schema: A single schema, or a mapping of property name → schema

        Returns:
            FieldResult for a single value, FormResult otherwise

        Raises:
            TypeError: the shapes of data and schema do not fit together
            SchemaConfigurationError: a schema cannot be compiled
        """
        if isinstance(schema, Mapping):
            if not isinstance(data, Mapping):
                raise TypeError("A schema mapping must be validated against a mapping of values")
            return self.validate_form(data, schema)

        compiled = self._compile(schema)
        if isinstance(data, Mapping):
            if not compiled.matching_property:
                raise TypeError("Only a matching schema can validate a mapping of values")
            name = self._own_name(data, compiled.matching_property)
            return self.validate_matching(data, {name: compiled})

        if compiled.matching_property:
            raise TypeError(
                f"A schema matching '{compiled.matching_property}' needs a mapping of both values"
            )
        return self.validate_field(data, compiled)

    def validate_field(self, value: Optional[str], schema: SchemaLike) -> FieldResult:
        """Validate one value against one non-matching schema."""
        compiled = self._compile(schema)
        result = FieldResult.build(self._field_errors(value or EMPTY_VALUE, compiled))

        logger.debug(
            "field_validated",
            label=compiled.label,
            is_valid=result.is_valid,
            error_count=len(result.errors),
        )
        return result

    def validate_matching(
        self,
        values: Mapping[str, Optional[str]],
        schemas: Mapping[str, SchemaLike],
    ) -> FormResult:
        """Validate a pair of properties where one must equal the other.

        Args:
            values: Both property names mapped to their values
            schemas: The schemas of the pair; at least one must use ``matches``
        """
        compiled = {name: self._compile(schema) for name, schema in schemas.items()}
        if not any(schema.matching_property for schema in compiled.values()):
            raise TypeError("Matching validation needs a schema created with matches()")
        return self._evaluate(values, compiled)

    def validate_form(
        self,
        data: Mapping[str, Optional[str]],
        schemas: Mapping[str, SchemaLike],
    ) -> FormResult:
        """Validate every property in ``schemas``; missing values count as empty."""
        compiled = {name: self._compile(schema) for name, schema in schemas.items()}
        return self._evaluate(data, compiled)

    # ── Internals ──

    def _evaluate(
        self,
        data: Mapping[str, Optional[str]],
        compiled: Mapping[str, CompiledSchema],
    ) -> FormResult:
        start_time = time.perf_counter()

        errors: dict[str, list[str]] = {}
        for name, schema in compiled.items():
            value = data.get(name) or EMPTY_VALUE
            if schema.matching_property:
                errors[name] = self._match_errors(value, schema, data, compiled)
            else:
                errors[name] = self._field_errors(value, schema)

        result = FormResult.build(errors)

        duration = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "form_validated",
            is_valid=result.is_valid,
            properties=len(compiled),
            invalid_properties=sorted(result.errors),
            duration_ms=round(duration, 3),
        )
        return result

    @staticmethod
    def _compile(schema: SchemaLike) -> CompiledSchema:
        if isinstance(schema, CompiledSchema):
            return schema
        if isinstance(schema, Schema):
            return schema.compile()
        raise TypeError(f"Expected a Schema, got {type(schema).__name__}")

    @staticmethod
    def _own_name(values: Mapping[str, Optional[str]], partner: str) -> str:
        names = [name for name in values if name != partner]
        if len(names) != 1 or partner not in values:
            raise TypeError(
                f"Matching validation needs exactly two values, one of them for '{partner}'"
            )
        return names[0]

    @staticmethod
    def _field_errors(value: str, schema: CompiledSchema) -> list[str]:
        if schema.required and not value:
            return [schema.decorate(schema.required)]

        errors = []
        for rule in schema.rules:
            message = rule.check(value)
            if message is not None:
                errors.append(schema.decorate(message))
        return errors

    @staticmethod
    def _match_errors(
        value: str,
        schema: CompiledSchema,
        data: Mapping[str, Optional[str]],
        compiled: Mapping[str, CompiledSchema],
    ) -> list[str]:
        if schema.required and not value:
            return [schema.decorate(schema.required)]

        rule = schema.match_rule
        other = data.get(schema.matching_property) or EMPTY_VALUE
        if rule.test(value, other):
            return []

        message = rule.error
        partner = compiled.get(schema.matching_property)
        if schema.label and partner is not None and partner.label and not rule.custom_error:
            message = catalog.matches(value, partner.label).error
        return [schema.decorate(message)]


# Module-level singleton
validation_engine = ValidationEngine()


def validate(
    data: Union[str, Mapping[str, Optional[str]]],
    schema: Union[SchemaLike, Mapping[str, SchemaLike]],
) -> Union[FieldResult, FormResult]:
    """Shortcut for ``validation_engine.validate``."""
    return validation_engine.validate(data, schema)
