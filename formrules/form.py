"""Form state: values, errors and submit handling for a schema mapping.

The object a UI layer binds its inputs to:

    form = FormState(signup_schema())
    form.change("password", "s3cr$t")     # re-validates password (+ partner)
    if form.submit(create_account):
        ...
    form.errors        # {"confirm_password": ["MUST MATCH"]}
    form.submit_error  # message of an exception raised by the callback

A FormState is mutable and belongs to one caller at a time.
"""

import inspect
from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Optional, Union

import structlog

from formrules.validation.engine import EMPTY_VALUE, validation_engine
from formrules.validation.schema import Schema

logger = structlog.get_logger()

SubmitCallback = Callable[[], Union[Any, Awaitable[Any]]]


class FormState:
    """Values and per-property errors of a form described by ``schema``."""

    def __init__(
        self,
        schema: Mapping[str, Schema],
        initial_values: Optional[Mapping[str, str]] = None,
    ):
        self.schema = dict(schema)
        self._initial_values = dict(initial_values) if initial_values else None
        self.values: dict[str, str] = {}
        self.errors: dict[str, list[str]] = {}
        self.submit_error: str = EMPTY_VALUE
        self.reset()

    def reset(self) -> None:
        """Restore the initial values and clear every error."""
        if self._initial_values is not None:
            self.values = dict(self._initial_values)
        else:
            self.values = {name: EMPTY_VALUE for name in self.schema}
        self.errors = {}
        self.submit_error = EMPTY_VALUE

    def change(self, name: str, value: str) -> dict[str, list[str]]:
        """Store a new value and re-validate that property.

        If the property is half of a matching pair, both halves are
        re-validated and their previous errors replaced.

        Returns:
            The errors of the whole form after the change

        Raises:
            KeyError: the form has no property called ``name``
        """
        if name not in self.schema:
            raise KeyError(f"Unknown form property: '{name}'")

        self.values[name] = value
        partner = self.matching_partner(name)

        if partner is None:
            result = validation_engine.validate_field(value, self.schema[name])
            if result.is_valid:
                self.errors.pop(name, None)
            else:
                self.errors[name] = result.errors
            return self.errors

        schemas = {name: self.schema[name]}
        # A partner without a schema only supplies the value to compare against
        if partner in self.schema:
            schemas[partner] = self.schema[partner]

        self.errors.pop(name, None)
        self.errors.pop(partner, None)
        result = validation_engine.validate_matching(
            {name: value, partner: self.values.get(partner, EMPTY_VALUE)},
            schemas,
        )
        self.errors.update(result.errors)
        return self.errors

    def matching_partner(self, name: str) -> Optional[str]:
        """Property this one must match, or that must match this one."""
        own = self.schema[name].matching_property
        if own:
            return own

        for other, schema in self.schema.items():
            if other != name and schema.matching_property == name:
                return other
        return None

    def submit(self, callback: Callable[[], Any]) -> bool:
        """Validate the whole form, then call ``callback`` if it is valid.

        An exception raised by the callback is stored in ``submit_error``.

        Returns:
            True if the form was valid and the callback completed
        """
        if not self._validate_all():
            return False

        try:
            callback()
        except Exception as e:
            self._record_submit_failure(e)
            return False

        self.submit_error = EMPTY_VALUE
        return True

    async def submit_async(self, callback: SubmitCallback) -> bool:
        """Like ``submit``, awaiting the callback's result when it is awaitable."""
        if not self._validate_all():
            return False

        try:
            outcome = callback()
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            self._record_submit_failure(e)
            return False

        self.submit_error = EMPTY_VALUE
        return True

    def _validate_all(self) -> bool:
        result = validation_engine.validate_form(self.values, self.schema)
        self.errors = dict(result.errors)
        return result.is_valid

    def _record_submit_failure(self, error: Exception) -> None:
        logger.warning(
            "form_submit_failed",
            error=str(error),
            error_type=type(error).__name__,
        )
        self.submit_error = str(error)
