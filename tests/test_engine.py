"""Tests for the validation engine."""

import pytest

from formrules.validation import (
    FieldResult,
    FormResult,
    Schema,
    SchemaConfigurationError,
    ValidationEngine,
    validate,
)
from formrules.validation import rules


class TestSingleValue:
    def test_too_short(self, password_schema):
        result = validate("ab1$", password_schema)

        assert isinstance(result, FieldResult)
        assert result.is_valid is False
        assert result.errors == ["must be at least 5 characters long"]

    def test_valid_at_maximum_length(self, password_schema):
        result = validate("abc1$de", password_schema)

        assert result.is_valid is True
        assert result.errors == []
        assert bool(result) is True

    def test_every_violated_rule_is_reported(self, password_schema):
        result = validate("abcdefgh", password_schema)

        assert result.errors == [
            "must be at most 7 characters long",
            rules.DIGIT.error,
            rules.SYMBOL.error,
        ]

    def test_required_empty_reports_only_required(self, password_schema):
        result = validate("", password_schema.is_required())

        assert result.errors == [rules.REQUIRED_ERROR]

    def test_required_examples(self):
        schema = Schema().is_required()

        assert validate("", schema).errors == [rules.REQUIRED_ERROR]
        assert validate("x", schema).is_valid is True

    def test_empty_optional_value_runs_rules(self):
        assert validate("", Schema()).is_valid is True
        assert validate("", Schema().has_digit()).errors == [
            "must be at least 1 characters long",
            rules.DIGIT.error,
        ]

    def test_none_is_treated_as_empty(self):
        assert validate(None, Schema().is_required()).errors == [rules.REQUIRED_ERROR]

    def test_label_prefixes_every_message(self):
        schema = Schema().label("Password").min(3).has_digit().is_required()

        assert validate("ab", schema).errors == [
            "Password must be at least 3 characters long",
            f"Password {rules.DIGIT.error}",
        ]
        assert validate("", schema).errors == [f"Password {rules.REQUIRED_ERROR}"]

    def test_custom_messages(self):
        schema = Schema().min(5, "My custom min error message.").has_digit("Need a digit.")

        assert validate("abc", schema).errors == ["My custom min error message.", "Need a digit."]

    def test_email(self):
        schema = Schema().is_email().min(40)

        assert validate("abc@def.com", schema).is_valid is True
        assert validate("abc", schema).errors == [rules.EMAIL.error]

    def test_custom_pattern(self):
        schema = Schema().has_pattern(r"^[a-z]+$", "lowercase letters only")

        assert validate("abc", schema).is_valid is True
        assert validate("abc1", schema).errors == ["lowercase letters only"]

    def test_accepts_compiled_schema(self, password_schema):
        compiled = password_schema.compile()

        assert validate("abc1$de", compiled).is_valid is True

    def test_idempotent(self, password_schema):
        compiled = password_schema.compile()

        assert validate("ab$", compiled) == validate("ab$", compiled)

    @pytest.mark.parametrize("minimum", range(4))
    @pytest.mark.parametrize("maximum", range(4))
    @pytest.mark.parametrize("length", range(6))
    def test_length_bounds(self, minimum, maximum, length):
        if minimum > maximum:
            pytest.skip("inconsistent bounds")

        result = validate("a" * length, Schema().min(minimum).max(maximum))

        assert result.is_valid is (minimum <= length <= maximum)

    def test_misconfigured_schema_raises(self):
        with pytest.raises(SchemaConfigurationError):
            validate("abc", Schema().min(5).max(2))

    def test_matching_schema_needs_mapping(self):
        with pytest.raises(TypeError):
            validate("abc", Schema().matches("password"))

    def test_rejects_non_schema(self):
        with pytest.raises(TypeError):
            validate("abc", 3)


class TestMatchPair:
    def test_single_matching_schema_with_pair_of_values(self):
        schema = Schema().matches("password")

        result = validate({"password": "abc", "confirm_password": "abd"}, schema)

        assert isinstance(result, FormResult)
        assert result.errors == {"confirm_password": ["must match password"]}

    def test_identical_values_match(self):
        schema = Schema().matches("password")

        assert validate({"password": "abc", "confirm_password": "abc"}, schema).is_valid is True
        assert validate({"password": "", "confirm_password": ""}, schema).is_valid is True

    def test_pair_needs_both_names(self):
        schema = Schema().matches("password")

        with pytest.raises(TypeError):
            validate({"confirm_password": "abc"}, schema)
        with pytest.raises(TypeError):
            validate({"password": "a", "b": "b", "c": "c"}, schema)

    def test_non_matching_schema_rejects_mapping(self):
        with pytest.raises(TypeError):
            validate({"a": "b"}, Schema())

    def test_labels_name_the_partner(self):
        engine = ValidationEngine()
        result = engine.validate_matching(
            {"password": "abc", "confirm": "xyz"},
            {
                "password": Schema().label("Password"),
                "confirm": Schema().label("Confirmation").matches("password"),
            },
        )

        assert result.errors == {"confirm": ["Confirmation must match Password"]}

    def test_custom_error_is_kept_with_labels(self):
        engine = ValidationEngine()
        result = engine.validate_matching(
            {"password": "abc", "confirm": "xyz"},
            {
                "password": Schema().label("Password"),
                "confirm": Schema().label("Confirmation").matches("password", "MUST MATCH"),
            },
        )

        assert result.errors == {"confirm": ["Confirmation MUST MATCH"]}

    def test_required_beats_match(self):
        engine = ValidationEngine()
        result = engine.validate_matching(
            {"password": "abc", "confirm": ""},
            {"password": Schema(), "confirm": Schema().matches("password").is_required()},
        )

        assert result.errors == {"confirm": [rules.REQUIRED_ERROR]}

    def test_needs_a_matching_schema(self):
        with pytest.raises(TypeError):
            ValidationEngine().validate_matching({"a": "x", "b": "y"}, {"a": Schema(), "b": Schema()})


class TestWholeForm:
    def test_error_attached_to_matching_property_only(self, matching_schemas):
        result = validate({"password": "abc", "confirm_password": "abd"}, matching_schemas)

        assert result.is_valid is False
        assert result.errors == {"confirm_password": ["must match password"]}

    def test_valid_form(self, matching_schemas):
        result = validate({"password": "abc", "confirm_password": "abc"}, matching_schemas)

        assert result.is_valid is True
        assert result.errors == {}

    def test_missing_values_count_as_empty(self):
        schemas = {"name": Schema().is_required(), "nickname": Schema()}

        result = validate({}, schemas)

        assert result.errors == {"name": [rules.REQUIRED_ERROR]}

    def test_unknown_values_are_ignored(self):
        assert validate({"extra": "x"}, {"name": Schema()}).is_valid is True

    def test_collects_errors_per_property(self, signup):
        result = validate(
            {"password": "", "username": "", "confirm_password": ""},
            signup,
        )

        assert result.errors["password"] == [rules.REQUIRED_ERROR]
        assert result.errors["confirm_password"] == [rules.REQUIRED_ERROR]
        assert result.errors["username"] == [
            "must be at least 5 characters long",
            rules.SYMBOL.error,
            "must match pattern: abc",
            rules.LOWERCASE.error,
            "My custom uppercase error message.",
        ]

    def test_demo_form_valid(self, signup):
        result = validate(
            {"password": "ab1$cd", "username": "Xabc$", "confirm_password": "ab1$cd"},
            signup,
        )

        assert result.is_valid is True

    def test_schema_mapping_needs_value_mapping(self, matching_schemas):
        with pytest.raises(TypeError):
            validate("abc", matching_schemas)

    def test_result_dumps_to_plain_data(self, matching_schemas):
        result = validate({"password": "a", "confirm_password": "b"}, matching_schemas)

        assert result.model_dump() == {
            "is_valid": False,
            "errors": {"confirm_password": ["must match password"]},
        }
