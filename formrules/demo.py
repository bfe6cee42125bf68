"""Sign-up form used in the examples and tests."""

from formrules.validation import Schema


def signup_schema() -> dict[str, Schema]:
    """Username, password and password confirmation."""
    return {
        "password": (
            Schema()
            .min(5, "My custom min error message.")
            .max(7)
            .has_digit("My custom digit error message.")
            .has_symbol()
            .is_required()
        ),
        "username": (
            Schema()
            .min(5)
            .has_symbol()
            .has_pattern("abc")
            .has_lowercase()
            .has_uppercase("My custom uppercase error message.")
        ),
        "confirm_password": Schema().matches("password", "MUST MATCH").is_required(),
    }
