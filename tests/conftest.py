"""Shared fixtures for formrules tests."""

import pytest
import structlog

from formrules.config import get_settings
from formrules.demo import signup_schema
from formrules.validation import Schema


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached; start and end every test from the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def password_schema() -> Schema:
    return Schema().min(5).max(7).has_digit().has_symbol()


@pytest.fixture
def matching_schemas() -> dict[str, Schema]:
    return {
        "password": Schema(),
        "confirm_password": Schema().matches("password"),
    }


@pytest.fixture
def signup() -> dict[str, Schema]:
    return signup_schema()
