"""Shared pytest fixtures and sample operations for servicekit tests."""

from __future__ import annotations

from collections.abc import Generator, Mapping
from types import SimpleNamespace
from typing import Any

import pytest
import structlog
from pydantic import BaseModel, Field

from servicekit.config.settings import get_settings
from servicekit.services.base import ServiceBase


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None]:
    """Drop cached settings so env changes made by a test take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_structlog() -> Generator[None]:
    yield
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# Stub adapter — deterministic violations for core lifecycle tests
# ---------------------------------------------------------------------------


class StubAdapter:
    """Adapter whose constraint set is a tuple of accepted field names.

    Violations are fixed at construction, independent of the input.
    """

    def __init__(self, violations: Mapping[str, list[str]] | None = None) -> None:
        self.violations = dict(violations or {})
        self.calls: list[str] = []

    def validate(self, args: Mapping[str, Any], constraints: tuple[str, ...]) -> dict[str, list[str]]:
        self.calls.append("validate")
        return {field: list(messages) for field, messages in self.violations.items()}

    def filter(self, args: Mapping[str, Any], constraints: tuple[str, ...]) -> dict[str, Any]:
        self.calls.append("filter")
        return {key: value for key, value in args.items() if key in constraints}

    def bind(self, filtered: Mapping[str, Any], constraints: tuple[str, ...]) -> SimpleNamespace:
        self.calls.append("bind")
        return SimpleNamespace(**filtered)


class Echo(ServiceBase):
    """Returns its whitelisted input; tests swap in violations via ``adapter=``."""

    constraints = ("fieldOne", "fieldTwo")
    adapter = StubAdapter()

    async def perform(self) -> dict[str, Any]:
        return dict(self.filtered_args)


# ---------------------------------------------------------------------------
# Pydantic-backed sample operations
# ---------------------------------------------------------------------------


class SignupParams(BaseModel):
    email: str = Field(min_length=3)
    displayName: str = Field(min_length=2)
    age: int | None = None


class Signup(ServiceBase):
    """Registers a user; ``@taken.test`` addresses trip a business rule."""

    constraints = SignupParams

    async def perform(self) -> dict[str, Any]:
        if self.params.email.endswith("@taken.test"):
            self.add_error("email", "is already registered", 409)
            self.add_error("email", "belongs to another account")
        return {"email": self.params.email, "displayName": self.params.displayName}


class Explode(ServiceBase):
    """Business logic that fails with an unexpected exception."""

    async def perform(self) -> None:
        raise RuntimeError("database went away")


@pytest.fixture
def signup_args() -> dict[str, Any]:
    return {"email": "ada@example.test", "displayName": "Ada", "isAdmin": True}


@pytest.fixture
def user_ctx() -> dict[str, Any]:
    return {"user_id": 7, "request_id": "req-123"}
