"""Validation layer — pluggable input checking and field whitelisting."""

from servicekit.validation.adapter import Violations, ValidationAdapter
from servicekit.validation.pydantic_adapter import (
    BASE_FIELD,
    NoParams,
    PydanticAdapter,
    default_adapter,
)

__all__ = [
    "BASE_FIELD",
    "NoParams",
    "PydanticAdapter",
    "ValidationAdapter",
    "Violations",
    "default_adapter",
]
