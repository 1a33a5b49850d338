"""PydanticAdapter — constraint sets declared as pydantic models.

An operation declares its accepted fields as a model::

    class SignupParams(BaseModel):
        email: EmailStr
        display_name: str = Field(alias="displayName", min_length=3)

Violations are keyed by the input key pydantic reports (the alias when
one is declared). Errors raised by model-level validators carry no
location and are keyed under :data:`BASE_FIELD`.

Filtering accepts exactly the keys pydantic validates: aliases, plus the
Python field name only when the model sets ``populate_by_name`` (or
``validate_by_name``) or the field has no alias.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, AliasPath, BaseModel, ValidationError

from servicekit.validation.adapter import Violations

BASE_FIELD = "base"


class NoParams(BaseModel):
    """Constraint set for operations that accept no input fields."""


def _accepts_field_name(constraints: type[BaseModel]) -> bool:
    config = constraints.model_config
    return bool(config.get("populate_by_name") or config.get("validate_by_name"))


def _top_level_key(alias: str | AliasPath | None) -> str | None:
    if isinstance(alias, AliasPath):
        head = alias.path[0]
        return head if isinstance(head, str) else None
    return alias


def _input_keys(constraints: type[BaseModel]) -> dict[str, tuple[str, ...]]:
    """Map each field name to the input keys pydantic validates it from.

    Keys are in pydantic's lookup order: aliases first, then the field
    name when the model allows it or declares no alias.
    """
    by_name = _accepts_field_name(constraints)
    keys: dict[str, tuple[str, ...]] = {}
    for name, info in constraints.model_fields.items():
        alias = info.validation_alias if info.validation_alias is not None else info.alias
        choices = alias.choices if isinstance(alias, AliasChoices) else [alias]
        candidates = [key for key in map(_top_level_key, choices) if key]
        if by_name or alias is None:
            candidates.append(name)
        keys[name] = tuple(candidates)
    return keys


class PydanticAdapter:
    """Default :class:`~servicekit.validation.adapter.ValidationAdapter`."""

    def validate(self, args: Mapping[str, Any], constraints: type[BaseModel]) -> Violations:
        try:
            constraints.model_validate(dict(args))
        except ValidationError as exc:
            violations: Violations = {}
            for error in exc.errors(include_url=False):
                loc = error["loc"]
                field = str(loc[0]) if loc else BASE_FIELD
                violations.setdefault(field, []).append(error["msg"])
            return violations
        return {}

    def filter(self, args: Mapping[str, Any], constraints: type[BaseModel]) -> dict[str, Any]:
        accepted = {key for keys in _input_keys(constraints).values() for key in keys}
        return {key: value for key, value in args.items() if key in accepted}

    def bind(self, filtered: Mapping[str, Any], constraints: type[BaseModel]) -> BaseModel:
        """Populate each field from the first key pydantic would have validated."""
        values: dict[str, Any] = {}
        for name, keys in _input_keys(constraints).items():
            for key in keys:
                if key in filtered:
                    values[name] = filtered[key]
                    break
        return constraints.model_construct(**values)


default_adapter = PydanticAdapter()
