"""ValidationAdapter — the contract the service core consumes.

INVARIANT: Adapters are pure. Identical ``(args, constraints)`` always
produce identical violations and identical filtered mappings, and neither
argument is mutated.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

type Violations = dict[str, list[str]]


@runtime_checkable
class ValidationAdapter(Protocol):
    """Checks raw input against a declared constraint set.

    The constraint set format is owned by the adapter; the service core
    only passes it through.
    """

    def validate(self, args: Mapping[str, Any], constraints: Any) -> Violations:
        """Return ``{field: [message, ...]}`` for every violated field.

        An empty mapping means the input satisfies every constraint. Each
        list is non-empty and ordered; the first message is authoritative.
        """
        ...

    def filter(self, args: Mapping[str, Any], constraints: Any) -> dict[str, Any]:
        """Return the subset of *args* whose keys are declared in *constraints*.

        Values are returned unmodified.
        """
        ...

    def bind(self, filtered: Mapping[str, Any], constraints: Any) -> Any:
        """Build the typed value object exposed to the operation as ``params``."""
        ...
