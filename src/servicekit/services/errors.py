"""Error types raised by the service core.

Structured errors (input validation, business rules) live in the error
map and only become an exception at the end of ``ServiceBase.run``.
Everything here other than :class:`ServiceFailure` signals a defect in
the calling code, not bad input.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from typing import Any

type ErrorBucket = dict[str, str | list[str]]
type ErrorMap = dict[str, Any]

STATUS_KEY = "status"


def flatten_messages(errors: ErrorMap) -> Iterator[str]:
    """Yield every message in *errors*, bucket by bucket, in recorded order.

    The reserved ``status`` entry is skipped.
    """
    for key, bucket in errors.items():
        if key == STATUS_KEY or not isinstance(bucket, dict):
            continue
        for entry in bucket.values():
            if isinstance(entry, list):
                yield from entry
            else:
                yield entry


class ServiceFailure(Exception):
    """Structured failure raised by ``ServiceBase.run``.

    Attributes:
        operation: Name of the operation that failed.
        errors: Snapshot of the instance error map at the time of failure.
    """

    def __init__(self, operation: str, errors: ErrorMap) -> None:
        self.operation = operation
        self.errors: ErrorMap = copy.deepcopy(errors)
        super().__init__("; ".join(flatten_messages(self.errors)) or f"{operation} failed")

    @property
    def status(self) -> int | None:
        """Response status code recorded with the errors, if any."""
        return self.errors.get(STATUS_KEY)


class FieldNameError(ValueError):
    """``add_error`` was called with a field that is not lowerCamelCase."""


class ServiceStateError(RuntimeError):
    """A service instance was driven through execution more than once."""
