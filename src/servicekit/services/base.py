"""ServiceBase — abstract foundation for every business operation.

An operation declares the input fields it accepts and implements
:meth:`ServiceBase.perform`. Callers never construct it directly; they go
through one of three class-level entry points, each of which builds a
fresh instance and drives it to completion exactly once:

- :meth:`ServiceBase.run` returns the result or raises :class:`ServiceFailure`.
- :meth:`ServiceBase.execute` returns the finished instance, never raising
  for validation or business-rule errors.
- :meth:`ServiceBase.attempt` returns a frozen :class:`ServiceResult`.

Usage::

    class SignupParams(BaseModel):
        email: str
        displayName: str

    class Signup(ServiceBase):
        constraints = SignupParams

        async def perform(self) -> dict[str, str]:
            if await email_taken(self.params.email):
                self.add_error("email", "is already registered", 409)
                return {}
            return {"email": self.params.email}

    user = await Signup.run({"email": "a@b.c", "displayName": "Al"}, ctx)

INVARIANT: Input validation completes before business logic starts, and
business logic never runs when the error map is already non-empty.
INVARIANT: Unexpected exceptions are logged and re-raised unchanged; they
never enter the error map.
"""

from __future__ import annotations

import copy
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar, Self

import structlog

from servicekit.config.settings import ValidationMessages, get_settings
from servicekit.domain.casing import is_camel_case, start_case
from servicekit.services.errors import (
    STATUS_KEY,
    ErrorMap,
    FieldNameError,
    ServiceFailure,
    ServiceStateError,
)
from servicekit.services.result import ServiceResult
from servicekit.validation import NoParams, ValidationAdapter, default_adapter

logger = structlog.get_logger(__name__)


class ServiceBase(ABC):
    """Abstract base for all operations.

    Class attributes:
        constraints: Constraint set understood by ``adapter``. With the
            default adapter this is a pydantic model class.
        adapter: Validation adapter shared by every instance of the
            operation. Overridable per instance via ``adapter=``.
        operation: Identity used as the error-map bucket key and in logs.
            Defaults to the class name.
        validation_messages: ``"first"`` or ``"all"``; None defers to
            :class:`~servicekit.config.settings.ServiceSettings`.
    """

    constraints: ClassVar[Any] = NoParams
    adapter: ClassVar[ValidationAdapter] = default_adapter
    operation: ClassVar[str | None] = None
    validation_messages: ClassVar[ValidationMessages | None] = None

    def __init__(
        self,
        args: Mapping[str, Any] | None = None,
        context: Any = None,
        *,
        adapter: ValidationAdapter | None = None,
    ) -> None:
        self._args: Mapping[str, Any] = MappingProxyType(dict(args or {}))
        self._context = context
        self._adapter = adapter if adapter is not None else type(self).adapter
        self._errors: ErrorMap = {}
        self._successful: bool | None = None
        self._failed: bool | None = None
        self._result: Any = None
        self._executed = False

        self._validate_inputs()
        self._filtered_args: Mapping[str, Any] = MappingProxyType(
            self._adapter.filter(self._args, self.constraints)
        )
        self.params = self._adapter.bind(self._filtered_args, self.constraints)

    @classmethod
    def operation_name(cls) -> str:
        return cls.operation or cls.__name__

    # ── Read-only outcome ────────────────────────────────────────────

    @property
    def args(self) -> Mapping[str, Any]:
        return self._args

    @property
    def context(self) -> Any:
        return self._context

    @property
    def filtered_args(self) -> Mapping[str, Any]:
        return self._filtered_args

    @property
    def result(self) -> Any:
        return self._result

    @property
    def errors(self) -> ErrorMap:
        return self._errors

    @property
    def successful(self) -> bool | None:
        return self._successful

    @property
    def failed(self) -> bool | None:
        return self._failed

    # ── Business logic ───────────────────────────────────────────────

    @abstractmethod
    async def perform(self) -> Any:
        """Run the operation against ``self.params``.

        May call :meth:`add_error` for business-rule violations; the
        returned value is kept as ``result`` either way.
        """

    async def try_executing(self) -> None:
        """Run :meth:`perform` unless input validation already failed.

        Raises:
            ServiceStateError: The instance was already executed.
        """
        if self._executed:
            msg = f"{self.operation_name()} instance was already executed"
            raise ServiceStateError(msg)
        self._executed = True

        if self._errors:
            self._failed = True
            self._successful = False
            return

        try:
            result = await self.perform()
        except Exception as exc:
            self._log_exception(exc)
            raise

        self._result = result
        self._successful = not self._errors
        self._failed = bool(self._errors)

    # ── Errors ───────────────────────────────────────────────────────

    def add_error(self, field: str, message: str, status_code: int | None = None) -> None:
        """Record a business-rule error against *field*.

        The stored message is ``"<Field In Start Case> <message>"``. A
        second error on the same field turns the entry into a list, in
        call order. *status_code* is recorded once; the first one wins.

        Raises:
            FieldNameError: *field* is not lowerCamelCase. Nothing is recorded.
        """
        if not is_camel_case(field):
            msg = f"{field} should be camel cased in add_error()"
            raise FieldNameError(msg)

        if status_code is not None:
            self.set_response_status_code(status_code)

        bucket = self._errors.setdefault(self.operation_name(), {})
        formatted = f"{start_case(field)} {message}"
        existing = bucket.get(field)
        if existing is None:
            bucket[field] = formatted
        elif isinstance(existing, list):
            existing.append(formatted)
        else:
            bucket[field] = [existing, formatted]

        logger.debug(
            "Custom validation failed",
            operation=self.operation_name(),
            reason=message,
            field=field,
            context=self._context,
            fault=copy.deepcopy(self._errors),
        )

    def set_response_status_code(self, status_code: int) -> None:
        """Record *status_code* unless a status is already present."""
        self._errors.setdefault(STATUS_KEY, status_code)

    def merge_errors(self, errors: Mapping[str, Any]) -> None:
        """Fill in top-level keys from *errors* that this instance lacks.

        Existing keys are never overwritten.
        """
        for key, value in errors.items():
            if key not in self._errors:
                self._errors[key] = copy.deepcopy(value)

    # ── Internals ────────────────────────────────────────────────────

    def _keep_all_validation_messages(self) -> bool:
        mode = type(self).validation_messages or get_settings().validation_messages
        return mode == "all"

    def _validate_inputs(self) -> None:
        violations = self._adapter.validate(self._args, self.constraints)
        if not violations:
            return

        keep_all = self._keep_all_validation_messages()
        bucket: dict[str, str | list[str]] = {}
        for field, messages in violations.items():
            if keep_all and len(messages) > 1:
                bucket[field] = list(messages)
            else:
                bucket[field] = messages[0]
        self._errors[self.operation_name()] = bucket

        logger.debug(
            "Service input validation failed",
            operation=self.operation_name(),
            payload=dict(self._args),
            context=self._context,
            fault=copy.deepcopy(self._errors),
        )

    def _log_exception(self, exc: Exception) -> None:
        logger.error(
            "Exception raised in service",
            operation=self.operation_name(),
            reason=str(exc),
            payload=dict(self._args),
            context=self._context,
            exc_info=exc,
        )

    # ── Entry points ─────────────────────────────────────────────────

    @classmethod
    async def _invoke(
        cls,
        args: Mapping[str, Any] | None,
        context: Any,
        adapter: ValidationAdapter | None,
    ) -> tuple[Self, float]:
        """Build one instance, execute it, and bracket it with start/finish events."""
        name = cls.operation_name()
        payload = dict(args or {})
        logger.info(
            f"Service started: {name}",
            operation=name,
            payload=payload,
            context=context,
            wrap="start",
        )
        started = time.perf_counter()

        instance = cls(args, context, adapter=adapter)
        await instance.try_executing()

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            f"Service finished: {name}",
            operation=name,
            payload=payload,
            context=context,
            wrap="end",
            ok=not instance.errors,
            duration_ms=duration_ms,
        )
        return instance, duration_ms

    @classmethod
    async def run(
        cls,
        args: Mapping[str, Any] | None = None,
        context: Any = None,
        *,
        adapter: ValidationAdapter | None = None,
    ) -> Any:
        """Execute the operation and return its result.

        Raises:
            ServiceFailure: The final error map is non-empty.
        """
        instance, _ = await cls._invoke(args, context, adapter)
        if instance.errors:
            raise ServiceFailure(cls.operation_name(), instance.errors)
        return instance.result

    @classmethod
    async def execute(
        cls,
        args: Mapping[str, Any] | None = None,
        context: Any = None,
        *,
        adapter: ValidationAdapter | None = None,
    ) -> Self:
        """Execute the operation and return the finished instance."""
        instance, _ = await cls._invoke(args, context, adapter)
        return instance

    @classmethod
    async def attempt(
        cls,
        args: Mapping[str, Any] | None = None,
        context: Any = None,
        *,
        adapter: ValidationAdapter | None = None,
    ) -> ServiceResult:
        """Execute the operation and return a tagged :class:`ServiceResult`."""
        instance, duration_ms = await cls._invoke(args, context, adapter)
        return ServiceResult(
            ok=not instance.errors,
            op=cls.operation_name(),
            result=instance.result,
            errors=copy.deepcopy(instance.errors),
            meta={"duration_ms": duration_ms},
        )
