"""servicekit — validated, single-shot service operations.

Public surface::

    from servicekit import ServiceBase, ServiceFailure, ServiceResult
"""

from servicekit.services.base import ServiceBase
from servicekit.services.errors import FieldNameError, ServiceFailure, ServiceStateError
from servicekit.services.result import ServiceResult
from servicekit.validation import NoParams, PydanticAdapter, ValidationAdapter

__all__ = [
    "FieldNameError",
    "NoParams",
    "PydanticAdapter",
    "ServiceBase",
    "ServiceFailure",
    "ServiceResult",
    "ServiceStateError",
    "ValidationAdapter",
]
