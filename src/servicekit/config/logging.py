"""structlog configuration for servicekit.

Service events carry ``operation``, ``payload``, ``context`` and, for the
start/finish pair, a ``wrap`` marker. Two output modes:

- Human (default): colored console lines, service fields kept in call order
- JSON (``SERVICEKIT_LOG_JSON=1``): one object per line, exceptions as
  structured tracebacks, non-serializable context rendered with ``repr``
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any, TextIO

import structlog

# Keys every service event may carry but that are noise when unset.
_OPTIONAL_SERVICE_KEYS = ("context", "payload", "fault")
_QUIET_LOGGERS = ("asyncio",)


def drop_unset_service_fields(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Remove optional service fields that are None or empty."""
    for key in _OPTIONAL_SERVICE_KEYS:
        if key in event_dict and not event_dict[key]:
            del event_dict[key]
    return event_dict


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        drop_unset_service_fields,
    ]


def _render_chain(*, log_json: bool, colors: bool) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if log_json:
        chain += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(default=repr),
        ]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=colors, sort_keys=False))
    return chain


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib records through one formatter.

    Service start/finish (INFO) and validation failures (DEBUG) only show
    with *verbose*; exceptions raised by business logic always do.

    Args:
        verbose: DEBUG for ``servicekit`` loggers; WARNING+ otherwise.
        log_json: Render JSON lines instead of console output.
        stream: Destination stream. Defaults to ``sys.stderr``.
    """
    out = stream if stream is not None else sys.stderr
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=_render_chain(log_json=log_json, colors=out.isatty()),
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("servicekit").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
