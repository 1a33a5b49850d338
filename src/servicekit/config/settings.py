"""Process-wide settings for the service core.

Priority chain (highest to lowest):
  1. Init kwargs  — values passed by the embedding application
  2. Env vars     — ``SERVICEKIT_*`` prefix
  3. Code defaults

Uses Pydantic Settings v2. :func:`get_settings` caches the env-derived
instance; call ``get_settings.cache_clear()`` after changing the
environment (tests do this through a fixture).
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings

ValidationMessages = Literal["first", "all"]


class ServiceSettings(BaseSettings):
    """Settings shared by every operation in the process.

    Attributes:
        verbose: Emit DEBUG-level service diagnostics.
        log_json: Render logs as JSON lines instead of console output.
        validation_messages: ``"first"`` keeps only the first adapter
            message per field at construction time; ``"all"`` keeps
            every message.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SERVICEKIT_",
    }

    verbose: bool = False
    log_json: bool = False
    validation_messages: ValidationMessages = "first"

    def configure_logging(self) -> None:
        """Apply the logging flags via :func:`servicekit.config.logging.configure_logging`."""
        from servicekit.config.logging import configure_logging

        configure_logging(verbose=self.verbose, log_json=self.log_json)


@lru_cache(maxsize=1)
def get_settings() -> ServiceSettings:
    """Return the cached settings built from the environment."""
    return ServiceSettings()
