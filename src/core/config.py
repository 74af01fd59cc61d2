"""
Application settings.

Values come from environment variables prefixed with `CHESS_RULES_`, e.g.
CHESS_RULES_DEFAULT_VARIANT=tiny CHESS_RULES_LOG_LEVEL=debug
"""

import logging
import os
from typing import Mapping, Optional, Self

from pydantic import BaseModel, field_validator

from src.core.shared_types import Variant

ENV_PREFIX = "CHESS_RULES_"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseModel):
    default_variant: Variant = Variant.CLASSIC
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}. Pick one from {','.join(LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Collect every `CHESS_RULES_<FIELD>` variable that is set. Unset fields keep their defaults."""
        environ = os.environ if environ is None else environ
        values = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        return cls.model_validate(values)


def configure_logging(settings: Settings) -> None:
    """Only for applications embedding the engine. The library itself never configures logging on import."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, force=True)
