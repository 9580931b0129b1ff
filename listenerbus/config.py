"""Runtime settings for the listener bus, read from the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, field_validator

ENV_PREFIX = "LISTENERBUS_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class BusSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    failure_log_level: int = logging.ERROR
    thread_safe: bool = True

    @field_validator("failure_log_level", mode="before")
    @classmethod
    def _level_from_name(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip().isdigit():
            level = logging.getLevelName(value.strip().upper())
            if not isinstance(level, int):
                raise ValueError(f"unknown log level: {value!r}")
            return level
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BusSettings:
        """Build settings from ``LISTENERBUS_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        level = env.get(f"{ENV_PREFIX}FAILURE_LOG_LEVEL")
        if level:
            values["failure_log_level"] = level

        thread_safe = env.get(f"{ENV_PREFIX}THREAD_SAFE")
        if thread_safe:
            flag = thread_safe.strip().lower()
            if flag not in _TRUE | _FALSE:
                raise ValueError(
                    f"{ENV_PREFIX}THREAD_SAFE must be a boolean, got {thread_safe!r}"
                )
            values["thread_safe"] = flag in _TRUE

        return cls(**values)
