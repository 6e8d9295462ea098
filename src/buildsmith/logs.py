# src/buildsmith/logs.py

import logging
import os
from typing import cast

from apathetic_logging import (
    Logger,
    registerDefaultLogLevel,
    registerLogger,
    registerLogLevelEnvVars,
)

from .constants import DEFAULT_ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL
from .meta import PROGRAM_ENV, PROGRAM_PACKAGE


# Checked in order; the first one set wins.
LOG_LEVEL_ENV_VARS: list[str] = [
    f"{PROGRAM_ENV}_{DEFAULT_ENV_LOG_LEVEL}",
    DEFAULT_ENV_LOG_LEVEL,
]


class AppLogger(Logger):
    """Logger for build file generation runs."""

    def resolve_log_level(self, config_level: str | None = None) -> str:
        """Level for a run: environment first, then config, then the default."""
        for var in LOG_LEVEL_ENV_VARS:
            env_level = os.getenv(var)
            if env_level:
                return env_level.upper()
        if config_level:
            return config_level.upper()
        return DEFAULT_LOG_LEVEL.upper()

    def apply_config_level(self, config_level: str | None) -> None:
        """Set the level for a run configured with config_level."""
        level = self.resolve_log_level(config_level)
        self.setLevel(level)
        self.trace(f"[logs] level {level} (config: {config_level!r})")


# --- Logger initialization ---------------------------------------------------

# Must happen *before* any loggers are created.
logging.setLoggerClass(AppLogger)

# Registers TRACE and SILENT levels
AppLogger.extendLoggingModule()

registerLogLevelEnvVars(LOG_LEVEL_ENV_VARS)
registerDefaultLogLevel(DEFAULT_LOG_LEVEL)
registerLogger(PROGRAM_PACKAGE)

_APP_LOGGER = cast("AppLogger", logging.getLogger(PROGRAM_PACKAGE))


# --- Convenience utils ---------------------------------------------------------


def getAppLogger() -> AppLogger:  # noqa: N802
    """Return the buildsmith logger shared by all modules."""
    return _APP_LOGGER
