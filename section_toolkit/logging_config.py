from __future__ import annotations

"""Central logging configuration for Section Toolkit.

Import and call :func:`setup_logging` once at application start-up; library
code only ever calls ``logging.getLogger(__name__)``.
"""

import copy
import logging
import logging.config
import os
from typing import List

from section_toolkit.config import ConfigManager

__all__ = ["setup_logging"]

EDITING_SERVICE_LOGGER = "section_toolkit.core.services.section_editing_service"

_TRUTHY = {"1", "true", "yes", "on"}


def setup_logging() -> None:
    """Configure logging from the ``logging`` configuration section."""
    log_dir = os.environ.get("SECTION_TOOLKIT_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    try:
        logging_config = copy.deepcopy(ConfigManager().get_logging_config())

        if logging_config and isinstance(logging_config, dict) and logging_config.get("version"):
            handlers = logging_config.get("handlers") or {}
            if "file" in handlers:
                handlers["file"]["filename"] = log_file

            logging.config.dictConfig(logging_config)
            logging.getLogger("section_toolkit").info("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging()
    except (ValueError, TypeError, AttributeError, ImportError, OSError) as exc:
        # dictConfig reports bad handler/formatter definitions as ValueError
        print(f"Error loading logging config: {exc}")
        _setup_minimal_logging()

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up console-only logging when the configuration is unusable."""
    minimal_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "simple",
                "level": "INFO",
            },
        },
        "root": {
            "level": "INFO",
            "handlers": ["console"],
        },
        # Keep the editing service addressable so the env override still applies
        "loggers": {
            EDITING_SERVICE_LOGGER: {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            }
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.error("===== Logging initialised with minimal fallback (config error) =====")


def _debug_targets() -> List[str]:
    targets: List[str] = []
    if os.environ.get("SECTION_TOOLKIT_DEBUG_EDITING", "").strip().lower() in _TRUTHY:
        targets.append(EDITING_SERVICE_LOGGER)
        targets.append("section_toolkit.core.drag")
    extra_modules = os.environ.get("SECTION_TOOLKIT_DEBUG_MODULES", "").strip()
    if extra_modules:
        targets.extend(m.strip() for m in extra_modules.split(",") if m.strip())
    return targets


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    Supports:
    - SECTION_TOOLKIT_DEBUG_EDITING=true -> DEBUG for the editing service and drag handling
    - SECTION_TOOLKIT_DEBUG_MODULES=comma,separated,logger,names -> DEBUG for listed loggers
    """
    for name in _debug_targets():
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Ensure at least one handler emits DEBUG for this logger
        has_debug_handler = any(h.level == logging.NOTSET or h.level <= logging.DEBUG for h in logger.handlers)
        if not has_debug_handler:
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
            logger.addHandler(handler)
        logger.info("Debug override active for logger '%s'", name)
