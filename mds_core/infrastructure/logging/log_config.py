"""Logging setup for applications embedding mds_core.

Each ``log_level_*`` setting controls one group of loggers, so that
httpx request lines or per-response parse counts can be turned down
while authorization problems stay visible.

Usage:
    from mds_core.infrastructure.logging.log_config import setup_logging
    setup_logging(settings)   # once, before the first API fetch
"""

import logging
import sys

from mds_core.config import Settings, get_settings

LOG_FORMAT = "%(levelname)-8s %(name)s — %(message)s"


# ── Settings field → loggers it controls ────────────────────────────

_LOGGER_GROUPS: dict[str, tuple[str, ...]] = {
    "log_level_http": (
        "httpx",
        "httpcore",
        "mds_core.infrastructure.http.api_client",
    ),
    "log_level_store": (
        "mds_core.application.services.pagination",
        "mds_core.application.services.resource_parser",
        "mds_core.application.services.store",
    ),
    "log_level_auth": (
        "mds_core.application.services.authorization",
        "mds_core.domain.entities.auth_item",
        "mds_core.infrastructure.http.discovery_client",
        "mds_core.infrastructure.storage",
    ),
}


def setup_logging(settings: Settings | None = None) -> None:
    """Apply root and per-group log levels; ``get_settings()`` by default.

    A stderr handler is installed only when the root logger has none.
    """
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_level(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    for field_name, logger_names in _LOGGER_GROUPS.items():
        level = _level(getattr(settings, field_name))
        for logger_name in logger_names:
            logging.getLogger(logger_name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Log levels: root=%s http=%s store=%s auth=%s",
        settings.log_level,
        settings.log_level_http,
        settings.log_level_store,
        settings.log_level_auth,
    )


def _level(name: str) -> int:
    """Level constant for a name such as ``"debug"``; INFO when unknown."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO
