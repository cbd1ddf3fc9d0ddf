"""Structured logging for keyforge.

Library modules obtain their logger from :func:`get_logger`. It binds structlog
to a stdlib logger in the ``keyforge`` namespace, so until an application calls
:func:`configure_logging` records only reach whatever handlers the application
installed itself, and the stdlib ``WARNING`` default keeps debug output quiet.
"""
from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Optional, TextIO

import structlog

LOGGER_NAME = "keyforge"
DEFAULT_LEVEL = "info"

_LEVELS: Dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def get_logger(name: str = LOGGER_NAME) -> Any:
    return structlog.wrap_logger(logging.getLogger(name))


def level_from_name(level: Optional[str]) -> int:
    """Map a level name to its stdlib number; unknown names fall back to INFO."""
    return _LEVELS.get((level or DEFAULT_LEVEL).lower(), logging.INFO)


def _component(_logger: Any, _name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    name = event_dict.pop("logger", None)
    event_dict.setdefault("component", name or LOGGER_NAME)
    return event_dict


def _event_as_msg(_logger: Any, _name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    event_dict.setdefault("msg", event_dict.pop("event", ""))
    return event_dict


def _shared_processors() -> List[Any]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        _component,
    ]


def configure_logging(
    level: Optional[str] = None,
    *,
    stream: Optional[TextIO] = None,
    json_format: bool = True,
) -> logging.Handler:
    """Send keyforge records to ``stream`` (stderr by default).

    Each record becomes one JSON object with ``level``, ``ts``, ``msg`` and
    ``component`` plus any bound context; ``json_format=False`` renders plain
    console lines instead. Only the ``keyforge`` logger is touched; calling this
    again replaces the handler installed by the previous call.
    """
    numeric_level = level_from_name(level)
    shared = _shared_processors()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    rendering: List[Any] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if json_format:
        rendering += [_event_as_msg, structlog.processors.JSONRenderer()]
    else:
        rendering.append(structlog.dev.ConsoleRenderer(colors=False))
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(foreign_pre_chain=shared, processors=rendering)
    )

    root = logging.getLogger(LOGGER_NAME)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(numeric_level)
    root.propagate = False
    return handler


__all__ = ["DEFAULT_LEVEL", "LOGGER_NAME", "configure_logging", "get_logger", "level_from_name"]
