"""Structured logging setup."""
from __future__ import annotations

import logging
import os
import sys
from typing import FrozenSet, MutableMapping

import structlog

_DEFAULT_LEVEL = "info"
LEVEL_ENV_VAR = "PG_LOG_LEVEL"

# Values bound under these names are replaced before rendering.
SENSITIVE_FIELDS: FrozenSet[str] = frozenset(
    {"key", "material", "secret", "token", "payload", "implicit_assertion"}
)
_REDACTED = "<redacted>"

EventDict = MutableMapping[str, object]


def configure_logging(level: str | None = None) -> None:
    """Route structlog records to stderr as JSON lines.

    Each record has ``level``, ``ts``, ``msg`` and ``component``. ``PG_LOG_LEVEL``
    wins over ``level``; unknown names fall back to ``info``. Fields listed in
    ``SENSITIVE_FIELDS`` are masked so a careless ``logger.info(..., key=key)``
    cannot leak key material or token contents.
    """

    name = os.environ.get(LEVEL_ENV_VAR) or level or _DEFAULT_LEVEL
    numeric_level = _numeric_level(name)

    # stdout is reserved for command output (tokens, keys, decoded claims)
    logging.basicConfig(
        level=numeric_level,
        handlers=[logging.StreamHandler(sys.stderr)],
        format="%(message)s",
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.stdlib.add_log_level,
            _component_processor,
            _rename_event_to_msg,
            _mask_sensitive_fields,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )


def _component_processor(logger: object, _name: str, event_dict: EventDict) -> EventDict:
    """Default ``component`` to the stdlib logger name, e.g. ``paseto_guardian.api``."""

    if event_dict.get("component") is None:
        event_dict["component"] = getattr(logger, "name", None) or "paseto_guardian"
    return event_dict


def _rename_event_to_msg(_logger: object, _name: str, event_dict: EventDict) -> EventDict:
    """Publish structlog's ``event`` under ``msg``.

    Event names are dotted identifiers such as ``token.decode.failed``; an explicit
    ``msg`` passed by the caller is kept and the event name is dropped.
    """

    event = event_dict.pop("event", "")
    event_dict.setdefault("msg", event)
    return event_dict


def _mask_sensitive_fields(_logger: object, _name: str, event_dict: EventDict) -> EventDict:
    for field in SENSITIVE_FIELDS.intersection(event_dict):
        event_dict[field] = _REDACTED
    return event_dict


def _numeric_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


__all__ = ["LEVEL_ENV_VAR", "SENSITIVE_FIELDS", "configure_logging"]
