from __future__ import annotations
import logging
import os


_TRUTHY = {'1', 'true', 'yes', 'on'}

# Defaults
_DEFAULT_LOG_LEVEL = 'WARNING'


def flag_from_env(var: str, default: bool = False) -> bool:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def get_log_level() -> int:
    raw = os.environ.get('WATSON_LOG_LEVEL', _DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(raw)
    # getLevelName returns a string ("Level FOO") for unknown names
    return level if isinstance(level, int) else logging.WARNING


def trace_enabled() -> bool:
    return flag_from_env('WATSON_TRACE')
