"""Typed environment variable lookups.

Unset and blank variables both fall back to the caller's default. Values that
are set but cannot be converted raise ``ValueError`` naming the variable.
"""

import os
from typing import Callable, Optional, TypeVar

T = TypeVar("T")

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off"})


def _lookup(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _convert(name: str, raw: str, convert: Callable[[str], T], kind: str) -> T:
    try:
        return convert(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable '{name}' must be {kind}, got '{raw}'.") from exc


def get_env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    """Return the stripped value of ``name`` or ``default``."""
    value = _lookup(name)
    return default if value is None else value


def get_env_float(name: str, default: Optional[float] = None) -> Optional[float]:
    value = _lookup(name)
    return default if value is None else _convert(name, value, float, "a number")


def _parse_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(raw)


def get_env_bool(name: str, default: Optional[bool] = None) -> Optional[bool]:
    """Return ``name`` as a boolean.

    Accepts true/1/yes/on and false/0/no/off, case-insensitively.
    """
    value = _lookup(name)
    return default if value is None else _convert(name, value, _parse_bool, "a boolean")
