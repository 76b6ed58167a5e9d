"""Typed reads of pipeline environment variables.

Every helper raises ``ConfigurationError`` with the variable name in the
message, which the HTTP handlers return as a 500 body.
"""

import os
from typing import Any, Callable, Optional, TypeVar

Number = TypeVar("Number", int, float)

_TRUE_VALUES = ("true", "yes", "1")
_FALSE_VALUES = ("false", "no", "0")


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def require_env(name: str, description: Optional[str] = None, *, fallbacks: tuple[str, ...] = ()) -> str:
    """
    Return the first non-empty value of ``name`` or one of its fallbacks.

    Raises:
        ConfigurationError: If none of the variables is set
    """
    for candidate in (name, *fallbacks):
        value = os.getenv(candidate)
        if value:
            return value

    purpose = f" ({description})" if description else ""
    alternatives = f" (or {', '.join(fallbacks)})" if fallbacks else ""
    raise ConfigurationError(
        f"Missing required environment variable: {name}{alternatives}{purpose}"
    )


def _read_number(name: str, default: Optional[Number], parse: Callable[[str], Number], kind: str,
                 min_value: Optional[Number], max_value: Optional[Number]) -> Number:
    raw = os.getenv(name)
    if not raw:
        if default is None:
            raise ConfigurationError(f"Missing required {kind} environment variable: {name}")
        return default

    try:
        value = parse(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid {kind} value for {name}: '{raw}'")

    if min_value is not None and value < min_value:
        raise ConfigurationError(f"{name}={value} is below the minimum of {min_value}")
    if max_value is not None and value > max_value:
        raise ConfigurationError(f"{name}={value} exceeds the maximum of {max_value}")
    return value


def validate_int_env(name: str, default: Optional[int] = None, min_value: Optional[int] = None,
                     max_value: Optional[int] = None) -> int:
    """Integer variable within ``[min_value, max_value]``; ``default`` when unset."""
    return _read_number(name, default, int, "integer", min_value, max_value)


def validate_float_env(name: str, default: Optional[float] = None, min_value: Optional[float] = None,
                       max_value: Optional[float] = None) -> float:
    return _read_number(name, default, float, "numeric", min_value, max_value)


def validate_bool_env(name: str, default: bool = False) -> bool:
    """
    Boolean variable; accepts true/false, yes/no and 1/0 in any case.

    Raises:
        ConfigurationError: For any other value
    """
    raw = os.getenv(name)
    if not raw:
        return default

    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Invalid boolean value for {name}: '{raw}' "
        f"(expected one of {', '.join(_TRUE_VALUES + _FALSE_VALUES)})"
    )


def check_config_override(override: Optional[Any], env_name: str,
                          required: bool = True) -> Optional[Any]:
    """Prefer an explicit constructor argument over the environment."""
    if override is not None:
        return override

    value = os.getenv(env_name)
    if required and not value:
        raise ConfigurationError(
            f"Missing required configuration: {env_name} "
            f"(pass it explicitly or set the environment variable)"
        )
    return value
