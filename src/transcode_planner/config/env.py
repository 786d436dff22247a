"""Environment variable reader with dependency injection support.

EnvReader reads TPLAN_* variables with type conversion. Invalid values are
logged and replaced by the default so a typo in the environment never stops
a planning run.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})


class EnvReader:
    """Environment variable reader with type conversion and validation.

    Accepts an optional env mapping so tests never touch os.environ.

    Example:
        # Reads os.environ
        reader = EnvReader()
        fps_max = reader.get_int("TPLAN_FPS_MAX", 60)

        # Reads an injected mapping
        reader = EnvReader(env={"TPLAN_FPS_MAX": "30"})
        fps_max = reader.get_int("TPLAN_FPS_MAX", 60)  # Returns 30
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the environment reader.

        Args:
            env: Optional mapping to use instead of os.environ.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Get a string from environment variable, or default if not set."""
        value = self._env.get(var)
        if value is None:
            return default
        return value

    def get_int(self, var: str, default: int | None = None) -> int | None:
        """Integer value of var; invalid values log a warning and yield default."""
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid integer value for %s: %s", var, value)
            return default

    def get_float(self, var: str, default: float | None = None) -> float | None:
        """Float value of var; invalid values log a warning and yield default."""
        value = self._env.get(var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning("Invalid float value for %s: %s", var, value)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Get a boolean from environment variable.

        "true", "1", "yes" and "on" (case-insensitive) are true, any other
        value is false.
        """
        value = self._env.get(var)
        if value is None:
            return default
        return value.lower() in _TRUE_VALUES

    def get_path(
        self, var: str, must_exist: bool = False, default: Path | None = None
    ) -> Path | None:
        """Get a path from environment variable.

        Args:
            var: Environment variable name.
            must_exist: If True, a non-existent path is logged and replaced
                by the default.
            default: Default value if not set.

        Returns:
            Expanded Path object, or default.
        """
        value = self._env.get(var)
        if value is None:
            return default

        path = Path(value).expanduser()
        if must_exist and not path.exists():
            logger.warning(
                "Environment variable %s points to non-existent path: %s",
                var,
                value,
            )
            return default
        return path

    def get_str_list(
        self, var: str, separator: str = ",", default: list[str] | None = None
    ) -> list[str] | None:
        """Get a list of strings from a separator-delimited variable.

        Empty items are dropped, so "libx265,,libx264" yields two items.
        """
        value = self._env.get(var)
        if value is None:
            return default
        return [part.strip() for part in value.split(separator) if part.strip()]

    def get_int_set(
        self, var: str, separator: str = ",", default: frozenset[int] | None = None
    ) -> frozenset[int] | None:
        """Get a set of integers from a separator-delimited variable.

        Used for resolution lists such as "360,480,720". Any invalid item
        invalidates the whole value.
        """
        parts = self.get_str_list(var, separator)
        if parts is None:
            return default
        try:
            return frozenset(int(part) for part in parts)
        except ValueError:
            logger.warning("Invalid integer list for %s: %s", var, self._env[var])
            return default
