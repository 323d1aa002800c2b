"""Environment-variable configuration.

Each helper reads the relevant ``TARLIGHT_*`` variable and returns its
typed value, falling back to *fallback* on absence or parse failure.
Defaults built from these helpers are evaluated once, at import time.
"""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"
__all__ = (
    "DEFAULT_CLAMP_TIMESTAMPS",
    "DEFAULT_EAGER_HEADERS",
    "DEFAULT_OVERWRITE_POLICY",
    "DEFAULT_PRESERVE_METADATA",
    "DEFAULT_STRIP_SPECIAL_BITS",
    "env_bool",
    "env_overwrite_policy",
)

import os

from tarlight._events import OverwritePolicy


def env_bool(name: str, fallback: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return fallback
    return raw.lower() not in ("0", "false", "no", "off", "")


def env_overwrite_policy() -> OverwritePolicy:
    raw = os.environ.get("TARLIGHT_OVERWRITE_POLICY")
    if raw is None:
        return OverwritePolicy.OVERWRITE
    try:
        return OverwritePolicy(raw.lower())
    except ValueError:
        return OverwritePolicy.OVERWRITE


# Module-level singletons evaluated once at import time.
DEFAULT_EAGER_HEADERS: bool = env_bool("TARLIGHT_EAGER_HEADERS", False)
DEFAULT_OVERWRITE_POLICY: OverwritePolicy = env_overwrite_policy()
DEFAULT_STRIP_SPECIAL_BITS: bool = env_bool("TARLIGHT_STRIP_SPECIAL_BITS", True)
DEFAULT_PRESERVE_METADATA: bool = env_bool("TARLIGHT_PRESERVE_METADATA", True)
DEFAULT_CLAMP_TIMESTAMPS: bool = env_bool("TARLIGHT_CLAMP_TIMESTAMPS", True)
