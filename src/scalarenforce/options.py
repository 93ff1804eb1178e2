"""Enforcement options and default filling.

Precedence (low → high):
  built-in defaults < SCALARENFORCE_* env vars < per-call options
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from scalarenforce.exceptions import ScalarConfigError

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")

# Env var -> option field
ENV_OVERRIDES: dict[str, str] = {
    "SCALARENFORCE_ALLOW_NULL": "allow_null",
    "SCALARENFORCE_REPORT_ONLY": "report_only",
    "SCALARENFORCE_SOFT_NUMERIC": "soft_numeric",
}


class EnforceOptions(BaseModel):
    """Options for a single enforcement call."""

    model_config = {"extra": "forbid", "frozen": True, "strict": True}

    allow_null: bool = Field(
        default=True,
        description="Absent or None values pass regardless of their declared type",
    )
    report_only: bool = Field(
        default=False,
        description="Log failures as warnings and return False instead of raising",
    )
    soft_numeric: bool = Field(
        default=False,
        description="Accept values equal to their int/float coercion for numeric tags",
    )


OptionsLike = EnforceOptions | Mapping[str, Any] | None


def _supplied_fields(supplied: OptionsLike) -> dict[str, Any]:
    """Explicitly supplied, non-None fields of *supplied*."""
    if supplied is None:
        return {}
    if isinstance(supplied, EnforceOptions):
        data = supplied.model_dump(exclude_unset=True)
    elif isinstance(supplied, Mapping):
        data = dict(supplied)
    else:
        raise ScalarConfigError(
            f"Options must be a mapping or EnforceOptions, got '{type(supplied).__name__}'"
        )
    return {key: value for key, value in data.items() if value is not None}


def merge_defaults(supplied: OptionsLike, defaults: EnforceOptions) -> EnforceOptions:
    """Fill *supplied* options over *defaults*.

    Every field present and non-None in *supplied* overrides the default;
    absent or None fields fall back. ``None`` is treated as an empty mapping.
    For an ``EnforceOptions`` instance only explicitly set fields count.

    Args:
        supplied: Caller options (mapping, EnforceOptions or None).
        defaults: Options providing the fallback values.

    Returns:
        The merged EnforceOptions; neither input is modified.

    Raises:
        ScalarConfigError: On unknown fields or values that are not booleans.
    """
    overrides = _supplied_fields(supplied)
    if not overrides:
        return defaults
    try:
        # Validate through the model so unknown keys and bad types are rejected
        return EnforceOptions.model_validate({**defaults.model_dump(), **overrides})
    except ValidationError as e:
        errors = [f"  {err['loc']}: {err['msg']}" for err in e.errors()]
        raise ScalarConfigError("Invalid enforce options:\n" + "\n".join(errors)) from e


def _parse_env_flag(value: str) -> bool | None:
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    return None


def load_default_options(environ: Mapping[str, str] | None = None) -> EnforceOptions:
    """Built-in defaults with SCALARENFORCE_* environment overrides applied.

    Unparseable env values are ignored. Read fresh on every call.

    Args:
        environ: Environment mapping (for testing). None = ``os.environ``.
    """
    env = os.environ if environ is None else environ
    updates: dict[str, bool] = {}
    for env_key, field in ENV_OVERRIDES.items():
        if (raw := env.get(env_key)) is not None and (flag := _parse_env_flag(raw)) is not None:
            updates[field] = flag

    defaults = EnforceOptions()
    if updates:
        return EnforceOptions.model_validate({**defaults.model_dump(), **updates})
    return defaults


__all__ = [
    "ENV_OVERRIDES",
    "EnforceOptions",
    "OptionsLike",
    "load_default_options",
    "merge_defaults",
]
