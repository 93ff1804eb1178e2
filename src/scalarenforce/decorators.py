"""Decorator that enforces scalar types on every call of a function."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable, Hashable, Mapping
from typing import Any, TypeVar

from scalarenforce.exceptions import ScalarConfigError
from scalarenforce.options import EnforceOptions, OptionsLike, load_default_options, merge_defaults
from scalarenforce.kinds import parse_tag
from scalarenforce.validation import check_parsed, parse_type_spec, report

F = TypeVar("F", bound=Callable[..., Any])


def _resolve_keys(
    signature: inspect.Signature, scalars: Mapping[Hashable, Any], label: str
) -> dict[str, Any]:
    """Translate positional indices to parameter names and reject unknown keys."""
    names = list(signature.parameters)
    resolved: dict[str, Any] = {}
    for key, tag in scalars.items():
        if isinstance(key, int) and not isinstance(key, bool):
            if not 0 <= key < len(names):
                raise ScalarConfigError(
                    f"{label} has no positional parameter at index {key}", key=key
                )
            name = names[key]
        elif isinstance(key, str) and key in signature.parameters:
            name = key
        else:
            raise ScalarConfigError(f"{label} has no parameter {key!r}", key=key)
        if name in resolved:
            raise ScalarConfigError(f"Parameter {name!r} of {label} is typed twice", key=key)
        resolved[name] = tag
    return resolved


def scalar_args(
    scalars: Mapping[Hashable, Any] | None = None,
    /,
    *,
    _options: OptionsLike = None,
    **tags: Any,
) -> Callable[[F], F]:
    """Enforce scalar type tags on the decorated function's arguments.

    Tags are given by parameter name, or by position through *scalars*.
    Only arguments the caller actually passed are checked; parameters left
    at their defaults are absent.

    Args:
        scalars: Optional mapping of parameter name or index -> tag.
        _options: Options for every call, filled over the env defaults at
            call time.
        **tags: Parameter name -> tag (None to skip).

    Raises:
        ScalarConfigError: At decoration time, for unknown parameters,
            bad tags, or a parameter typed twice (by index and name, or in
            both *scalars* and *tags*).

    Example:
        >>> @scalar_args(count="int", label="string")
        ... def tally(count, label=None):
        ...     return count
    """

    def decorator(func: F) -> F:
        signature = inspect.signature(func)
        label = f"{func.__module__}.{func.__qualname__}"
        overlap = sorted(set(scalars or {}) & set(tags), key=str)
        if overlap:
            raise ScalarConfigError(
                f"Parameter {overlap[0]!r} of {label} is typed twice", key=overlap[0]
            )
        parsed = parse_type_spec(_resolve_keys(signature, {**(scalars or {}), **tags}, label))
        for name, tag in parsed.items():
            if tag is not None:
                parse_tag(tag, key=name)
        merge_defaults(_options, EnforceOptions())  # surface bad options at decoration time

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            bound = signature.bind(*args, **kwargs)
            options = merge_defaults(_options, load_default_options())
            report(check_parsed(bound.arguments, parsed, options, context=label), options, depth=1)
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = ["scalar_args"]
