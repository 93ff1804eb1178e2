"""Scalar kinds and their runtime predicates.

External type tags (``"int"``, ``"boolean"``, ``"double"``...) are parsed once
into a ``ScalarKind``. Each kind owns one predicate; the numeric kinds take a
``soft`` flag that enables equality-after-coercion checks.

Soft numeric semantics:
    A value is first coerced to a number. Real numbers and Decimals coerce to
    themselves, numeric-looking strings are parsed, and everything else
    (``None``, bools, containers, arbitrary objects) has no coercion and
    fails. The number is then compared with loose numeric equality against
    ``int(n)`` or ``float(n)``. So ``"3"`` and ``5.0`` satisfy soft ``int``
    while ``5.5`` does not.
"""

from __future__ import annotations

import decimal
import io
import math
import mmap
import numbers
import re
import socket
from collections.abc import Callable, Hashable, Mapping, Sequence
from enum import Enum
from typing import Any

from scalarenforce.exceptions import ScalarConfigError


class ScalarKind(str, Enum):
    """Closed set of recognised scalar kinds."""

    ARRAY = "array"
    BOOL = "bool"
    FLOAT = "float"
    INT = "int"
    NULL = "null"
    OBJECT = "object"
    STRING = "string"
    SCALAR = "scalar"
    NUMERIC = "numeric"
    CALLABLE = "callable"
    RESOURCE = "resource"


# Every accepted (lowercase) tag, aliases included
TAG_ALIASES: dict[str, ScalarKind] = {
    "array": ScalarKind.ARRAY,
    "bool": ScalarKind.BOOL,
    "boolean": ScalarKind.BOOL,
    "float": ScalarKind.FLOAT,
    "double": ScalarKind.FLOAT,
    "real": ScalarKind.FLOAT,
    "int": ScalarKind.INT,
    "integer": ScalarKind.INT,
    "unset": ScalarKind.NULL,
    "null": ScalarKind.NULL,
    "object": ScalarKind.OBJECT,
    "string": ScalarKind.STRING,
    "scalar": ScalarKind.SCALAR,
    "numeric": ScalarKind.NUMERIC,
    "callable": ScalarKind.CALLABLE,
    "resource": ScalarKind.RESOURCE,
}

# Optional surrounding whitespace, optional sign, digits with optional
# fraction (or a bare fraction), optional exponent.
_NUMERIC_STRING = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$", re.ASCII)

_TEXT_TYPES = (str, bytes, bytearray)

# Decimal is a numbers.Number but not a numbers.Real
_NUMBER_TYPES = (numbers.Real, decimal.Decimal)


def parse_tag(tag: Any, key: Hashable | None = None) -> ScalarKind:
    """Parse an external type tag into a ``ScalarKind``.

    Args:
        tag: Tag as written by the caller (case-insensitive string).
        key: Parameter key the tag belongs to, for error messages.

    Returns:
        The matching ScalarKind.

    Raises:
        ScalarConfigError: If the tag is not a string or is not recognised.
    """
    normalised = normalise_tag(tag, key=key)
    kind = TAG_ALIASES.get(normalised)
    if kind is None:
        raise ScalarConfigError(
            f"Scalar enforce call error: unrecognised scalar type '{normalised}' "
            f"for parameter {key!r}",
            key=key,
        )
    return kind


def normalise_tag(tag: Any, key: Hashable | None = None) -> str:
    """Lowercase *tag*, raising ScalarConfigError if it is not a string."""
    if not isinstance(tag, str):
        raise ScalarConfigError(
            f"Scalar enforce call error: unexpected '{type(tag).__name__}' for "
            f"parameter {key!r}, expected str or None",
            key=key,
        )
    return tag.lower()


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------


def is_numeric_string(value: Any) -> bool:
    """True if *value* is a str that looks like a decimal number."""
    return isinstance(value, str) and _NUMERIC_STRING.match(value) is not None


def coerce_number(value: Any) -> int | float | numbers.Real | decimal.Decimal | None:
    """Coerce *value* to a number for soft comparisons, or None if impossible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, _NUMBER_TYPES):
        return value
    if is_numeric_string(value):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            return float(text)
    return None


def _soft_int(value: Any) -> bool:
    number = coerce_number(value)
    if number is None:
        return False
    try:
        return number == int(number)
    except (OverflowError, ValueError):
        # inf / nan have no integer coercion
        return False


def _soft_float(value: Any) -> bool:
    number = coerce_number(value)
    if number is None:
        return False
    try:
        return number == float(number)
    except (OverflowError, ValueError):
        return False


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_array(value: Any) -> bool:
    return isinstance(value, (Mapping, Sequence)) and not isinstance(value, _TEXT_TYPES)


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_int(value: Any, soft: bool = False) -> bool:
    if isinstance(value, numbers.Integral) and not isinstance(value, bool):
        return True
    return soft and _soft_int(value)


def is_float(value: Any, soft: bool = False) -> bool:
    if isinstance(value, float):
        return True
    return soft and _soft_float(value)


def is_null(value: Any) -> bool:
    return value is None


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_scalar(value: Any) -> bool:
    """Primitive check: bool, integral, float or str."""
    return isinstance(value, (bool, numbers.Integral, float, str))


def is_numeric(value: Any) -> bool:
    """Real number or Decimal (bools excluded), or numeric-looking string."""
    if isinstance(value, bool):
        return False
    return isinstance(value, _NUMBER_TYPES) or is_numeric_string(value)


def is_callable(value: Any) -> bool:
    return callable(value)


def is_resource(value: Any) -> bool:
    """Open handle to an external resource: file object, socket or mmap."""
    if isinstance(value, (io.IOBase, mmap.mmap)):
        return not value.closed
    if isinstance(value, socket.socket):
        return value.fileno() != -1
    return False


def is_object(value: Any) -> bool:
    """Composite value: anything that is not null, scalar or array."""
    return value is not None and not is_scalar(value) and not is_array(value)


_PREDICATES: dict[ScalarKind, Callable[[Any], bool]] = {
    ScalarKind.ARRAY: is_array,
    ScalarKind.BOOL: is_bool,
    ScalarKind.NULL: is_null,
    ScalarKind.OBJECT: is_object,
    ScalarKind.STRING: is_string,
    ScalarKind.SCALAR: is_scalar,
    ScalarKind.NUMERIC: is_numeric,
    ScalarKind.CALLABLE: is_callable,
    ScalarKind.RESOURCE: is_resource,
}


def matches(kind: ScalarKind, value: Any, soft_numeric: bool = False) -> bool:
    """Return True if *value* satisfies the predicate for *kind*.

    Args:
        kind: Parsed scalar kind.
        value: Value under test (None for absent parameters).
        soft_numeric: Enable equality-after-coercion for INT and FLOAT.
    """
    if kind is ScalarKind.INT:
        return is_int(value, soft=soft_numeric)
    if kind is ScalarKind.FLOAT:
        return is_float(value, soft=soft_numeric)
    return _PREDICATES[kind](value)


__all__ = [
    "TAG_ALIASES",
    "ScalarKind",
    "coerce_number",
    "is_numeric_string",
    "matches",
    "normalise_tag",
    "parse_tag",
]
