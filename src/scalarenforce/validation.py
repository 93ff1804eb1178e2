"""Scalar type enforcement for function parameters.

Boundary:
    ``parse_type_spec`` rejects non-string tags up front. Tag names are
    resolved to ScalarKinds per key, after the null skip, so an unknown tag
    on an absent or None parameter goes unnoticed while ``allow_null`` is on.
    ``check_scalars`` is pure: it collects every failure into a
    ValidationResult. ``enforce_scalars`` applies the policy: raise by
    default, log and return False when ``report_only`` is set.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import Any

from scalarenforce.exceptions import ScalarConfigError, ScalarTypeError
from scalarenforce.kinds import ScalarKind, matches, normalise_tag, parse_tag
from scalarenforce.logging import get_logger
from scalarenforce.options import EnforceOptions, OptionsLike, load_default_options, merge_defaults

log = get_logger(__name__)

ParameterSet = Mapping[Hashable, Any]
TypeSpec = Mapping[Hashable, Any]

# key -> normalised (lowercase) tag, or None when the key opts out
ParsedTypeSpec = dict[Hashable, str | None]


@dataclass(frozen=True)
class ScalarFailure:
    """A parameter value that did not satisfy its declared scalar type.

    Attributes:
        key: Parameter name or positional index.
        expected: Normalised (lowercase) tag as written by the caller.
        kind: Parsed kind the tag maps to.
        actual: Runtime type name of the offending value.
        context: Optional call-site label.
    """

    key: Hashable
    expected: str
    kind: ScalarKind
    actual: str
    context: str | None = None

    def __str__(self) -> str:
        message = (
            f"Scalar enforcement error: expected scalar type '{self.expected}' "
            f"for parameter {self.key!r}, '{self.actual}' given"
        )
        if self.context:
            message += f" (in {self.context})"
        return message


@dataclass
class ValidationResult:
    """Outcome of checking a ParameterSet against a TypeSpec."""

    failures: list[ScalarFailure] = field(default_factory=list)
    context: str | None = None

    @property
    def ok(self) -> bool:
        return not self.failures

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_failures(self) -> None:
        """Raise ScalarTypeError if any failure was recorded."""
        if self.failures:
            raise ScalarTypeError(self.failures, context=self.context)


def parse_type_spec(scalars: TypeSpec) -> ParsedTypeSpec:
    """Normalise every tag in *scalars*, preserving iteration order.

    Tag names are not resolved here; ``check_parsed`` does that per key.

    Raises:
        ScalarConfigError: On the first tag that is neither a str nor None.
    """
    if not isinstance(scalars, Mapping):
        raise ScalarConfigError(f"Type spec must be a mapping, got '{type(scalars).__name__}'")
    return {
        key: None if tag is None else normalise_tag(tag, key=key) for key, tag in scalars.items()
    }


def _type_name(value: Any) -> str:
    return "None" if value is None else type(value).__name__


def check_parsed(
    values: ParameterSet,
    parsed: ParsedTypeSpec,
    options: EnforceOptions,
    context: str | None = None,
) -> ValidationResult:
    """Check *values* against an already parsed type spec.

    Raises:
        ScalarConfigError: On an unrecognised tag for a key that is not
            skipped by ``allow_null``.
    """
    if not isinstance(values, Mapping):
        raise ScalarConfigError(f"Values must be a mapping, got '{type(values).__name__}'")
    result = ValidationResult(context=context)
    for key, expected in parsed.items():
        if expected is None:
            continue

        present = key in values
        value = values[key] if present else None
        if value is None and options.allow_null:
            continue

        kind = parse_tag(expected, key=key)
        if not matches(kind, value, soft_numeric=options.soft_numeric):
            result.failures.append(
                ScalarFailure(
                    key=key,
                    expected=expected,
                    kind=kind,
                    actual=_type_name(value) if present else "unset",
                    context=context,
                )
            )
    return result


def check_scalars(
    values: ParameterSet,
    scalars: TypeSpec,
    options: OptionsLike = None,
    *,
    context: str | None = None,
) -> ValidationResult:
    """Check *values* against *scalars* without raising on validation failures.

    Args:
        values: Parameter key -> value. Missing keys are absent.
        scalars: Parameter key -> type tag, or None to skip the key.
        options: Mapping or EnforceOptions filled over the env defaults.
        context: Call-site label included in diagnostics.

    Returns:
        ValidationResult listing every failing key in ``scalars`` order.

    Raises:
        ScalarConfigError: If ``scalars`` or ``options`` is malformed.
    """
    parsed = parse_type_spec(scalars)
    merged = merge_defaults(options, load_default_options())
    return check_parsed(values, parsed, merged, context=context)


def report(result: ValidationResult, options: EnforceOptions, *, depth: int = 0) -> bool:
    """Apply the fatal/report policy to *result*.

    Each warning carries ``scalar_key`` and ``context`` as loguru extras and
    is attributed to the frame *depth* levels above ``report``'s caller.

    Returns:
        True if no failures; False if failures were logged in report-only mode.

    Raises:
        ScalarTypeError: If failures occurred and ``report_only`` is off.
    """
    if result.ok:
        return True
    if not options.report_only:
        result.raise_for_failures()
    caller_log = log.opt(depth=1 + depth)
    for failure in result.failures:
        caller_log.bind(scalar_key=failure.key, context=failure.context or "-").warning(
            str(failure)
        )
    return False


def enforce_scalars(
    values: ParameterSet,
    scalars: TypeSpec,
    options: OptionsLike = None,
    *,
    context: str | None = None,
) -> bool:
    """Enforce scalar types on a function's parameters.

    Intended to be called at the head of a function with its own arguments.
    Every key in ``scalars`` is checked; failures never short-circuit.

    Args:
        values: Parameter key -> value. Missing keys are absent, which is
            distinct from present-with-None only when ``allow_null`` is off.
        scalars: Parameter key -> type tag (case-insensitive), or None to
            skip the key.
        options: Mapping or EnforceOptions (``allow_null``, ``report_only``,
            ``soft_numeric``) filled over the env defaults.
        context: Call-site label (e.g. ``"module.func"``) for diagnostics.

    Returns:
        True if every key passed. False if any failed and ``report_only``
        is set (each failure is logged as a warning).

    Raises:
        ScalarConfigError: On a non-string tag, bad options, or an
            unrecognised tag on a key that is checked, regardless of
            ``report_only``.
        ScalarTypeError: On any validation failure when ``report_only``
            is off.

    Example:
        >>> enforce_scalars({"x": "5"}, {"x": "int"}, {"soft_numeric": True})
        True
    """
    parsed = parse_type_spec(scalars)
    merged = merge_defaults(options, load_default_options())
    result = check_parsed(values, parsed, merged, context=context)
    return report(result, merged, depth=1)


__all__ = [
    "ParameterSet",
    "ScalarFailure",
    "TypeSpec",
    "ValidationResult",
    "check_parsed",
    "check_scalars",
    "enforce_scalars",
    "parse_type_spec",
    "report",
]
