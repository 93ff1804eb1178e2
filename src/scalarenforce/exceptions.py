"""Exception hierarchy for scalarenforce."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scalarenforce.validation import ScalarFailure


class ScalarEnforceError(Exception):
    """Base exception for scalarenforce."""


class ScalarConfigError(ScalarEnforceError):
    """The validator itself was misused (bad type tag or bad options).

    Raised regardless of ``report_only``: this is a defect in the calling
    code, not a data validation failure.
    """

    def __init__(self, message: str, key: Hashable | None = None):
        super().__init__(message)
        self.key = key


class ScalarTypeError(ScalarEnforceError, TypeError):
    """One or more parameter values did not match their declared scalar type."""

    def __init__(self, failures: Sequence[ScalarFailure], context: str | None = None):
        self.failures = list(failures)
        self.context = context
        lines = [str(failure) for failure in self.failures]
        if len(lines) == 1:
            message = lines[0]
        else:
            message = f"{len(lines)} scalar enforcement errors:\n" + "\n".join(
                f"  {line}" for line in lines
            )
        super().__init__(message)
