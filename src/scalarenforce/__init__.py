"""scalarenforce -- runtime scalar type enforcement for function parameters.

Public API:
    enforce_scalars, check_scalars, merge_defaults, scalar_args,
    EnforceOptions, ScalarKind, ScalarFailure, ValidationResult,
    ScalarEnforceError, ScalarConfigError, ScalarTypeError, __version__
"""

from scalarenforce.decorators import scalar_args
from scalarenforce.exceptions import ScalarConfigError, ScalarEnforceError, ScalarTypeError
from scalarenforce.kinds import ScalarKind
from scalarenforce.options import EnforceOptions, merge_defaults
from scalarenforce.validation import (
    ScalarFailure,
    ValidationResult,
    check_scalars,
    enforce_scalars,
)

__version__: str = "0.2.0"

__all__ = [
    "EnforceOptions",
    "ScalarConfigError",
    "ScalarEnforceError",
    "ScalarFailure",
    "ScalarKind",
    "ScalarTypeError",
    "ValidationResult",
    "__version__",
    "check_scalars",
    "enforce_scalars",
    "merge_defaults",
    "scalar_args",
]
