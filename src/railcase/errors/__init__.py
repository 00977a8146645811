"""Error taxonomy and fault handling.

- Error/GenericError/AggregateError: failure payloads carried by Result
- InvalidResultStateError/UnreachableStateError: programming errors, raised
- is_critical/fail_fast: process termination for unrecoverable faults
"""

from .critical import CRITICAL_EXCEPTIONS, fail_fast, fail_fast_if_critical, is_critical
from .errors import (
    AggregateError,
    Error,
    GenericError,
    InvalidResultStateError,
    UnreachableStateError,
    to_generic_error,
)

__all__ = [
    # Error values
    "Error", "GenericError", "AggregateError", "to_generic_error",
    # Programming errors
    "InvalidResultStateError", "UnreachableStateError",
    # Critical faults
    "CRITICAL_EXCEPTIONS", "is_critical", "fail_fast", "fail_fast_if_critical",
]
