"""Error categories for Chit Chest.

Every domain error belongs to exactly one of five categories. The category
decides how a caller should react; none of them is ever retried by the
system itself.

- ValidationError: caller-fixable input problem (bad emotion, empty content,
  out-of-range duration). Surfaced verbatim.
- AuthorizationError: caller is not a member of the chest or pair.
- StateError: operation attempted outside its allowed chest status or
  write window. A hard rejection, not a warning.
- NotFoundError: unknown chest, chit, identity or username.
- ConflictError: already paired, chest already live, re-pairing blocked,
  concurrent modification. The caller resolves the conflict.
"""

from src.domain.exceptions import ChestAppError


class ValidationError(ChestAppError):
    """Input failed validation. Always fixable by the caller.

    HTTP Status: 422 Unprocessable Entity
    """

    status_code = 422
    error_type = "urn:chitchest:validation"
    title = "Validation Failed"


class AuthorizationError(ChestAppError):
    """Caller is not a member of the chest or pair it is acting on.

    HTTP Status: 403 Forbidden
    """

    status_code = 403
    error_type = "urn:chitchest:authorization"
    title = "Not Authorized"


class StateError(ChestAppError):
    """Operation attempted outside its allowed status or time window.

    HTTP Status: 409 Conflict
    """

    status_code = 409
    error_type = "urn:chitchest:state"
    title = "Operation Not Allowed In Current State"


class NotFoundError(ChestAppError):
    """A referenced entity does not exist.

    HTTP Status: 404 Not Found
    """

    status_code = 404
    error_type = "urn:chitchest:not-found"
    title = "Not Found"


class ConflictError(ChestAppError):
    """The request conflicts with existing state.

    HTTP Status: 409 Conflict
    """

    status_code = 409
    error_type = "urn:chitchest:conflict"
    title = "Conflict"
