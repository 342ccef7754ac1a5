from enum import Enum


class FailureKind(str, Enum):
    """Why the last store or login operation returned a failed result."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    AUTHENTICATION = "authentication"


# HTTP status used by the routers for each kind of failure.
STATUS_CODES: dict[FailureKind, int] = {
    FailureKind.VALIDATION: 400,
    FailureKind.NOT_FOUND: 404,
    FailureKind.DUPLICATE: 400,
    FailureKind.AUTHENTICATION: 401,
}
