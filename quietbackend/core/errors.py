"""Two-Face Errors — internal diagnostics paired with a user-facing description.

Invariants:
    - Cause is a closed taxonomy; every Cause maps to exactly one HTTP status
    - str(TwoFaceError) shows only the external half; internal never leaves the process
    - A failure nobody described becomes ServerError / "Internal server error"
    - to_response() produces the single-field REST envelope {"error": "<Cause>: <text>"}

Design Decisions:
    - Status codes as plain ints: core never imports the web framework (ADR: core/shell split)
    - Specific causes only through an explicit describe() at the point of failure,
      so undocumented failures never guess a more specific status
"""

from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator


class Cause(str, Enum):
    """User-facing explanation of what caused a failure."""
    SERVER_ERROR = "ServerError"
    USER_ACTION_INVALID = "UserActionInvalid"
    USER_INVALID_FIELD = "UserInvalidField"
    USER_BAD_AUTH = "UserBadAuth"
    USER_CONFLICT = "UserConflict"
    NOT_FOUND = "NotFound"

    @property
    def http_status(self) -> int:
        return _STATUS_BY_CAUSE[self]

    def __str__(self) -> str:
        return self.value


_STATUS_BY_CAUSE: dict[Cause, int] = {
    Cause.SERVER_ERROR: 500,
    Cause.USER_ACTION_INVALID: 400,
    Cause.USER_INVALID_FIELD: 400,
    Cause.USER_BAD_AUTH: 401,
    Cause.USER_CONFLICT: 409,
    Cause.NOT_FOUND: 404,
}


@dataclass(frozen=True)
class ExternalError:
    """A user-friendly error that contains no sensitive information."""
    cause: Cause = Cause.SERVER_ERROR
    text: str = "Internal server error"

    def __str__(self) -> str:
        return f"{self.cause}: {self.text}"


class TwoFaceError(Exception):
    """Failure with a private internal half and a public external half.

    ``internal`` may be an exception, a message or any structured detail. It
    can contain secrets (file names, SQL, credentials in a DSN) and is only
    ever written to logs.
    """

    def __init__(self, internal: Any, external: ExternalError | None = None):
        self.internal = internal
        self.external = external or ExternalError()
        super().__init__(str(self.external))

    def __str__(self) -> str:
        return str(self.external)

    def __repr__(self) -> str:
        return f"TwoFaceError(internal={self.internal!r}, external={self.external!r})"

    @property
    def cause(self) -> Cause:
        return self.external.cause

    @property
    def http_status(self) -> int:
        return self.external.cause.http_status

    @classmethod
    def from_exception(cls, exc: BaseException) -> "TwoFaceError":
        """Wrap an undescribed failure with the safe default external error."""
        if isinstance(exc, TwoFaceError):
            return exc
        return cls(internal=exc)

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {"error": str(self.external)}


def describe(internal: Any, external: ExternalError) -> TwoFaceError:
    """Describe an internal failure to users."""
    return TwoFaceError(internal=internal, external=external)


@contextmanager
def describe_failures(external: ExternalError) -> Iterator[None]:
    """Re-raise any exception from the block as a TwoFaceError with ``external``.

    Errors that are already described keep their own external half.
    """
    try:
        yield
    except TwoFaceError:
        raise
    except Exception as e:
        raise describe(e, external) from e
