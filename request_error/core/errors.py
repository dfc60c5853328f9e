from __future__ import annotations

import numbers
from http import HTTPStatus
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

STATUSES: Mapping[str, int] = MappingProxyType(
    {
        "bad_request": HTTPStatus.BAD_REQUEST.value,
        "unauthorized": HTTPStatus.UNAUTHORIZED.value,
        "forbidden": HTTPStatus.FORBIDDEN.value,
        "not_found": HTTPStatus.NOT_FOUND.value,
        "conflict": HTTPStatus.CONFLICT.value,
        "internal_server_error": HTTPStatus.INTERNAL_SERVER_ERROR.value,
    }
)

Details = Union["RequestError", BaseException, str, None]


def _message_of(value: Any) -> Optional[str]:
    """Extract a detail string from an error, a string or nothing."""
    if value is None:
        return None
    if isinstance(value, RequestError):
        return value.message
    if isinstance(value, BaseException):
        return str(value) or type(value).__name__
    return value if isinstance(value, str) else str(value)


def _is_status(value: Any) -> bool:
    # bool is an int subclass but never a status
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _status_of(value: numbers.Real) -> Union[int, float]:
    """Whole numbers become ints; nan, inf and fractions are kept as given."""
    if isinstance(value, numbers.Integral):
        return int(value)
    number = float(value)
    return int(number) if number.is_integer() else value


class RequestError(Exception):
    """A user-facing error classified by an HTTP-style status code.

    Instances are read-only. Context is added with ``create(message, error)``,
    which returns a new error keeping the original status and pushing the
    previous message into ``details``.
    """

    statuses = STATUSES

    def __init__(
        self,
        message: str,
        status: int = STATUSES["bad_request"],
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self._message = message
        self._status = status
        self._details = details

    # ---- factories ----

    @classmethod
    def create(
        cls,
        message: str,
        status_or_details: Union[int, Details] = None,
        details: Details = None,
    ) -> "RequestError":
        """Build an error from whatever the caller has at hand.

        The second argument decides the path: an existing ``RequestError`` is
        wrapped, a number is taken as the status (with ``details`` as the third
        argument), anything else becomes the details of a 400 error.
        """
        if isinstance(status_or_details, RequestError):
            return status_or_details._wrap(message)

        if _is_status(status_or_details):
            return cls(message, _status_of(status_or_details), _message_of(details))

        return cls(message, STATUSES["bad_request"], _message_of(status_or_details))

    @classmethod
    def create_from_error(cls, error: Union["RequestError", BaseException, str]) -> "RequestError":
        if isinstance(error, RequestError):
            return error.clone()
        return cls.create(_message_of(error) or "")

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized", details: Details = None) -> "RequestError":
        return cls.create(message, STATUSES["unauthorized"], details)

    @classmethod
    def forbidden(cls, message: str, details: Details = None) -> "RequestError":
        return cls.create(message, STATUSES["forbidden"], details)

    @classmethod
    def not_found(cls, message: str, details: Details = None) -> "RequestError":
        return cls.create(message, STATUSES["not_found"], details)

    @classmethod
    def conflict(cls, message: str, details: Details = None) -> "RequestError":
        return cls.create(message, STATUSES["conflict"], details)

    @classmethod
    def internal_server_error(cls, message: str, details: Details = None) -> "RequestError":
        return cls.create(message, STATUSES["internal_server_error"], details)

    # ---- fields ----

    @property
    def message(self) -> str:
        return self._message

    @property
    def status(self) -> int:
        return self._status

    @property
    def details(self) -> Optional[str]:
        return self._details

    @property
    def full_message(self) -> str:
        return ": ".join(part for part in (self._message, self._details) if part)

    # ---- conversions ----

    def to_json(self) -> Dict[str, Any]:
        return {"message": self._message, "status": self._status, "details": self._details}

    def to_string(self) -> str:
        return ": ".join(part for part in (f"Error {self._status}", self._message) if part)

    def to_full_string(self) -> str:
        return ": ".join(part for part in (f"Error {self._status}", self.full_message) if part)

    def clone(self) -> "RequestError":
        return type(self)(self._message, self._status, self._details)

    def _wrap(self, message: str) -> "RequestError":
        trail = f"{self._message}: {self._details}" if self._details else self._message
        return type(self)(message, self._status, trail)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self._message!r}, "
            f"status={self._status!r}, details={self._details!r})"
        )

    def __reduce__(self):
        return (type(self), (self._message, self._status, self._details))
