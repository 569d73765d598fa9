"""Result / error model.

Every command and query handler returns a ``Result``: either a success that
optionally carries a value, or a failure carrying exactly one ``Error``.
Business-rule failures never travel as exceptions; exceptions are reserved
for infrastructure faults (see ``release_notifier.domain.exceptions``).

``ErrorCode`` is a closed enumeration. The HTTP boundary maps codes to
user-facing text, so adding a code is a contract change.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")
U = TypeVar("U")


class ErrorCode(str, Enum):
    """Closed failure taxonomy."""

    NOT_FOUND = "NotFound"
    INVARIANT_VIOLATION = "InvariantViolation"
    SCRAPE_TARGET_EXISTS = "ScrapeTargetExists"
    SCRAPE_TARGET_REFERENCES_OTHER_MEDIA = "ScrapeTargetReferencesOtherMedia"
    SCRAPE_FAILED = "ScrapeFailed"
    UNSUBSCRIBE_FAILED = "UnsubscribeFailed"
    # Produced only by the dispatcher when a handler raised.
    UNEXPECTED = "Unexpected"


class Error(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class Result(Generic[T]):
    """Success-or-failure carrier.

    Use the constructors ``Result.ok`` / ``Result.fail`` rather than calling
    ``Result(...)`` directly. Reading ``value`` from a failure, or ``error``
    from a success, is a programming error and raises ``ValueError``.
    """

    __slots__ = ("_value", "_error")

    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None) -> None:
        self._value = value
        self._error = error

    # -- constructors -------------------------------------------------------

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: Error) -> "Result[T]":
        return cls(error=error)

    @classmethod
    def success_if(cls, condition: bool, error: Error) -> "Result[None]":
        """Success when ``condition`` holds, otherwise a failure with ``error``."""
        return cls.ok() if condition else cls.fail(error)

    # -- accessors ----------------------------------------------------------

    @property
    def is_success(self) -> bool:
        return self._error is None

    @property
    def is_failure(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T:
        if self._error is not None:
            raise ValueError(f"cannot read value of a failed result ({self._error})")
        return self._value  # type: ignore[return-value]

    @property
    def error(self) -> Error:
        if self._error is None:
            raise ValueError("cannot read error of a successful result")
        return self._error

    # -- combinators --------------------------------------------------------

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        if self._error is not None:
            return Result.fail(self._error)
        return Result.ok(fn(self._value))  # type: ignore[arg-type]

    def bind(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        """Chain a Result-returning step; short-circuits on failure."""
        if self._error is not None:
            return Result.fail(self._error)
        return fn(self._value)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        if self._error is not None:
            return f"Result.fail({self._error!r})"
        return f"Result.ok({self._value!r})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self._value == other._value and self._error == other._error

    __hash__ = None  # type: ignore[assignment]


class Errors:
    """Factories for every failure the domain and handlers report.

    Messages name the offending entity so that boundary logs are useful
    without a second lookup.
    """

    @staticmethod
    def not_found(entity: str, key: object) -> Error:
        return Error(code=ErrorCode.NOT_FOUND, message=f"{entity} '{key}' was not found")

    @staticmethod
    def invariant_violation(message: str) -> Error:
        return Error(code=ErrorCode.INVARIANT_VIOLATION, message=message)

    @staticmethod
    def scrape_target_exists(url: str) -> Error:
        return Error(
            code=ErrorCode.SCRAPE_TARGET_EXISTS,
            message=f"scrape target '{url}' already exists for this media",
        )

    @staticmethod
    def scrape_target_references_other_media(url: str) -> Error:
        return Error(
            code=ErrorCode.SCRAPE_TARGET_REFERENCES_OTHER_MEDIA,
            message=f"scrape target '{url}' already references a different media",
        )

    @staticmethod
    def scrape_failed(url: str, reason: str) -> Error:
        return Error(code=ErrorCode.SCRAPE_FAILED, message=f"scraping '{url}' failed: {reason}")

    @staticmethod
    def all_scrapes_failed(target_count: int) -> Error:
        return Error(
            code=ErrorCode.SCRAPE_FAILED,
            message=f"all {target_count} scrape targets failed",
        )

    @staticmethod
    def unsubscribe_failed(media_name: str) -> Error:
        return Error(
            code=ErrorCode.UNSUBSCRIBE_FAILED,
            message=f"unsubscribing from '{media_name}' failed",
        )

    @staticmethod
    def unexpected(message: str) -> Error:
        return Error(code=ErrorCode.UNEXPECTED, message=message)
