"""Invariant validator.

A small fail-fast builder used by every domain constructor and mutator:

    Invariant.create()
        .not_null_or_whitespace(name, "name")
        .non_negative(major, "major")
        .validate_and_create(lambda: Media(...))

Checks are stored as thunks and evaluated in declaration order when
``validate_and_create`` runs. Evaluation stops at the first failing check, so
a failure never carries a compound message and later checks (which may
assume earlier ones held) are never executed.
"""

from __future__ import annotations

from typing import Callable, Hashable, Iterable, Optional, TypeVar

from release_notifier.domain.results import Error, Errors, Result

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

_Check = Callable[[], Optional[Error]]


class Invariant:
    def __init__(self) -> None:
        self._checks: list[_Check] = []

    @classmethod
    def create(cls) -> "Invariant":
        return cls()

    def not_null_or_whitespace(self, value: Optional[str], name: str) -> "Invariant":
        def check() -> Optional[Error]:
            if value is None or not value.strip():
                return Errors.invariant_violation(f"{name} must not be empty")
            return None

        self._checks.append(check)
        return self

    def non_negative(self, value: int, name: str) -> "Invariant":
        def check() -> Optional[Error]:
            if value < 0:
                return Errors.invariant_violation(f"{name} must be >= 0, got {value}")
            return None

        self._checks.append(check)
        return self

    def positive(self, value: int, name: str) -> "Invariant":
        def check() -> Optional[Error]:
            if value <= 0:
                return Errors.invariant_violation(f"{name} must be > 0, got {value}")
            return None

        self._checks.append(check)
        return self

    def unique_within(
        self,
        value: T,
        collection: Iterable[T],
        name: str,
        key: Callable[[T], Hashable] = lambda item: item,  # type: ignore[assignment,return-value]
    ) -> "Invariant":
        """Fail when an element of ``collection`` has the same key as ``value``."""

        def check() -> Optional[Error]:
            wanted = key(value)
            if any(key(item) == wanted for item in collection):
                return Errors.invariant_violation(f"{name} must be unique")
            return None

        self._checks.append(check)
        return self

    def satisfies(self, predicate: Callable[[], bool], error: Error) -> "Invariant":
        """Arbitrary check; ``predicate`` is only called if earlier checks passed."""

        def check() -> Optional[Error]:
            return None if predicate() else error

        self._checks.append(check)
        return self

    def validate(self) -> Result[None]:
        for check in self._checks:
            error = check()
            if error is not None:
                return Result.fail(error)
        return Result.ok()

    def validate_and_create(self, factory: Callable[[], T]) -> Result[T]:
        return self.validate().map(lambda _: factory())
