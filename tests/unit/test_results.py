"""Unit tests for release_notifier.domain.results — Result, Error, Errors."""

from __future__ import annotations

import pytest

from release_notifier.domain.results import Error, ErrorCode, Errors, Result


class TestResult:
    def test_ok_without_value(self) -> None:
        result = Result.ok()
        assert result.is_success
        assert not result.is_failure
        assert result.value is None

    def test_fail_carries_error(self) -> None:
        error = Errors.not_found("Media", "Bleach")
        result = Result.fail(error)
        assert result.is_failure
        assert result.error == error

    def test_reading_value_of_failure_raises(self) -> None:
        with pytest.raises(ValueError):
            _ = Result.fail(Errors.unexpected("boom")).value

    def test_reading_error_of_success_raises(self) -> None:
        with pytest.raises(ValueError):
            _ = Result.ok(1).error

    def test_map_transforms_success(self) -> None:
        assert Result.ok(2).map(lambda v: v * 10) == Result.ok(20)

    def test_map_short_circuits_failure(self) -> None:
        calls = []
        failed = Result.fail(Errors.unexpected("boom"))
        mapped = failed.map(lambda v: calls.append(v))
        assert mapped.is_failure
        assert calls == []

    def test_bind_chains_result_returning_step(self) -> None:
        result = Result.ok(3).bind(lambda v: Result.ok(v + 1))
        assert result.value == 4

    def test_bind_returns_failure_of_step(self) -> None:
        error = Errors.invariant_violation("nope")
        result = Result.ok(3).bind(lambda v: Result.fail(error))
        assert result.error == error

    def test_bind_short_circuits_failure(self) -> None:
        error = Errors.invariant_violation("first")
        result = Result.fail(error).bind(lambda v: Result.fail(Errors.unexpected("second")))
        assert result.error == error

    def test_success_if(self) -> None:
        error = Errors.unsubscribe_failed("Bleach")
        assert Result.success_if(True, error).is_success
        assert Result.success_if(False, error).error == error

    def test_results_are_not_hashable(self) -> None:
        with pytest.raises(TypeError):
            hash(Result.ok(1))


class TestErrors:
    @pytest.mark.parametrize(
        "error, code",
        [
            (Errors.not_found("Media", "x"), ErrorCode.NOT_FOUND),
            (Errors.invariant_violation("x"), ErrorCode.INVARIANT_VIOLATION),
            (Errors.scrape_target_exists("u"), ErrorCode.SCRAPE_TARGET_EXISTS),
            (Errors.scrape_target_references_other_media("u"), ErrorCode.SCRAPE_TARGET_REFERENCES_OTHER_MEDIA),
            (Errors.scrape_failed("u", "r"), ErrorCode.SCRAPE_FAILED),
            (Errors.all_scrapes_failed(3), ErrorCode.SCRAPE_FAILED),
            (Errors.unsubscribe_failed("m"), ErrorCode.UNSUBSCRIBE_FAILED),
            (Errors.unexpected("x"), ErrorCode.UNEXPECTED),
        ],
    )
    def test_factory_codes(self, error: Error, code: ErrorCode) -> None:
        assert error.code is code

    def test_str_includes_code_and_message(self) -> None:
        assert str(Errors.not_found("Media", "Bleach")) == "NotFound: Media 'Bleach' was not found"

    def test_all_scrapes_failed_message(self) -> None:
        assert Errors.all_scrapes_failed(3).message == "all 3 scrape targets failed"

    def test_error_code_is_str_enum(self) -> None:
        assert ErrorCode.SCRAPE_FAILED == "ScrapeFailed"
