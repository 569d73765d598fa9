"""Translation of failed Results into HTTP errors.

Every failure code maps to one status and one user-facing message; the
detailed ``Error.message`` is logged by the dispatcher, never returned.
"""

from fastapi import HTTPException, status

from release_notifier.domain.results import Error, ErrorCode, Result

ERROR_RESPONSES: dict[ErrorCode, tuple[int, str]] = {
    ErrorCode.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Entity was not found"),
    ErrorCode.INVARIANT_VIOLATION: (status.HTTP_422_UNPROCESSABLE_ENTITY, "Creating entity failed"),
    ErrorCode.SCRAPE_TARGET_EXISTS: (status.HTTP_409_CONFLICT, "ScrapeTarget already exists"),
    ErrorCode.SCRAPE_TARGET_REFERENCES_OTHER_MEDIA: (
        status.HTTP_409_CONFLICT,
        "ScrapeTarget references different media",
    ),
    ErrorCode.SCRAPE_FAILED: (status.HTTP_502_BAD_GATEWAY, "Scraping for media failed"),
    ErrorCode.UNSUBSCRIBE_FAILED: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Unsubscribing failed"),
    ErrorCode.UNEXPECTED: (status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong"),
}


def to_http_exception(error: Error) -> HTTPException:
    status_code, message = ERROR_RESPONSES[error.code]
    return HTTPException(
        status_code=status_code,
        detail={"code": error.code.value, "message": message},
    )


def unwrap(result: Result):
    """Return the success value or raise the mapped HTTPException."""
    if result.is_failure:
        raise to_http_exception(result.error)
    return result.value
