"""Command / query dispatcher.

The dispatcher is the single entry point of the application layer. Every
front end (HTTP API, chat bot, Temporal activity) hands it a request value
and receives a ``Result``; it never sees an exception for a business failure
and never crashes on a single bad request.

Routing is an explicit registry built once at startup
(``release_notifier.container.build_dispatcher``):

    request type  →  async handler(request) -> Result

Contract:
- Exactly one handler per request type. Registering a second one raises
  DispatcherConfigurationError.
- Dispatching an unregistered type raises UnregisteredRequestError. This is
  a wiring bug, not a business failure, so it is not converted to a Result.
- Any other exception escaping a handler is logged and converted into a
  ``Result`` failure with code ``Unexpected``.
"""

from __future__ import annotations

import time
from typing import Any, Awaitable, Callable, TypeVar

import structlog

from release_notifier.application.requests import Request
from release_notifier.config import constants
from release_notifier.domain.exceptions import (
    DispatcherConfigurationError,
    DispatcherError,
    UnregisteredRequestError,
)
from release_notifier.domain.results import Errors, Result

TRequest = TypeVar("TRequest", bound=Request)

Handler = Callable[[Any], Awaitable[Result[Any]]]


class Dispatcher:
    def __init__(self) -> None:
        self._handlers: dict[type[Request], Handler] = {}

    def register(
        self,
        request_type: type[TRequest],
        handler: Callable[[TRequest], Awaitable[Result[Any]]],
    ) -> None:
        if request_type in self._handlers:
            raise DispatcherConfigurationError(
                f"a handler is already registered for {request_type.__name__}"
            )
        self._handlers[request_type] = handler

    @property
    def registered_types(self) -> frozenset[type[Request]]:
        return frozenset(self._handlers)

    async def dispatch(self, request: Request) -> Result[Any]:
        """Route ``request`` to its handler and return the handler's Result.

        Raises:
            UnregisteredRequestError: No handler for ``type(request)``.
        """
        request_name = type(request).__name__
        handler = self._handlers.get(type(request))
        if handler is None:
            raise UnregisteredRequestError(f"no handler registered for {request_name}")

        log = structlog.get_logger().bind(
            service=constants.SERVICE_NAME,
            component="dispatcher",
            request=request_name,
        )
        started_at = time.monotonic()

        try:
            result = await handler(request)
        except DispatcherError:
            raise
        except Exception as exc:  # noqa: BLE001
            duration_ms = int((time.monotonic() - started_at) * 1000)
            log.error(
                "dispatcher.handler_fault",
                status="failed",
                error=str(exc),
                error_type=type(exc).__name__,
                duration_ms=duration_ms,
                exc_info=True,
            )
            return Result.fail(
                Errors.unexpected(f"{request_name} failed unexpectedly: {type(exc).__name__}")
            )

        duration_ms = int((time.monotonic() - started_at) * 1000)
        if result.is_failure:
            log.info(
                "dispatcher.request_failed",
                status="failed",
                error_code=result.error.code.value,
                error=result.error.message,
                duration_ms=duration_ms,
            )
        else:
            log.debug("dispatcher.request_completed", status="completed", duration_ms=duration_ms)
        return result
