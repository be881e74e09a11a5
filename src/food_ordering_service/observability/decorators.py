"""OpenTelemetry tracing decorators."""

import functools
import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

from food_ordering_service.services.errors import OrderingError

F = TypeVar("F", bound=Callable[..., Any])


@contextmanager
def _operation_span(tracer: trace.Tracer, name: str, function_name: str) -> Iterator[Span]:
    with tracer.start_as_current_span(
        name, record_exception=False, set_status_on_exception=False
    ) as span:
        span.set_attribute("function.name", function_name)
        try:
            yield span
        except OrderingError as e:
            # Client-caused outcomes (not found, bad credentials) are not span errors
            span.set_attribute("success", False)
            span.set_attribute("error.type", type(e).__name__)
            span.set_attribute("error.expected", e.status_code < 500)
            if e.status_code >= 500:
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, type(e).__name__))
            raise
        except Exception as e:
            span.set_attribute("success", False)
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise
        else:
            span.set_attribute("success", True)


def traced(span_name: str | None = None, service_name: str = "food-ordering-svc") -> Callable[[F], F]:
    """Decorator to add OpenTelemetry tracing to a service operation.

    Creates a span per call. Domain errors raised by the operation are tagged
    with their type and whether they are expected client outcomes; anything
    else is recorded as an exception on the span. Async functions are supported.

    Args:
        span_name: Name for the span (defaults to function name if not provided)
        service_name: Instrumentation scope name for the tracer

    Returns:
        Decorated function with tracing

    Example:
        @traced("place_order")
        async def place_order(user_id: int, request: OrderRequest) -> Order:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with _operation_span(tracer, name, func.__name__):
                    return await func(*args, **kwargs)

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with _operation_span(tracer, name, func.__name__):
                return func(*args, **kwargs)

        return sync_wrapper  # type: ignore

    return decorator
