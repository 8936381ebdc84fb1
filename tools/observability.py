"""Observability helpers for instrumenting catalog operations."""

from __future__ import annotations

import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, TypeVar

from wardrobe_app.logging_config import ensure_correlation_id, get_logger, log_event, redact_for_log

LOGGER = get_logger(__name__)
F = TypeVar("F", bound=Callable[..., Any])


def _preview_kwargs(kwargs: Dict[str, Any], max_keys: int = 6) -> Dict[str, Any]:
    preview: Dict[str, Any] = {}
    for idx, (key, value) in enumerate(kwargs.items()):
        if idx >= max_keys:
            preview["truncated"] = True
            break
        preview[key] = value
    return redact_for_log(preview)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def instrument_operation(operation: str) -> Callable[[F], F]:
    """Wrap a sync or async callable to emit structured start/finish/failure logs."""

    def decorator(func: F) -> F:
        def _started(kwargs: Dict[str, Any]) -> str:
            correlation_id = ensure_correlation_id()
            log_event(
                LOGGER,
                logging.DEBUG,
                "operation_started",
                operation=operation,
                correlation_id=correlation_id,
                kwargs=_preview_kwargs(kwargs),
            )
            return correlation_id

        def _failed(correlation_id: str, start: float) -> None:
            log_event(
                LOGGER,
                logging.ERROR,
                "operation_failed",
                operation=operation,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(start),
                exc_info=True,
            )

        def _completed(correlation_id: str, start: float) -> None:
            log_event(
                LOGGER,
                logging.INFO,
                "operation_completed",
                operation=operation,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(start),
            )

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                start = time.perf_counter()
                correlation_id = _started(kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception:
                    _failed(correlation_id, start)
                    raise
                _completed(correlation_id, start)
                return result

            return async_wrapper  # type: ignore[return-value]

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            correlation_id = _started(kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception:
                _failed(correlation_id, start)
                raise
            _completed(correlation_id, start)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = ["instrument_operation"]
