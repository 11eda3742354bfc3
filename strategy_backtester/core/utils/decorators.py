"""
Utility decorators for input validation and trade logging.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger

from strategy_backtester.core.exceptions.backtest import ValidationError
from strategy_backtester.core.utils.validation import validate_positive, validate_symbol

_NUMERIC_TRADING_PARAMS = ("quantity", "price")
_LOGGED_TRADING_PARAMS = ("symbol", "quantity", "price", "trade_date")

F = TypeVar("F", bound=Callable[..., Any])


def _validate_trading_parameter(param_name: str, value: Any, bound_args: Any) -> None:
    """Validate a single trading parameter."""
    if param_name == "symbol" and value is not None:
        try:
            bound_args.arguments[param_name] = validate_symbol(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid {param_name}: {e}") from e

    elif param_name in _NUMERIC_TRADING_PARAMS and value is not None:
        bound_args.arguments[param_name] = validate_positive(value, param_name)


def _bind_arguments(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> inspect.BoundArguments:
    """Bind call arguments to the function signature, applying defaults."""
    bound_args = inspect.signature(func).bind(*args, **kwargs)
    bound_args.apply_defaults()
    return bound_args


def validate_inputs(func: F) -> F:
    """Decorator to validate trading inputs (symbol, quantity, price)."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        bound_args = _bind_arguments(func, args, kwargs)
        for param_name, value in bound_args.arguments.items():
            if param_name != "self":
                _validate_trading_parameter(param_name, value, bound_args)
        return func(*bound_args.args, **bound_args.kwargs)

    return wrapper  # type: ignore


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    elif hasattr(value, "value"):
        return str(value.value)  # Handle enum values
    return value


def _extract_trading_context(bound_args: inspect.BoundArguments) -> dict[str, Any]:
    """Extract trading context from function arguments."""
    return {
        param_name: _serialize_parameter_value(value)
        for param_name, value in bound_args.arguments.items()
        if param_name in _LOGGED_TRADING_PARAMS
    }


def log_trades(func: F) -> F:
    """Decorator to log ledger operations with correlation IDs."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        context = {
            "correlation_id": str(uuid.uuid4())[:8],
            **_extract_trading_context(_bind_arguments(func, args, kwargs)),
        }
        func_name = func.__name__
        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            execution_time_ms = (time.perf_counter() - start_time) * 1000
            logger.bind(
                **context,
                success=False,
                execution_time_ms=round(execution_time_ms, 2),
                error_type=type(e).__name__,
            ).warning(f"Ledger operation failed: {func_name}: {e}")
            raise

        execution_time_ms = (time.perf_counter() - start_time) * 1000
        logger.bind(
            **context, success=True, execution_time_ms=round(execution_time_ms, 2)
        ).success(f"Ledger operation completed: {func_name}")
        return result

    return wrapper  # type: ignore
