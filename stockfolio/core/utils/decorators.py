"""
Utility decorators for ledger command validation and logging.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, TypeVar

from loguru import logger

from stockfolio.core.exceptions.portfolio import PortfolioError, ValidationError
from stockfolio.core.utils.validation import (
    validate_convention,
    validate_date,
    validate_holding_id,
    validate_non_negative,
    validate_positive,
    validate_ticker,
)

F = TypeVar("F", bound=Callable[..., Any])

_POSITIVE_PARAMS = ("shares", "price_per_share", "shares_sold", "sale_price_per_share")
_DATE_PARAMS = ("purchase_date", "date_sold")
_LOGGED_PARAMS = ("ticker", "holding_id", "amount", "date_sold", *_POSITIVE_PARAMS)


def _validate_command_parameter(param_name: str, value: Any, bound_args: Any) -> None:
    """Validate (and normalize) a single command parameter by name."""
    if param_name == "ticker":
        bound_args.arguments[param_name] = validate_ticker(value)
    elif param_name in _POSITIVE_PARAMS:
        bound_args.arguments[param_name] = validate_positive(value, param_name)
    elif param_name == "amount":
        bound_args.arguments[param_name] = validate_non_negative(value, param_name)
    elif param_name == "holding_id" and value is not None:
        bound_args.arguments[param_name] = validate_holding_id(value)
    elif param_name in _DATE_PARAMS and value is not None:
        bound_args.arguments[param_name] = validate_date(value, param_name)
    elif param_name == "convention":
        bound_args.arguments[param_name] = validate_convention(value)


def _bind(func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
    sig = inspect.signature(func)
    try:
        bound_args = sig.bind(*args, **kwargs)
    except TypeError as e:
        raise ValidationError(f"Invalid arguments for {func.__name__}: {e}") from e
    bound_args.apply_defaults()
    return bound_args


def validate_inputs(func: F) -> F:
    """Decorator to validate ledger inputs (ticker, shares, prices, amounts, dates).

    Tickers are passed on trimmed and upper-cased, numbers as float.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        bound_args = _bind(func, args, kwargs)
        for param_name, value in bound_args.arguments.items():
            _validate_command_parameter(param_name, value, bound_args)
        return func(*bound_args.args, **bound_args.kwargs)

    return wrapper  # type: ignore


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if hasattr(value, "value"):
        return str(value.value)  # Handle enum values
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, dict):
        return len(value)
    else:
        return value


def _extract_command_context(bound_args: Any) -> dict[str, Any]:
    """Extract loggable context from command arguments."""
    context = {}
    for param_name, value in bound_args.arguments.items():
        if param_name in _LOGGED_PARAMS:
            context[param_name] = _serialize_parameter_value(value)
        elif param_name == "quotes" and isinstance(value, Mapping):
            context["quote_count"] = len(value)
    return context


def ledger_command(func: F) -> F:
    """Turn a raising snapshot transition into a non-raising ledger command.

    The wrapped function takes the current snapshot as its first argument and
    returns the next snapshot, raising ``ValidationError`` or ``PortfolioError``
    when the command cannot be applied. The wrapper returns a ``CommandResult``:
    on success the new snapshot with its version bumped, on failure the
    untouched input snapshot together with the error. Malformed calls (missing
    or surplus arguments) are rejected the same way. Every outcome is logged
    with a short correlation id.

    Raises:
        TypeError: If no snapshot is passed at all
    """
    from stockfolio.core.models.command import CommandResult
    from stockfolio.core.models.portfolio_core import PortfolioSnapshot

    snapshot_param = next(iter(inspect.signature(func).parameters))

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> CommandResult:
        correlation_id = str(uuid.uuid4())[:8]
        func_name = func.__name__
        snapshot = args[0] if args else kwargs.get(snapshot_param)
        if not isinstance(snapshot, PortfolioSnapshot):
            raise TypeError(f"{func_name} expects a PortfolioSnapshot as first argument")

        context: dict[str, Any] = {"correlation_id": correlation_id}
        start_time = time.time()

        try:
            bound_args = _bind(func, args, kwargs)
            context.update(_extract_command_context(bound_args))
            logger.debug(f"Ledger command started: {func_name}", extra=context)
            new_snapshot = func(*bound_args.args, **bound_args.kwargs)
        except (ValidationError, PortfolioError) as e:
            execution_time_ms = (time.time() - start_time) * 1000
            logger.warning(
                f"Ledger command rejected: {func_name}: {e}",
                extra={
                    **context,
                    "success": False,
                    "execution_time_ms": round(execution_time_ms, 2),
                    "error_type": type(e).__name__,
                },
            )
            return CommandResult(snapshot=snapshot, error=e)

        new_snapshot = new_snapshot.bumped(snapshot.version)
        execution_time_ms = (time.time() - start_time) * 1000
        logger.success(
            f"Ledger command applied: {func_name}",
            extra={
                **context,
                "success": True,
                "execution_time_ms": round(execution_time_ms, 2),
                "version": new_snapshot.version,
            },
        )
        return CommandResult(snapshot=new_snapshot)

    return wrapper  # type: ignore
