# =============================================================================
# firstaid_core/errors/handlers.py
# Error Handling Utilities for the Streamlit pages
# =============================================================================

from __future__ import annotations
import functools
import traceback
from typing import Optional, Callable, TypeVar, Any
import streamlit as st

from firstaid_core.logging import get_logger
from .exceptions import FirstAidError, CaseValidationError

logger = get_logger(__name__)

T = TypeVar("T")


def handle_error(
    error: Exception,
    show_user_message: bool = True,
    log_error: bool = True,
    user_message: Optional[str] = None,
) -> None:
    """
    Centralized error handling function.

    Args:
        error: The exception to handle
        show_user_message: Whether to display error to user via st.error
        log_error: Whether to log the error
        user_message: Custom message to show user (uses error message if None)
    """
    if isinstance(error, FirstAidError):
        message = user_message or error.message
        code = error.code
        details = error.details
        recoverable = error.recoverable
    else:
        message = user_message or str(error)
        code = "UNKNOWN"
        details = {"traceback": traceback.format_exc()}
        recoverable = True

    if log_error:
        # Validation problems are user input, not faults
        if isinstance(error, CaseValidationError):
            logger.info(f"[{code}] {message}: {error.problems}")
        else:
            logger.error(
                f"[{code}] {message}",
                extra={"details": details},
                exc_info=True,
            )

    if show_user_message:
        if isinstance(error, CaseValidationError) and error.problems:
            st.error(f"{message}:\n\n" + "\n".join(f"- {p}" for p in error.problems))
        elif recoverable:
            st.error(f"Error: {message}")
        else:
            st.error(f"Critical Error: {message}. Please contact support.")


def error_boundary(
    default_return: Any = None,
    error_message: Optional[str] = None,
    log: bool = True,
):
    """
    Decorator to wrap functions with error handling.

    Args:
        default_return: Value to return if function fails
        error_message: Custom error message
        log: Whether to log errors

    Usage:
        @error_boundary(default_return=[], error_message="Could not load cases")
        def load_cases() -> List[CaseRecord]:
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., Optional[T]]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Optional[T]:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if log:
                    logger.error(
                        f"Error in {func.__name__}: {e}",
                        exc_info=True,
                    )
                if error_message:
                    st.error(error_message)
                return default_return

        return wrapper

    return decorator
