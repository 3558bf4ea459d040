"""
Observability components.

Provides structured logging with correlation IDs and authorization context.
"""

from .logging import (
    ContextualLoggerAdapter,
    clear_correlation_id,
    clear_rbac_context,
    get_correlation_id,
    get_logger,
    get_logging_context,
    log_operation,
    set_correlation_id,
    set_rbac_context,
)

__all__ = [
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    "set_rbac_context",
    "clear_rbac_context",
    "get_logging_context",
    "ContextualLoggerAdapter",
    "get_logger",
    "log_operation",
]
