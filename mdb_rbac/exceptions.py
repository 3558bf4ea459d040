"""
Custom exceptions for MDB_RBAC.

Policy outcomes (allowed, denied, not a member, ...) are never raised; they are
returned as decisions. These exceptions are reserved for system faults such as
storage outages and invalid configuration.
"""

from typing import Any, Dict, Optional


class RbacEngineError(RuntimeError):
    """
    Base exception for RBAC engine errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (collection,
                 operation, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class RbacStorageError(RbacEngineError):
    """
    Raised when a storage lookup fails during authorization.

    A storage outage must never be read as either allow or deny, so the
    engine surfaces it to the caller instead of producing a decision.

    Attributes:
        message: Error message
        collection: Collection that was being queried (if available)
        operation: Repository operation that failed (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if collection:
            context["collection"] = collection
        if operation:
            context["operation"] = operation
        super().__init__(message, context=context)
        self.collection = collection
        self.operation = operation


class InitializationError(RbacEngineError):
    """
    Raised when the MongoDB connection cannot be established.

    Attributes:
        message: Error message
        mongo_uri: MongoDB connection URI (if available)
        db_name: Database name (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        mongo_uri: Optional[str] = None,
        db_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if mongo_uri:
            context["mongo_uri"] = mongo_uri
        if db_name:
            context["db_name"] = db_name
        super().__init__(message, context=context)
        self.mongo_uri = mongo_uri
        self.db_name = db_name


class ConfigurationError(RbacEngineError):
    """
    Raised when configuration is invalid or missing.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value
