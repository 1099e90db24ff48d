"""
Custom exception hierarchy for AlloyShare.

Provides structured error types for better error handling and debugging.
All exceptions inherit from AlloyShareError for easy catching.
"""

from typing import Any


class AlloyShareError(Exception):
    """
    Base exception for all AlloyShare errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize AlloyShare error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class NoCommandSelected(AlloyShareError):
    """
    Execution was requested without a selected command.
    User error; surfaced as a message without changing any session state.
    """

    pass


class SolverModelError(AlloyShareError):
    """
    The solver rejected the submitted model text.
    Carries the solver's message and source range for highlighting.
    """

    def __init__(self, message: str, error: Any = None, context: dict | None = None):
        super().__init__(message, context)
        self.error = error


class TransportError(AlloyShareError):
    """
    Solver RPC failure (connectivity, timeout, malformed envelope).
    Never retried automatically; every retry is a fresh user action.
    """

    pass


class SessionBusyError(AlloyShareError):
    """
    A solve request is already outstanding for the current session.
    """

    pass


class DanglingParent(AlloyShareError):
    """
    A derivation refers to a model that does not exist in the store.
    Fatal to the share operation.
    """

    pass


class StoreError(AlloyShareError):
    """
    Model store operation errors.
    Raised when the underlying database fails.
    """

    pass


class ValidationError(AlloyShareError):
    """
    Validation errors.
    Raised when input validation fails or data is invalid.
    """

    pass


class NotFoundError(AlloyShareError):
    """
    Resource not found errors.
    Raised when a requested model or link doesn't exist.
    """

    pass


class ConfigurationError(AlloyShareError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass
