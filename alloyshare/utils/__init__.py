"""Utility modules for AlloyShare."""

from alloyshare.utils.exceptions import (
    AlloyShareError,
    ConfigurationError,
    DanglingParent,
    NoCommandSelected,
    NotFoundError,
    SessionBusyError,
    SolverModelError,
    StoreError,
    TransportError,
    ValidationError,
)
from alloyshare.utils.id_generator import generate_link_id, generate_model_id
from alloyshare.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # ID Generators
    "generate_model_id",
    "generate_link_id",
    # Exceptions
    "AlloyShareError",
    "NoCommandSelected",
    "SolverModelError",
    "TransportError",
    "SessionBusyError",
    "DanglingParent",
    "StoreError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
]
