"""
ID generation utilities for AlloyShare.

Provides consistent ID generation for all persisted entity types:
- Models: model_xxx
- Links: link_xxx
"""

from uuid import uuid4


def generate_model_id() -> str:
    """
    Generate unique Model ID.

    Returns:
        ID in format "model_xxx" where xxx is 12 hex characters
    """
    return f"model_{uuid4().hex[:12]}"


def generate_link_id() -> str:
    """
    Generate unique Link ID.

    Returns:
        ID in format "link_xxx" where xxx is 12 hex characters
    """
    return f"link_{uuid4().hex[:12]}"
