"""
Base interface for model/link storage.

A small document store: insert, find by id, `$set`-style update, and a
transaction scope so that a share (one model, one or two links, one update)
is written all-or-nothing.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any

from alloyshare.models.model import Link, Model


class ModelStore(ABC):
    """Abstract base class for model store implementations."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the store (create tables/schema)."""
        pass

    # ═══════════════════════════════════════════════════════════
    # MODEL OPERATIONS
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def insert_model(self, model: Model) -> str:
        """
        Insert a new model.

        Args:
            model: Model to store

        Returns:
            Model ID

        Raises:
            StoreError: If a model with the same ID exists
        """
        pass

    @abstractmethod
    async def get_model(self, model_id: str) -> Model | None:
        """
        Retrieve a model by ID.

        Args:
            model_id: Model identifier

        Returns:
            Model or None if not found
        """
        pass

    @abstractmethod
    async def update_model(self, model_id: str, fields: dict[str, Any]) -> None:
        """
        Set fields of an existing model.

        Args:
            model_id: Model identifier
            fields: Field name -> new value

        Raises:
            ValidationError: If a field is unknown or immutable
            NotFoundError: If the model doesn't exist
        """
        pass

    @abstractmethod
    async def count_models(self) -> int:
        """Count stored models."""
        pass

    # ═══════════════════════════════════════════════════════════
    # LINK OPERATIONS
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    async def insert_link(self, link: Link) -> str:
        """
        Insert a new link.

        Args:
            link: Link to store

        Returns:
            Link ID
        """
        pass

    @abstractmethod
    async def get_link(self, link_id: str) -> Link | None:
        """
        Retrieve a link by ID.

        Args:
            link_id: Link identifier

        Returns:
            Link or None if not found
        """
        pass

    @abstractmethod
    async def get_links_for_model(self, model_id: str) -> list[Link]:
        """
        List the links pointing at a model, oldest first.

        Args:
            model_id: Model identifier

        Returns:
            Links of the model
        """
        pass

    @abstractmethod
    async def count_links(self, is_private: bool | None = None) -> int:
        """
        Count links.

        Args:
            is_private: Optional filter by privacy

        Returns:
            Count of links
        """
        pass

    # ═══════════════════════════════════════════════════════════
    # UTILITY METHODS
    # ═══════════════════════════════════════════════════════════

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """
        Scope in which all writes commit together or not at all.

        Usage:
            async with store.transaction():
                await store.insert_model(...)
                await store.insert_link(...)
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the connection to the store."""
        pass
