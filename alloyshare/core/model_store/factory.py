"""
Factory for creating model store backends.
"""

from alloyshare.config import StoreConfig
from alloyshare.core.model_store.base import ModelStore
from alloyshare.core.model_store.sqlite_store import SQLiteModelStore
from alloyshare.utils.exceptions import ConfigurationError


class ModelStoreFactory:
    """Factory for creating model store backends from configuration."""

    @staticmethod
    def create(config: StoreConfig) -> ModelStore:
        """
        Create model store from configuration.

        Args:
            config: Store configuration

        Returns:
            Model store instance

        Raises:
            ConfigurationError: If backend is not supported
        """
        if config.backend == "sqlite":
            return SQLiteModelStore(db_path=config.db_path)
        else:
            raise ConfigurationError(f"Unsupported store backend: {config.backend}")
