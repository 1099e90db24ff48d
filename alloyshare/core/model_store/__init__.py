"""
Model store implementations for AlloyShare.

Provides abstract base and concrete implementations for model/link storage.

Available backends:
- SQLiteModelStore: Local file-backed store
"""

from alloyshare.core.model_store.base import ModelStore
from alloyshare.core.model_store.factory import ModelStoreFactory
from alloyshare.core.model_store.sqlite_store import SQLiteModelStore

__all__ = [
    "ModelStore",
    "SQLiteModelStore",
    "ModelStoreFactory",
]
