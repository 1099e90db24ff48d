"""
SQLite model store implementation.

Clean, efficient implementation using aiosqlite.
"""

import asyncio
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from alloyshare.core.model_store.base import ModelStore
from alloyshare.models.model import Link, Model
from alloyshare.utils.exceptions import NotFoundError, StoreError, ValidationError
from alloyshare.utils.logger import get_logger

logger = get_logger(__name__)

# Columns a `$set` update may touch; id and created_at are immutable.
_UPDATABLE_FIELDS = {"source_text", "derivation_of", "original"}


class SQLiteModelStore(ModelStore):
    """
    SQLite-based store for models and links.

    Features:
    - Fast local storage
    - Foreign key from links to models
    - Transaction support: writes inside `transaction()` commit together,
      and one task's transaction never interleaves with another task's writes
    """

    def __init__(self, db_path: str = "data/alloyshare.db"):
        """
        Initialize SQLite model store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.connection: aiosqlite.Connection | None = None
        self._write_lock = asyncio.Lock()
        self._owner: asyncio.Task | None = None

        # Ensure directory exists
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    async def connect(self) -> None:
        """Establish connection to SQLite."""
        if self.connection is None:
            self.connection = await aiosqlite.connect(self.db_path)
            # Enable foreign keys
            await self.connection.execute("PRAGMA foreign_keys = ON")
            await self.connection.execute("PRAGMA journal_mode = WAL")
            await self.connection.commit()

    async def initialize(self) -> None:
        """Initialize database schema."""
        await self.connect()

        await self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS models (
                id TEXT PRIMARY KEY,
                source_text TEXT NOT NULL,
                created_at TEXT NOT NULL,
                derivation_of TEXT,
                original TEXT
            )
        """
        )

        await self.connection.execute(
            """
            CREATE TABLE IF NOT EXISTS links (
                id TEXT PRIMARY KEY,
                model_id TEXT NOT NULL,
                is_private INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                FOREIGN KEY (model_id) REFERENCES models(id) ON DELETE CASCADE
            )
        """
        )

        await self.connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_models_derivation ON models(derivation_of)"
        )
        await self.connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_models_original ON models(original)"
        )
        await self.connection.execute(
            "CREATE INDEX IF NOT EXISTS idx_links_model ON links(model_id)"
        )

        await self.connection.commit()

    # ═══════════════════════════════════════════════════════════
    # MODEL OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def insert_model(self, model: Model) -> str:
        """Insert a new model."""
        try:
            async with self.transaction():
                await self.connection.execute(
                    """
                    INSERT INTO models (id, source_text, created_at, derivation_of, original)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        model.id,
                        model.source_text,
                        model.created_at.isoformat(),
                        model.derivation_of,
                        model.original,
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise StoreError(f"Model {model.id} already exists", {"model_id": model.id}) from e

        return model.id

    async def get_model(self, model_id: str) -> Model | None:
        """Retrieve a model by ID."""
        await self.connect()

        cursor = await self.connection.execute(
            "SELECT id, source_text, created_at, derivation_of, original FROM models WHERE id = ?",
            (model_id,),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return self._row_to_model(row)

    async def update_model(self, model_id: str, fields: dict[str, Any]) -> None:
        """Set fields of an existing model."""
        if not fields:
            return

        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Cannot update model fields: {sorted(unknown)}", {"model_id": model_id}
            )

        assignments = ", ".join(f"{name} = ?" for name in fields)
        params = [*fields.values(), model_id]

        async with self.transaction():
            cursor = await self.connection.execute(
                f"UPDATE models SET {assignments} WHERE id = ?", params
            )
            if cursor.rowcount == 0:
                raise NotFoundError(f"Model not found: {model_id}", {"model_id": model_id})

    async def count_models(self) -> int:
        """Count stored models."""
        await self.connect()

        cursor = await self.connection.execute("SELECT COUNT(*) FROM models")
        row = await cursor.fetchone()

        return row[0] if row else 0

    # ═══════════════════════════════════════════════════════════
    # LINK OPERATIONS
    # ═══════════════════════════════════════════════════════════

    async def insert_link(self, link: Link) -> str:
        """Insert a new link."""
        try:
            async with self.transaction():
                await self.connection.execute(
                    """
                    INSERT INTO links (id, model_id, is_private, created_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (link.id, link.model_id, int(link.is_private), link.created_at.isoformat()),
                )
        except sqlite3.IntegrityError as e:
            raise StoreError(
                f"Cannot insert link {link.id}: {e}",
                {"link_id": link.id, "model_id": link.model_id},
            ) from e

        return link.id

    async def get_link(self, link_id: str) -> Link | None:
        """Retrieve a link by ID."""
        await self.connect()

        cursor = await self.connection.execute(
            "SELECT id, model_id, is_private, created_at FROM links WHERE id = ?", (link_id,)
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return self._row_to_link(row)

    async def get_links_for_model(self, model_id: str) -> list[Link]:
        """List the links pointing at a model, oldest first."""
        await self.connect()

        cursor = await self.connection.execute(
            """
            SELECT id, model_id, is_private, created_at FROM links
            WHERE model_id = ?
            ORDER BY created_at, is_private
            """,
            (model_id,),
        )
        rows = await cursor.fetchall()

        return [self._row_to_link(row) for row in rows]

    async def count_links(self, is_private: bool | None = None) -> int:
        """Count links."""
        await self.connect()

        query = "SELECT COUNT(*) FROM links"
        params = []

        if is_private is not None:
            query += " WHERE is_private = ?"
            params.append(int(is_private))

        cursor = await self.connection.execute(query, params)
        row = await cursor.fetchone()

        return row[0] if row else 0

    # ═══════════════════════════════════════════════════════════
    # UTILITY METHODS
    # ═══════════════════════════════════════════════════════════

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """
        Commit every write in the block together, or roll all of them back.

        Nested scopes opened by the owning task join the outer one; other
        tasks wait for the outer scope to finish.
        """
        await self.connect()

        task = asyncio.current_task()
        if self._owner is not None and self._owner is task:
            yield
            return

        async with self._write_lock:
            self._owner = task
            try:
                yield
            except BaseException:
                await self.connection.rollback()
                logger.debug("Transaction rolled back")
                raise
            else:
                await self.connection.commit()
            finally:
                self._owner = None

    async def close(self) -> None:
        """Close the connection."""
        if self.connection is not None:
            await self.connection.close()
            self.connection = None

    # ═══════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════

    def _row_to_model(self, row: tuple) -> Model:
        """Convert database row to Model object."""
        return Model(
            id=row[0],
            source_text=row[1],
            created_at=datetime.fromisoformat(row[2]),
            derivation_of=row[3],
            original=row[4],
        )

    def _row_to_link(self, row: tuple) -> Link:
        """Convert database row to Link object."""
        return Link(
            id=row[0],
            model_id=row[1],
            is_private=bool(row[2]),
            created_at=datetime.fromisoformat(row[3]),
        )
