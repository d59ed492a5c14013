"""
Manages the SQLite database that keeps downloaded films, payload included, for
offline playback.
"""

import asyncio
import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Any

from film_cli.exceptions import ConstraintError, StorageError
from film_cli.models.film import FilmSummary, StoredFilm

log = logging.getLogger(__name__)

_SUMMARY_COLUMNS = "id, original_id, title, url, size, download_date"


class FilmStore:
    """
    A single-table SQLite store for downloaded films.

    Each operation opens its own connection inside a worker thread, guarded by a
    semaphore, so callers on the event loop never block on disk I/O. The table
    carries a non-unique index on ``title`` and a unique index on ``url``; the
    latter is what rejects a second copy of the same film.
    """

    def __init__(self, db_path: Path, pool_size: int = 5):
        self.db_path = Path(db_path)
        self._connection_semaphore = asyncio.Semaphore(pool_size)
        self._opened = False

    def _get_connection(self) -> sqlite3.Connection:
        """Gets a new database connection with tuned PRAGMA settings."""
        try:
            conn = sqlite3.connect(self.db_path, timeout=30, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            conn.execute("PRAGMA temp_store=MEMORY;")
            return conn
        except sqlite3.Error as e:
            log.error(f"Failed to connect to film database: {e}")
            raise StorageError(
                f"Cannot open film database '{self.db_path}': {e}"
            ) from e

    def _initialize_db(self) -> None:
        """Creates the table and its indexes if they don't exist."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with closing(self._get_connection()) as conn, conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS films (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        original_id INTEGER,
                        title TEXT NOT NULL,
                        url TEXT NOT NULL,
                        blob BLOB NOT NULL,
                        size TEXT,
                        download_date TEXT
                    );
                    """
                )
                conn.execute("CREATE INDEX IF NOT EXISTS idx_title ON films(title);")
                conn.execute("CREATE UNIQUE INDEX IF NOT EXISTS idx_url ON films(url);")
        except sqlite3.Error as e:
            log.error(f"Failed to initialize film database at '{self.db_path}': {e}")
            raise StorageError(f"Failed to initialize film database: {e}") from e

    async def _run_in_executor(self, func, *args):
        """Runs a synchronous database function within the connection semaphore."""
        async with self._connection_semaphore:
            return await asyncio.to_thread(func, *args)

    async def open(self) -> "FilmStore":
        """Opens the store, creating the schema on first use. Safe to call twice."""
        if not self._opened:
            await self._run_in_executor(self._initialize_db)
            self._opened = True
            log.debug(f"Film database ready at '{self.db_path}'.")
        return self

    def _put_sync(self, film: StoredFilm) -> int:
        try:
            with closing(self._get_connection()) as conn, conn:
                cursor = conn.execute(
                    "INSERT INTO films "
                    "(id, original_id, title, url, blob, size, download_date) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        film.id,
                        film.original_id,
                        film.title,
                        film.url,
                        sqlite3.Binary(film.blob),
                        film.size,
                        film.download_date,
                    ),
                )
                return cursor.lastrowid
        except sqlite3.IntegrityError as e:
            raise ConstraintError(
                f"A film from '{film.url}' is already saved ({e})."
            ) from e
        except sqlite3.Error as e:
            raise StorageError(f"Failed to save film '{film.title}': {e}") from e

    async def put(self, film: StoredFilm) -> int:
        """
        Saves a film and returns its stored id.

        Raises:
            ConstraintError: If a film with the same URL (or id) is already stored.
            StorageError: For any other database failure.
        """
        await self.open()
        film_id = await self._run_in_executor(self._put_sync, film)
        log.debug(f"Saved '{film.title}' as film #{film_id}.")
        return film_id

    def _query_sync(self, query: str, params: tuple = ()) -> list[sqlite3.Row]:
        try:
            with closing(self._get_connection()) as conn:
                return conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Film database query failed: {e}") from e

    @staticmethod
    def _row_to_film(row: sqlite3.Row) -> StoredFilm:
        data = dict(row)
        data["blob"] = bytes(data["blob"])
        return StoredFilm(**data)

    async def get_all(self) -> list[StoredFilm]:
        """Returns every stored film, payload included. Order is unspecified."""
        await self.open()
        rows = await self._run_in_executor(self._query_sync, "SELECT * FROM films")
        return [self._row_to_film(row) for row in rows]

    async def list_summaries(self) -> list[FilmSummary]:
        """Returns every stored film without loading the payloads."""
        await self.open()
        rows = await self._run_in_executor(
            self._query_sync,
            f"SELECT {_SUMMARY_COLUMNS} FROM films ORDER BY id",  # noqa: S608
        )
        return [FilmSummary(**dict(row)) for row in rows]

    async def get_by_id(self, film_id: int) -> StoredFilm | None:
        """Returns the film with the given id, or None when there is none."""
        await self.open()
        rows = await self._run_in_executor(
            self._query_sync, "SELECT * FROM films WHERE id = ?", (film_id,)
        )
        return self._row_to_film(rows[0]) if rows else None

    def _delete_sync(self, film_id: int) -> int:
        try:
            with closing(self._get_connection()) as conn, conn:
                cursor = conn.execute("DELETE FROM films WHERE id = ?", (film_id,))
                return cursor.rowcount
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete film #{film_id}: {e}") from e

    async def delete(self, film_id: int) -> None:
        """Removes a film if present. Deleting an unknown id is a no-op."""
        await self.open()
        removed = await self._run_in_executor(self._delete_sync, film_id)
        if removed:
            log.debug(f"Deleted film #{film_id}.")
        else:
            log.debug(f"Film #{film_id} was not in the database; nothing deleted.")

    async def count(self) -> int:
        await self.open()
        rows = await self._run_in_executor(
            self._query_sync, "SELECT COUNT(*) FROM films"
        )
        return rows[0][0]

    def _get_stats_sync(self) -> dict[str, Any]:
        """Synchronous implementation for getting store statistics."""
        try:
            with closing(self._get_connection()) as conn:
                cur = conn.cursor()
                cur.execute(
                    "SELECT COUNT(*), COALESCE(SUM(LENGTH(blob)), 0) FROM films"
                )
                total_films, total_bytes = cur.fetchone()
                cur.execute(
                    """
                    SELECT title, LENGTH(blob) AS bytes
                    FROM films
                    ORDER BY bytes DESC
                    LIMIT 10
                    """
                )
                largest = [(row["title"], row["bytes"]) for row in cur.fetchall()]
                return {
                    "total_films": total_films,
                    "total_bytes": total_bytes,
                    "largest_films": largest,
                }
        except sqlite3.Error as e:
            raise StorageError(f"Failed to get film database stats: {e}") from e

    async def get_stats(self) -> dict[str, Any]:
        """Retrieves statistics from the film database."""
        await self.open()
        return await self._run_in_executor(self._get_stats_sync)

    def _vacuum_sync(self) -> None:
        """Synchronous implementation for optimizing the database."""
        try:
            with closing(self._get_connection()) as conn:
                conn.execute("VACUUM;")
                conn.execute("ANALYZE;")
            log.info("Film database optimized successfully.")
        except sqlite3.Error as e:
            raise StorageError(f"Database vacuum failed: {e}") from e

    async def vacuum(self) -> None:
        """Reclaims the space left behind by deleted films."""
        await self.open()
        await self._run_in_executor(self._vacuum_sync)
