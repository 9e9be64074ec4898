# src/storage/sqlite_base.py

"""Shared SQLite connection handling for the catalog and review stores."""

import logging
import sqlite3
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import TypeVar

from src.config.settings import Settings
from src.services.errors import InvalidArgument, StoreUnavailable

logger = logging.getLogger("price_compare.storage")

T = TypeVar("T")


def to_timestamp(value: datetime) -> str:
    """Fixed-width ISO string so lexical order matches time order."""
    return value.isoformat(timespec="microseconds")


def from_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


def _casefold(value: str | None) -> str | None:
    """SQL ``casefold(x)``: Unicode-aware lowercasing for search."""
    return value.casefold() if value is not None else None


class SQLiteStore:
    """Owns one connection, its schema, and error translation.

    Subclasses set ``SCHEMA``. Lookups may arrive from several worker
    threads at once, so every statement runs under ``_lock``.
    """

    SCHEMA: str = ""

    def __init__(self, db_path: Path | None = None) -> None:
        path = db_path or Settings.DB_PATH
        if str(path) != ":memory:":
            path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(
                str(path), check_same_thread=False,
            )
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA foreign_keys=ON")
            self._conn.create_function(
                "casefold", 1, _casefold, deterministic=True,
            )
            self._conn.executescript(self.SCHEMA)
        except sqlite3.Error as exc:
            raise StoreUnavailable(
                f"cannot open database at {path}: {exc}"
            ) from exc
        logger.debug(
            "%s opened at %s", type(self).__name__, path,
        )

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            self._conn.close()

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor under the lock, committing on success.

        Integrity violations become ``InvalidArgument``; any other
        SQLite failure becomes ``StoreUnavailable``.
        """
        with self._lock:
            try:
                cur = self._conn.cursor()
                yield cur
                self._conn.commit()
            except sqlite3.IntegrityError as exc:
                self._conn.rollback()
                raise InvalidArgument(str(exc)) from exc
            except sqlite3.Error as exc:
                logger.error(
                    "%s query failed: %s",
                    type(self).__name__,
                    exc,
                    exc_info=True,
                )
                raise StoreUnavailable(str(exc)) from exc

    def _query(
        self,
        sql: str,
        params: tuple[object, ...],
        convert: Callable[[tuple[object, ...]], T],
    ) -> list[T]:
        with self._cursor() as cur:
            rows = cur.execute(sql, params).fetchall()
        return [convert(row) for row in rows]
