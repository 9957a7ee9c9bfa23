"""
Persistent translation set caches with thread-safe access.

Both backends keep exactly one record per language code in the layout
``{"id": int, "language": str, "translations": {key: value}}``.
"""
import json
import os
import sqlite3
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any, List
import logging

from ..core.exceptions import CacheReadError, CacheWriteError
from ..core.interfaces import ITranslationCache
from ..core.models import TranslationSet


logger = logging.getLogger(__name__)


def _decode_record(raw: str, language: str) -> Optional[TranslationSet]:
    """Decode a stored record; undecodable records count as missing."""
    try:
        return TranslationSet.from_dict(json.loads(raw))
    except (ValueError, CacheReadError) as e:
        logger.warning(f"Ignoring unreadable cache record for '{language}': {e}")
        return None


def _encode_record(translation_set: TranslationSet) -> str:
    return json.dumps(translation_set.to_dict(), ensure_ascii=False)


# ===== SQLite Backend =====

class SQLiteTranslationCache(ITranslationCache):
    """Thread-safe SQLite store for translation sets."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self._local = threading.local()
        self._connections: List[sqlite3.Connection] = []
        self._connections_lock = threading.Lock()

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._init_schema(self._get_connection())
        except (OSError, sqlite3.Error) as e:
            raise CacheWriteError(f"Cannot open cache database: {e}", db_path=str(self.db_path))

    def _get_connection(self) -> sqlite3.Connection:
        """Get thread-local connection."""
        if getattr(self._local, 'conn', None) is None:
            conn = sqlite3.connect(
                self.db_path,
                isolation_level=None,
                timeout=30.0,
                check_same_thread=False
            )
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
            conn.row_factory = sqlite3.Row
            self._local.conn = conn
            with self._connections_lock:
                self._connections.append(conn)

        return self._local.conn

    @contextmanager
    def _transaction(self):
        """Explicit transaction context."""
        conn = self._get_connection()
        try:
            conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.execute("COMMIT")
        except Exception:
            conn.execute("ROLLBACK")
            raise

    def _init_schema(self, conn: sqlite3.Connection):
        """Initialize database schema."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS translation_sets (
                language TEXT PRIMARY KEY,
                record TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        logger.info(f"Cache schema initialized: {self.db_path}")

    def get(self, language: str) -> Optional[TranslationSet]:
        """Get the stored set for a language."""
        try:
            cur = self._get_connection().execute(
                "SELECT record FROM translation_sets WHERE language = ?", (language,)
            )
            row = cur.fetchone()
        except sqlite3.Error as e:
            logger.error(f"Cache read error: {e}")
            return None

        if row is None:
            return None
        return _decode_record(row['record'], language)

    def put(self, translation_set: TranslationSet) -> None:
        """Store a set, replacing the previous record for its language."""
        try:
            with self._transaction() as conn:
                conn.execute("""
                    INSERT OR REPLACE INTO translation_sets (language, record, updated_at)
                    VALUES (?, ?, ?)
                """, (
                    translation_set.language,
                    _encode_record(translation_set),
                    datetime.now(timezone.utc).isoformat()
                ))
        except sqlite3.Error as e:
            logger.error(f"Cache write error: {e}")
            raise CacheWriteError(f"Cache write error: {e}", language=translation_set.language)

        logger.debug(f"Cache set: {translation_set.language} (id={translation_set.id})")

    def clear(self) -> int:
        """Clear all records."""
        try:
            with self._transaction() as conn:
                cur = conn.execute("DELETE FROM translation_sets")
                count = cur.rowcount
        except sqlite3.Error as e:
            logger.error(f"Clear error: {e}")
            raise CacheWriteError(f"Clear error: {e}")

        logger.info(f"Cleared {count} cached translation sets")
        return count

    def languages(self) -> List[str]:
        """Get the language codes that have a record."""
        cur = self._get_connection().execute(
            "SELECT language FROM translation_sets ORDER BY language"
        )
        return [row['language'] for row in cur.fetchall()]

    def get_stats(self) -> Dict[str, Any]:
        """Get storage statistics."""
        size_bytes = self.db_path.stat().st_size if self.db_path.exists() else 0
        return {
            'backend': 'sqlite',
            'total_entries': len(self.languages()),
            'size_mb': round(size_bytes / (1024 * 1024), 2),
            'db_path': str(self.db_path)
        }

    def close(self):
        """Close all connections opened by this cache."""
        with self._connections_lock:
            for conn in self._connections:
                conn.close()
            self._connections.clear()
        self._local = threading.local()


# ===== JSON Directory Backend =====

class JsonFileTranslationCache(ITranslationCache):
    """One ``<language>.json`` file per language in a directory."""

    SUFFIX = ".json"

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self._lock = threading.Lock()
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheWriteError(f"Invalid disk cache directory: {e}", directory=str(self.directory))

    def _path_for(self, language: str) -> Path:
        if not language or os.sep in language or language.startswith('.'):
            raise ValueError(f"Invalid language code for cache file: {language!r}")
        return self.directory / f"{language}{self.SUFFIX}"

    def get(self, language: str) -> Optional[TranslationSet]:
        """Get the stored set for a language."""
        try:
            path = self._path_for(language)
            raw = path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.error(f"Cache read error: {e}")
            return None

        return _decode_record(raw, language)

    def put(self, translation_set: TranslationSet) -> None:
        """Atomically replace the file for the set's language."""
        try:
            path = self._path_for(translation_set.language)
            with self._lock:
                fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
                try:
                    with os.fdopen(fd, 'w', encoding='utf-8') as f:
                        f.write(_encode_record(translation_set))
                    os.replace(tmp_name, path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
        except (OSError, ValueError) as e:
            logger.error(f"Cache write error: {e}")
            raise CacheWriteError(f"Cache write error: {e}", language=translation_set.language)

        logger.debug(f"Cache set: {path}")

    def clear(self) -> int:
        """Delete every record file."""
        count = 0
        with self._lock:
            for path in self.directory.glob(f"*{self.SUFFIX}"):
                try:
                    path.unlink()
                    count += 1
                except OSError as e:
                    raise CacheWriteError(f"Clear error: {e}", path=str(path))

        logger.info(f"Cleared {count} cached translation sets")
        return count

    def languages(self) -> List[str]:
        """Get the language codes that have a record."""
        return sorted(path.stem for path in self.directory.glob(f"*{self.SUFFIX}"))

    def get_stats(self) -> Dict[str, Any]:
        """Get storage statistics."""
        return {
            'backend': 'json',
            'total_entries': len(self.languages()),
            'directory': str(self.directory)
        }
