"""
Key/prefix store adapter.

Readings, alerts and profiles are stored as JSON values under opaque string
keys. Keys embed the entity kind, patient id and creation time, so a prefix
scan partitions the data:

    vitals:<patientId>:          all readings for one patient
    alert:<patientId>:           all alerts for one patient
    alert:                       every alert
    profile:                     every profile

KeyValueStore is the contract the repositories depend on; SQLiteKeyValueStore
is the production implementation (WAL mode + busy_timeout, one connection per
operation, single-key writes are atomic, nothing spans keys).

IMPORTANT: Store instantiation should be done through the DI layer.
Use core.dependencies.get_store() instead of instantiating directly.
"""
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable, List, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import StorageError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class KeyNotFoundError(KeyError):
    """Raised by KeyValueStore.get when no value is stored under the key."""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key


class KeyValueStore(Protocol):
    """
    Contract for the key/prefix store.

    - put(key, value): upsert; an existing value is fully replaced
    - get(key): exact lookup; raises KeyNotFoundError when absent, so a
      stored falsy value (0, "", None) is distinguishable from absence
    - get_by_prefix(prefix): all values whose key starts with prefix, in
      no particular order; reflects every put completed before the call
    - ping(): cheap liveness check used by the readiness probe
    """

    def put(self, key: str, value: Any) -> None: ...

    def get(self, key: str) -> Any: ...

    def get_by_prefix(self, prefix: str) -> List[Any]: ...

    def ping(self) -> None: ...


class SQLiteKeyValueStore:
    """
    SQLite-backed key/prefix store.

    Features:
    - WAL mode for concurrent readers alongside a writer
    - Busy timeout to wait out lock contention instead of failing
    - Values stored as JSON text

    Usage:
        # Via dependency injection (recommended):
        from core.dependencies import get_store
        store = get_store()

        # Direct instantiation (for testing):
        store = SQLiteKeyValueStore(db_path="/tmp/test.db")
    """

    def __init__(self, db_path: Optional[str] = None, busy_timeout: Optional[int] = None):
        """
        Initialize the store and create its table if needed.

        Args:
            db_path: Path to SQLite database file. Defaults to config DATABASE_PATH.
            busy_timeout: SQLite busy timeout in milliseconds. Defaults to config value.
        """
        if db_path is None or busy_timeout is None:
            from core.config import DATABASE_PATH, DATABASE_BUSY_TIMEOUT
            db_path = db_path or DATABASE_PATH
            busy_timeout = busy_timeout if busy_timeout is not None else DATABASE_BUSY_TIMEOUT

        self.db_path = db_path
        self.busy_timeout = busy_timeout

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute(f"PRAGMA busy_timeout = {int(self.busy_timeout)}")
        return conn

    def _init_db(self) -> None:
        try:
            conn = self._connect()
            try:
                # WAL persists in the database file, so this only matters once
                mode = conn.execute("PRAGMA journal_mode = WAL").fetchone()
                if not mode or mode[0].lower() != "wal":
                    logger.warning(f"Failed to enable WAL mode, current mode: {mode}")
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Failed to initialise key/value store: {e}", exc_info=True)
            raise StorageError(operation="init") from e

        logger.info(
            f"Key/value store initialized: {self.db_path} "
            f"(busy_timeout={self.busy_timeout}ms)"
        )

    def put(self, key: str, value: Any) -> None:
        payload = json.dumps(value, ensure_ascii=False)
        try:
            conn = self._connect()
            try:
                conn.execute(
                    "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, payload),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Store put failed for {key}: {e}", exc_info=True)
            raise StorageError(operation="put", key=key) from e

    def get(self, key: str) -> Any:
        try:
            conn = self._connect()
            try:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Store get failed for {key}: {e}", exc_info=True)
            raise StorageError(operation="get", key=key) from e

        if row is None:
            raise KeyNotFoundError(key)
        return json.loads(row[0])

    def get_by_prefix(self, prefix: str) -> List[Any]:
        # substr comparison instead of LIKE: '_' and '%' in keys are literal
        try:
            conn = self._connect()
            try:
                rows = conn.execute(
                    "SELECT value FROM kv_store WHERE substr(key, 1, ?) = ?",
                    (len(prefix), prefix),
                ).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.error(f"Store prefix scan failed for {prefix}: {e}", exc_info=True)
            raise StorageError(operation="get_by_prefix", prefix=prefix) from e

        return [json.loads(row[0]) for row in rows]

    def ping(self) -> None:
        try:
            conn = self._connect()
            try:
                conn.execute("SELECT 1 FROM kv_store LIMIT 1").fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageError(operation="ping") from e


def load_entities(values: Iterable[Any], model: Type[ModelT], kind: str) -> List[ModelT]:
    """
    Validate raw stored values into models.

    Values that fail validation are logged and skipped, so one malformed
    record cannot fail a whole listing.
    """
    entities: List[ModelT] = []
    for value in values:
        try:
            entities.append(model.model_validate(value))
        except PydanticValidationError as e:
            key = value.get("id") if isinstance(value, dict) else None
            logger.warning(
                f"Skipping malformed {kind} record",
                extra={"key": key, "errors": e.error_count()}
            )
    return entities
