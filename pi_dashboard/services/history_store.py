"""Append-only snapshot history backed by SQLite.

Every operation opens its own connection and closes it before returning.
WAL journaling lets the sampler append while requests read; SQLite
serialises the writers.
"""

import logging
import sqlite3
from contextlib import closing, contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator, List, Optional, Union

from pi_dashboard.errors import StoreError
from pi_dashboard.models.history import NewSnapshot, Snapshot

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
DEFAULT_LIMIT = 100
# Largest value SQLite accepts for an INTEGER parameter.
MAX_LIMIT = 2**63 - 1

# Same text form as the column default below, so string order is time order.
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"

_CREATE_TABLE = """\
CREATE TABLE IF NOT EXISTS snapshots (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    cpu_usage   REAL    NOT NULL,
    mem_total   INTEGER NOT NULL,
    mem_used    INTEGER NOT NULL,
    disk_total  INTEGER NOT NULL,
    disk_used   INTEGER NOT NULL,
    disk_free   INTEGER NOT NULL,
    timestamp   TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
)
"""

_CREATE_INDEX = "CREATE INDEX IF NOT EXISTS idx_snapshots_timestamp ON snapshots(timestamp)"

_COLUMNS = "id, cpu_usage, mem_total, mem_used, disk_total, disk_used, disk_free, timestamp"


def format_timestamp(value: datetime, round_up: bool = False) -> str:
    """Render a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Naive datetimes are taken to be UTC already. Sub-millisecond digits are
    dropped, or carried to the next millisecond when round_up is set.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    remainder = value.microsecond % 1000
    if round_up and remainder:
        value += timedelta(microseconds=1000 - remainder)
    return value.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def parse_timestamp(text: str) -> datetime:
    return datetime.strptime(text, _TIMESTAMP_FORMAT + "Z").replace(tzinfo=timezone.utc)


class HistoryStore:
    """Store and query metric snapshots in a single SQLite file."""

    def __init__(self, db_path: Union[str, Path]) -> None:
        self.db_path = Path(db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            con = sqlite3.connect(str(self.db_path), timeout=10)
        except sqlite3.Error as exc:
            raise StoreError(f"cannot open history database {self.db_path}: {exc}") from exc
        with closing(con):
            con.row_factory = sqlite3.Row
            yield con

    @staticmethod
    def _row_to_snapshot(row: sqlite3.Row) -> Snapshot:
        data = dict(row)
        data["timestamp"] = parse_timestamp(data["timestamp"])
        return Snapshot(**data)

    def ensure_schema(self) -> bool:
        """Create the snapshot table if it is missing.

        Safe to call on every startup. Failures are logged and reported
        through the return value instead of being raised, so live metrics
        keep working without a history database.
        """
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._connect() as con:
                con.execute("PRAGMA journal_mode=WAL")
                with con:
                    con.execute(_CREATE_TABLE)
                    con.execute(_CREATE_INDEX)
        except (OSError, sqlite3.Error, StoreError) as exc:
            logger.error(
                "history schema creation failed for %s: %s",
                self.db_path,
                exc,
                extra={"event": "schema_failed"},
            )
            return False

        logger.info("history schema ready at %s", self.db_path, extra={"event": "schema_ready"})
        return True

    def append(self, snapshot: NewSnapshot) -> Snapshot:
        """Insert one snapshot and return it as stored."""
        columns = ["cpu_usage", "mem_total", "mem_used", "disk_total", "disk_used", "disk_free"]
        values = [getattr(snapshot, name) for name in columns]
        if snapshot.timestamp is not None:
            columns.append("timestamp")
            values.append(format_timestamp(snapshot.timestamp))

        placeholders = ", ".join("?" for _ in columns)
        try:
            with self._connect() as con:
                with con:
                    cur = con.execute(
                        f"INSERT INTO snapshots ({', '.join(columns)}) VALUES ({placeholders})",
                        values,
                    )
                    row = con.execute(
                        f"SELECT {_COLUMNS} FROM snapshots WHERE id = ?",
                        (cur.lastrowid,),
                    ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"cannot append snapshot: {exc}") from exc

        return self._row_to_snapshot(row)

    def query(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = DEFAULT_LIMIT,
    ) -> List[Snapshot]:
        """Return snapshots with start <= timestamp <= end, newest first.

        ``start`` defaults to the epoch. ``end`` defaults to the current
        time, resolved when the query runs.
        """
        if not 1 <= limit <= MAX_LIMIT:
            raise ValueError(f"limit must be between 1 and {MAX_LIMIT}, got {limit}")
        try:
            lower = format_timestamp(start or EPOCH, round_up=True)
        except OverflowError:
            # start is within the last millisecond datetime can represent
            return []
        upper = format_timestamp(end or datetime.now(timezone.utc))

        try:
            with self._connect() as con:
                rows = con.execute(
                    f"SELECT {_COLUMNS} FROM snapshots "
                    "WHERE timestamp >= ? AND timestamp <= ? "
                    "ORDER BY timestamp DESC, id DESC LIMIT ?",
                    (lower, upper, limit),
                ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"cannot query history: {exc}") from exc

        return [self._row_to_snapshot(row) for row in rows]
