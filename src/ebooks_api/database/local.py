import logging
import sqlite3
from datetime import datetime
from typing import List

from .schemas import EbookRecord, EbookStatus, ViewLogEntry
from .store import EbookStore

logger = logging.getLogger(__name__)


def _to_db_timestamp(value: datetime) -> str:
    # fixed width so that ORDER BY on the text column is chronological
    return value.isoformat(timespec="microseconds")


def init_db(db_path: str = "ebooks.db") -> None:
    """Initialize database with all required tables."""
    conn = sqlite3.connect(db_path)
    try:
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS ebooks (
                id VARCHAR(36) PRIMARY KEY,
                user_id VARCHAR(255) NOT NULL,
                object_path VARCHAR(600) UNIQUE NOT NULL,
                file_name VARCHAR(255) NOT NULL,
                size_bytes INTEGER NOT NULL,
                mime_type VARCHAR(100) NOT NULL,
                status VARCHAR(20) NOT NULL DEFAULT 'pending',  -- pending, ready
                created_at TIMESTAMP NOT NULL,
                updated_at TIMESTAMP NOT NULL
            )
        ''')
        cursor.execute('''
            CREATE INDEX IF NOT EXISTS idx_ebooks_user_status
            ON ebooks(user_id, status, created_at)
        ''')

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS ebook_view_logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id VARCHAR(255) NOT NULL,
                object_path VARCHAR(600) NOT NULL,
                viewed_at TIMESTAMP NOT NULL,
                expires_at TIMESTAMP NOT NULL
            )
        ''')

        conn.commit()
        logger.info(f"Database initialized at {db_path}")
    finally:
        conn.close()


class SQLiteEbookStore(EbookStore):
    """EbookStore backed by a local SQLite file."""

    def __init__(self, db_path: str = "ebooks.db"):
        self.db_path = db_path

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> EbookRecord:
        return EbookRecord(
            id=row["id"],
            owner_id=row["user_id"],
            object_path=row["object_path"],
            file_name=row["file_name"],
            size_bytes=row["size_bytes"],
            mime_type=row["mime_type"],
            status=EbookStatus(row["status"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def create_record(self, record: EbookRecord) -> None:
        conn = self._get_connection()
        try:
            conn.execute('''
                INSERT INTO ebooks
                (id, user_id, object_path, file_name, size_bytes, mime_type, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ''', (
                record.id,
                record.owner_id,
                record.object_path,
                record.file_name,
                record.size_bytes,
                record.mime_type,
                record.status.value,
                _to_db_timestamp(record.created_at),
                _to_db_timestamp(record.updated_at),
            ))
            conn.commit()
        finally:
            conn.close()

    def mark_ready(self, object_path: str, owner_id: str, size_bytes: int, updated_at: datetime) -> bool:
        conn = self._get_connection()
        try:
            cursor = conn.execute('''
                UPDATE ebooks
                SET status = ?,
                    size_bytes = ?,
                    updated_at = ?
                WHERE object_path = ? AND user_id = ?
            ''', (EbookStatus.READY.value, size_bytes, _to_db_timestamp(updated_at), object_path, owner_id))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def list_ready(self, owner_id: str) -> List[EbookRecord]:
        conn = self._get_connection()
        try:
            rows = conn.execute('''
                SELECT * FROM ebooks
                WHERE user_id = ? AND status = ?
                ORDER BY created_at DESC
            ''', (owner_id, EbookStatus.READY.value)).fetchall()
            return [self._row_to_record(row) for row in rows]
        finally:
            conn.close()

    def add_view_log(self, entry: ViewLogEntry) -> None:
        conn = self._get_connection()
        try:
            conn.execute('''
                INSERT INTO ebook_view_logs (user_id, object_path, viewed_at, expires_at)
                VALUES (?, ?, ?, ?)
            ''', (
                entry.user_id,
                entry.object_path,
                _to_db_timestamp(entry.viewed_at),
                _to_db_timestamp(entry.expires_at),
            ))
            conn.commit()
        finally:
            conn.close()
