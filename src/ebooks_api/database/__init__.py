"""
Ebooks API Database Layer

Metadata records for uploaded e-books and the view log, behind the
`EbookStore` interface with a SQLite implementation.
"""

from .schemas import EbookRecord, EbookStatus, ViewLogEntry
from .store import EbookStore
from .local import SQLiteEbookStore, init_db

__all__ = [
    'EbookRecord', 'EbookStatus', 'ViewLogEntry',
    'EbookStore',
    'SQLiteEbookStore', 'init_db',
]
