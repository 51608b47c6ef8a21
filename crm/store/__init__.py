"""
Record store collaborators - named collections of records behind a get/put/remove_all interface.
"""

from .index import IRecordStore, InMemoryRecordStore
from .sqlite_store import SqliteRecordStore
from .types import Record

__all__ = [
    'IRecordStore',
    'InMemoryRecordStore',
    'SqliteRecordStore',
    'Record'
]
