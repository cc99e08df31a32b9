"""
Store Module
============

Tabular store backings and schema snapshots.
"""

from query_wise.store.base import SchemaSnapshot, TabularStore
from query_wise.store.memory import InMemoryStore
from query_wise.store.sample import sample_store
from query_wise.store.sql import SqlStore

__all__ = [
    "TabularStore",
    "SchemaSnapshot",
    "InMemoryStore",
    "SqlStore",
    "sample_store",
]
