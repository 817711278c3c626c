"""
repository — storage boundary of the engine.

Public API:
  LawRepository          protocol implemented by the adapters below
  LawFilter              list_laws() filter
  InMemoryRepository     dict-backed, snapshot transactions
  PostgresRepository     psycopg2 connection (import repository.postgres)
  RecordNotFound         missing law/segment id
"""

from .base   import LawRepository, LawFilter, RepositoryError, RecordNotFound, LAW_UPDATABLE_FIELDS
from .memory import InMemoryRepository

__all__ = [
    "LawRepository",
    "LawFilter",
    "RepositoryError",
    "RecordNotFound",
    "LAW_UPDATABLE_FIELDS",
    "InMemoryRepository",
]
