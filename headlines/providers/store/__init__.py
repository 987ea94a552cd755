"""Document store providers.

Two implementations of IDocumentStore:
    1. SQLiteDocumentStore -- single-file SQLite database via aiosqlite.
       The default; needs no running server.
    2. MongoDocumentStore -- MongoDB collections via pymongo's async
       client, for deployments that already run a Mongo server.
"""

from headlines.providers.store.mongo_document_store import MongoDocumentStore
from headlines.providers.store.sqlite_document_store import SQLiteDocumentStore

__all__ = ["MongoDocumentStore", "SQLiteDocumentStore"]
