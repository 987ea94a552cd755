"""Public interface definitions for the external collaborators.

The document store and the markup fetcher are accessed only through the
abstract base classes in this package; concrete adapters live in
``headlines/providers/`` and are injected in ``headlines/main.py``.

    Interface        ->  Concrete implementations
    ──────────────────────────────────────────────────────────
    IDocumentStore   ->  SQLiteDocumentStore, MongoDocumentStore
    IMarkupFetcher   ->  HttpMarkupFetcher
"""

from headlines.interfaces.document_store import IDocumentStore
from headlines.interfaces.markup_fetcher import IMarkupFetcher

__all__ = ["IDocumentStore", "IMarkupFetcher"]
