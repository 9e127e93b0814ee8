from mtgfail.db.database import async_session_factory, get_document_store, init_db
from mtgfail.db.document_store import (
    DocumentRef,
    DocumentSnapshot,
    DocumentStore,
    SqlDocumentStore,
)

__all__ = [
    "DocumentRef",
    "DocumentSnapshot",
    "DocumentStore",
    "SqlDocumentStore",
    "async_session_factory",
    "get_document_store",
    "init_db",
]
