from library_service.clients.book_catalog import (
    BaseBookCatalog,
    BookInfo,
    BookLookup,
    HttpBookCatalog,
    LookupStatus,
    book_catalog_client,
    get_book_catalog,
)

__all__ = [
    "BaseBookCatalog",
    "BookInfo",
    "BookLookup",
    "HttpBookCatalog",
    "LookupStatus",
    "book_catalog_client",
    "get_book_catalog",
]
