import typing
import logging
import fastapi
import sqlalchemy.ext.asyncio
import library_service.clients.book_catalog
import library_service.config
import library_service.database
import library_service.middleware.auth
import library_service.middleware.http
import library_service.models.library_entry
import library_service.models.responses
import library_service.services.library_entry_service
import library_service.utils.responses

logger = logging.getLogger(__name__)

router = fastapi.APIRouter(prefix="/library", tags=["Library"])

limiter = library_service.middleware.http.limiter

MAX_BOOK_ID = library_service.services.library_entry_service.MAX_BOOK_ID
MAX_PAGE_VALUE = library_service.services.library_entry_service.MAX_PAGE_VALUE


def _entry_to_dict(entry: library_service.models.library_entry.LibraryEntry) -> typing.Dict[str, typing.Any]:
    return {
        "id": entry.id,
        "user_id": entry.user_id,
        "book_id": entry.book_id,
        "status": entry.reading_status.value,
        "status_label": entry.status
    }


@router.get(
    "",
    response_model=library_service.models.responses.LibraryListResponse,
    summary="List the books in your library",
    description="""
    Returns the authenticated user's library entries ordered by book id.
    The entries are returned as an array in the `data` field of the response.

    **Paging:** `offset` (>= 0, default 0) and `limit` (> 0, default 5, no maximum).

    **Filtering:** `status`, one of `WantToRead`, `CurrentlyReading`, `Read`.

    Requires a valid access token in the `Authorization: Bearer <token>` header.
    """,
    responses={
        200: {"description": "Library retrieved"},
        400: {"description": "Invalid parameters"},
        401: {"description": "Not authenticated"},
        403: {"description": "Access denied"}
    }
)
@limiter.limit(library_service.middleware.http.get_default_limit())
async def get_library(
    request: fastapi.Request,
    offset: int = fastapi.Query(0, le=MAX_PAGE_VALUE),
    limit: int = fastapi.Query(library_service.config.settings.library_default_limit, le=MAX_PAGE_VALUE),
    status: typing.Optional[str] = fastapi.Query(None),
    user_id: int = fastapi.Depends(library_service.middleware.auth.require_user_id),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(library_service.database.get_session)
):
    try:
        entries = await library_service.services.library_entry_service.get_user_library(
            session, user_id, offset, limit, status
        )
        return library_service.utils.responses.success_response(
            [_entry_to_dict(entry) for entry in entries]
        )
    except ValueError as e:
        return library_service.utils.responses.service_error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error in get_library: {e}")
        return library_service.utils.responses.error_response("INTERNAL_ERROR", "An unexpected error occurred", status_code=500)


@router.post(
    "",
    status_code=201,
    response_model=library_service.models.responses.LibraryEntryResponse,
    summary="Add a book to your library",
    description="""
    Adds a book to the authenticated user's library with a reading status.

    The book must exist in the book catalog; it is looked up once before the
    entry is stored. A book can only be in a library once.

    Requires a valid access token in the `Authorization: Bearer <token>` header.
    """,
    responses={
        201: {"description": "Book added to library"},
        400: {"description": "Invalid parameters"},
        401: {"description": "Not authenticated"},
        403: {"description": "Access denied"},
        404: {"description": "Book doesn't exist"},
        409: {"description": "Book is already in the library"},
        503: {"description": "Book catalog is unavailable"}
    }
)
@limiter.limit(library_service.middleware.http.get_default_limit())
async def add_book(
    request: fastapi.Request,
    book_id: int = fastapi.Query(..., alias="bookId", le=MAX_BOOK_ID),
    status: str = fastapi.Query(...),
    user_id: int = fastapi.Depends(library_service.middleware.auth.require_user_id),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(library_service.database.get_session),
    catalog: library_service.clients.book_catalog.BaseBookCatalog = fastapi.Depends(
        library_service.clients.book_catalog.get_book_catalog
    )
):
    try:
        entry = await library_service.services.library_entry_service.add_book(
            session, catalog, user_id, book_id, status
        )
        return library_service.utils.responses.success_response(_entry_to_dict(entry), status_code=201)
    except ValueError as e:
        return library_service.utils.responses.service_error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error in add_book: {e}")
        return library_service.utils.responses.error_response("INTERNAL_ERROR", "An unexpected error occurred", status_code=500)


@router.delete(
    "/{book_id}",
    status_code=204,
    summary="Remove a book from your library",
    description="""
    Permanently removes a book from the authenticated user's library.

    Requires a valid access token in the `Authorization: Bearer <token>` header.
    """,
    responses={
        204: {"description": "Book removed from library"},
        401: {"description": "Not authenticated"},
        403: {"description": "Access denied"},
        404: {"description": "Book not found in library"}
    }
)
@limiter.limit(library_service.middleware.http.get_default_limit())
async def remove_book(
    request: fastapi.Request,
    book_id: int = fastapi.Path(..., le=MAX_BOOK_ID),
    user_id: int = fastapi.Depends(library_service.middleware.auth.require_user_id),
    session: sqlalchemy.ext.asyncio.AsyncSession = fastapi.Depends(library_service.database.get_session)
):
    try:
        await library_service.services.library_entry_service.remove_book(session, user_id, book_id)
        return fastapi.Response(status_code=204)
    except ValueError as e:
        return library_service.utils.responses.service_error_response(e)
    except Exception as e:
        logger.error(f"Unexpected error in remove_book: {e}")
        return library_service.utils.responses.error_response("INTERNAL_ERROR", "An unexpected error occurred", status_code=500)
