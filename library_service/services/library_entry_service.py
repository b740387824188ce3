import logging
import typing
import sqlalchemy
import sqlalchemy.exc
import sqlalchemy.ext.asyncio
import library_service.clients.book_catalog
import library_service.models.library_entry
import library_service.models.status

logger = logging.getLogger(__name__)

LibraryEntry = library_service.models.library_entry.LibraryEntry
LookupStatus = library_service.clients.book_catalog.LookupStatus

# Column and OFFSET/LIMIT ranges in PostgreSQL.
MAX_BOOK_ID = 2**31 - 1
MAX_PAGE_VALUE = 2**63 - 1


def _validate_pagination(offset: int, limit: int) -> None:
    if offset < 0 or limit <= 0:
        raise ValueError("invalid_pagination")
    if offset > MAX_PAGE_VALUE or limit > MAX_PAGE_VALUE:
        raise ValueError("invalid_pagination")


async def get_user_library(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    user_id: int,
    offset: int,
    limit: int,
    status_filter: typing.Optional[str] = None
) -> typing.List[LibraryEntry]:
    _validate_pagination(offset, limit)

    conditions = [LibraryEntry.user_id == user_id]
    if status_filter is not None:
        status = library_service.models.status.parse_status(status_filter)
        conditions.append(LibraryEntry.status == library_service.models.status.to_stored(status))

    stmt = sqlalchemy.select(LibraryEntry).where(
        *conditions
    ).order_by(LibraryEntry.book_id.asc()).offset(offset).limit(limit)

    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_entry(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    user_id: int,
    book_id: int
) -> typing.Optional[LibraryEntry]:
    stmt = sqlalchemy.select(LibraryEntry).where(
        LibraryEntry.user_id == user_id,
        LibraryEntry.book_id == book_id
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def add_book(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    catalog: library_service.clients.book_catalog.BaseBookCatalog,
    user_id: int,
    book_id: int,
    status: typing.Union[str, library_service.models.status.ReadingStatus]
) -> LibraryEntry:
    reading_status = library_service.models.status.parse_status(status)
    if book_id <= 0 or book_id > MAX_BOOK_ID:
        raise ValueError("invalid_book_id")

    existing = await get_entry(session, user_id, book_id)
    # Release the connection while the catalog is called.
    await session.rollback()
    if existing is not None:
        raise ValueError("already_exists")

    lookup = await catalog.lookup_book(book_id)
    if lookup.status == LookupStatus.NOT_FOUND:
        raise ValueError("book_not_found")
    if lookup.status != LookupStatus.FOUND:
        raise ValueError("book_service_unavailable")

    entry = LibraryEntry(
        user_id=user_id,
        book_id=book_id,
        status=library_service.models.status.to_stored(reading_status)
    )
    session.add(entry)

    # The unique constraint settles concurrent adds the pre-check cannot see.
    try:
        await session.commit()
    except sqlalchemy.exc.IntegrityError:
        await session.rollback()
        logger.info(f"Concurrent add rejected by constraint for user {user_id}, book {book_id}")
        raise ValueError("already_exists")

    logger.info(f"Added book {book_id} to library of user {user_id}")
    return entry


async def remove_book(
    session: sqlalchemy.ext.asyncio.AsyncSession,
    user_id: int,
    book_id: int
) -> None:
    if book_id > MAX_BOOK_ID:
        raise ValueError("invalid_book_id")

    stmt = sqlalchemy.delete(LibraryEntry).where(
        LibraryEntry.user_id == user_id,
        LibraryEntry.book_id == book_id
    ).returning(LibraryEntry.id)

    result = await session.execute(stmt)
    if result.scalar_one_or_none() is None:
        raise ValueError("not_found")
    await session.commit()
    logger.info(f"Removed book {book_id} from library of user {user_id}")
