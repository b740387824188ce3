import os

os.environ.setdefault("JWT_SECRET_KEY", "library-service-test-secret-key-0123456789")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import datetime
import re
import typing
import jwt
import pytest
import fastapi.testclient
from unittest.mock import AsyncMock, MagicMock
import sqlalchemy.exc
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession

import library_service.clients.book_catalog
import library_service.config
import library_service.database
import library_service.main
import library_service.models.library_entry


class FakeBookCatalog(library_service.clients.book_catalog.BaseBookCatalog):
    def __init__(self, known_books: typing.Iterable[int] = (), unavailable: bool = False):
        self.known_books = set(known_books)
        self.unavailable = unavailable
        self.calls: typing.List[int] = []

    async def lookup_book(self, book_id: int) -> library_service.clients.book_catalog.BookLookup:
        self.calls.append(book_id)
        if self.unavailable:
            return library_service.clients.book_catalog.BookLookup.unavailable()
        if book_id not in self.known_books:
            return library_service.clients.book_catalog.BookLookup.not_found()
        return library_service.clients.book_catalog.BookLookup.found(
            library_service.clients.book_catalog.BookInfo(id=book_id, title=f"Book {book_id}")
        )


def make_token(user_id: typing.Any = 7, minutes: int = 15, **extra) -> str:
    payload = {
        "sub": str(user_id),
        "exp": datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(minutes=minutes)
    }
    payload.update(extra)
    return jwt.encode(
        payload,
        library_service.config.settings.jwt_secret_key,
        algorithm=library_service.config.settings.jwt_algorithm
    )


def auth_headers(user_id: typing.Any = 7) -> typing.Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def make_entry(entry_id: int = 1, user_id: int = 7, book_id: int = 42, status: str = "Want to read"):
    return library_service.models.library_entry.LibraryEntry(
        id=entry_id, user_id=user_id, book_id=book_id, status=status
    )


def make_scalar_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    result.scalars.return_value.all.return_value = value if isinstance(value, list) else []
    return result


@pytest.fixture
def mock_session():
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def fake_catalog():
    return FakeBookCatalog(known_books={42, 100})


@pytest.fixture
def client(mock_session, fake_catalog):
    app = library_service.main.app
    app.dependency_overrides[library_service.database.get_session] = lambda: mock_session
    app.dependency_overrides[library_service.clients.book_catalog.get_book_catalog] = lambda: fake_catalog
    yield fastapi.testclient.TestClient(app)
    app.dependency_overrides.clear()


class InMemoryLibrarySession:
    """Keeps library rows in a list and answers the statements the service issues."""

    def __init__(self):
        self.rows: typing.List[library_service.models.library_entry.LibraryEntry] = []
        self._pending: typing.List[library_service.models.library_entry.LibraryEntry] = []
        self._next_id = 1

    @staticmethod
    def _sql(stmt) -> str:
        return str(stmt.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}))

    def _matching(self, sql: str):
        rows = list(self.rows)
        user_id = re.search(r"mylibrary\.user_id = (\d+)", sql)
        if user_id:
            rows = [row for row in rows if row.user_id == int(user_id.group(1))]
        book_id = re.search(r"mylibrary\.book_id = (\d+)", sql)
        if book_id:
            rows = [row for row in rows if row.book_id == int(book_id.group(1))]
        status = re.search(r"mylibrary\.status = '([^']*)'", sql)
        if status:
            rows = [row for row in rows if row.status == status.group(1)]
        return sorted(rows, key=lambda row: row.book_id)

    async def execute(self, stmt):
        sql = self._sql(stmt)
        rows = self._matching(sql)

        if sql.startswith("DELETE"):
            for row in rows:
                self.rows.remove(row)
            return make_scalar_result(rows[0].id if rows else None)

        limit = re.search(r"LIMIT (\d+)", sql)
        if limit is None:
            return make_scalar_result(rows[0] if rows else None)
        offset = re.search(r"OFFSET (\d+)", sql)
        start = int(offset.group(1)) if offset else 0
        return make_scalar_result(rows[start:start + int(limit.group(1))])

    def add(self, entry):
        self._pending.append(entry)

    async def commit(self):
        pending, self._pending = self._pending, []
        for entry in pending:
            if any(row.user_id == entry.user_id and row.book_id == entry.book_id for row in self.rows):
                raise sqlalchemy.exc.IntegrityError(
                    "INSERT INTO libraryservice.mylibrary", {}, Exception("uq_mylibrary_user_book")
                )
            entry.id = self._next_id
            self._next_id += 1
            self.rows.append(entry)

    async def rollback(self):
        self._pending = []
