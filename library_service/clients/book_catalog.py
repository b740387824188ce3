import abc
import dataclasses
import enum
import logging
import typing
import httpx
import pydantic
import library_service.config

logger = logging.getLogger(__name__)


class LookupStatus(str, enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"


class BookInfo(pydantic.BaseModel):
    id: typing.Optional[int] = None
    title: typing.Optional[str] = None
    author: typing.Optional[str] = None
    genre: typing.Optional[str] = None

    model_config = pydantic.ConfigDict(extra="ignore")


@dataclasses.dataclass(frozen=True)
class BookLookup:
    status: LookupStatus
    book: typing.Optional[BookInfo] = None

    @classmethod
    def found(cls, book: typing.Optional[BookInfo] = None) -> "BookLookup":
        return cls(LookupStatus.FOUND, book)

    @classmethod
    def not_found(cls) -> "BookLookup":
        return cls(LookupStatus.NOT_FOUND)

    @classmethod
    def unavailable(cls) -> "BookLookup":
        return cls(LookupStatus.UNAVAILABLE)


class BaseBookCatalog(abc.ABC):
    @abc.abstractmethod
    async def lookup_book(self, book_id: int) -> BookLookup:
        pass


class HttpBookCatalog(BaseBookCatalog):
    """Book Catalog reached over HTTP with ``GET /book/{book_id}``.

    Any 2xx is a hit, 404 is a miss, everything else (other statuses,
    timeouts, transport errors) is reported as unavailable. There are no
    retries: one lookup is one request.
    """

    def __init__(
        self,
        base_url: typing.Optional[str] = None,
        timeout: typing.Optional[float] = None,
        transport: typing.Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url or library_service.config.settings.book_service_base_url
        self.timeout = timeout if timeout is not None else library_service.config.settings.book_service_timeout
        self._transport = transport
        self.client: typing.Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def connect(self):
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport
        )
        logger.info(f"Book catalog client targeting {self.base_url}")

    async def close(self):
        if self.client:
            await self.client.aclose()
            self.client = None
            logger.info("Closed book catalog client")

    async def lookup_book(self, book_id: int) -> BookLookup:
        if self.client is None:
            await self.connect()

        try:
            response = await self.client.get(f"/book/{book_id}")
        except httpx.TimeoutException:
            logger.warning(f"Book catalog timed out looking up book {book_id}")
            return BookLookup.unavailable()
        except httpx.HTTPError as e:
            logger.warning(f"Book catalog request failed for book {book_id}: {str(e)}")
            return BookLookup.unavailable()

        if response.status_code == 404:
            return BookLookup.not_found()

        if not response.is_success:
            logger.warning(f"Book catalog returned {response.status_code} for book {book_id}")
            return BookLookup.unavailable()

        return BookLookup.found(self._parse_book(response))

    def _parse_book(self, response: httpx.Response) -> typing.Optional[BookInfo]:
        try:
            payload = response.json()
        except ValueError:
            return None

        if not isinstance(payload, dict):
            return None

        try:
            return BookInfo.model_validate(payload)
        except pydantic.ValidationError:
            logger.debug("Book catalog returned an unexpected body shape")
            return None


book_catalog_client = HttpBookCatalog()


def get_book_catalog() -> BaseBookCatalog:
    return book_catalog_client
