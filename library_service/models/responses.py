import typing
import pydantic
import library_service.models.status


class ErrorDetail(pydantic.BaseModel):
    code: str
    message: str
    details: typing.Dict[str, typing.Any] = pydantic.Field(default_factory=dict)


class APIResponse(pydantic.BaseModel):
    success: bool
    data: typing.Optional[typing.Any] = None
    error: typing.Optional[ErrorDetail] = None

    model_config = pydantic.ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "data": {"key": "value"},
                "error": None
            }
        }
    )


class HealthResponse(pydantic.BaseModel):
    status: str
    service: str
    version: str
    timestamp: str


class DeepHealthResponse(pydantic.BaseModel):
    status: str
    service: str
    version: str
    timestamp: str
    dependencies: typing.Dict[str, str]


class LibraryEntrySchema(pydantic.BaseModel):
    id: int
    user_id: int
    book_id: int
    status: library_service.models.status.ReadingStatus
    status_label: str

    model_config = pydantic.ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "user_id": 7,
                "book_id": 42,
                "status": "WantToRead",
                "status_label": "Want to read"
            }
        }
    )


class LibraryListResponse(APIResponse):
    data: typing.Optional[typing.List[LibraryEntrySchema]] = None


class LibraryEntryResponse(APIResponse):
    data: typing.Optional[LibraryEntrySchema] = None
