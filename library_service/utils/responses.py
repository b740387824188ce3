import logging
import typing
import fastapi
import library_service.models.responses

logger = logging.getLogger(__name__)

# error key -> (HTTP status, envelope code, message)
_SERVICE_ERRORS: typing.Dict[str, typing.Tuple[int, str, str]] = {
    "invalid_pagination": (400, "INVALID_ARGUMENT", "Invalid pagination parameters."),
    "invalid_status": (400, "INVALID_ARGUMENT", "Invalid book status."),
    "invalid_book_id": (400, "INVALID_ARGUMENT", "Invalid book id."),
    "not_found": (404, "NOT_FOUND", "Book not in your library."),
    "book_not_found": (404, "NOT_FOUND", "Book doesn't exist."),
    "already_exists": (409, "ALREADY_EXISTS", "Book already in your library."),
    "book_service_unavailable": (503, "SERVICE_UNAVAILABLE", "BookService unavailable."),
}


def _envelope(data: typing.Any = None, error: typing.Optional[library_service.models.responses.ErrorDetail] = None):
    return library_service.models.responses.APIResponse(
        success=error is None,
        data=data,
        error=error
    ).model_dump(mode="json")


def success_response(data: typing.Any, status_code: int = 200) -> fastapi.responses.JSONResponse:
    return fastapi.responses.JSONResponse(status_code=status_code, content=_envelope(data=data))


def error_response(
    code: str,
    message: str,
    details: typing.Dict[str, typing.Any] = None,
    status_code: int = 400
) -> fastapi.responses.JSONResponse:
    error = library_service.models.responses.ErrorDetail(code=code, message=message, details=details or {})
    return fastapi.responses.JSONResponse(status_code=status_code, content=_envelope(error=error))


def service_error_response(error: ValueError) -> fastapi.responses.JSONResponse:
    error_key = str(error)
    if error_key not in _SERVICE_ERRORS:
        logger.error(f"Unmapped service error: {error_key}")
        return error_response("INTERNAL_ERROR", "An internal error occurred", status_code=500)

    status_code, code, message = _SERVICE_ERRORS[error_key]
    return error_response(code, message, status_code=status_code)
