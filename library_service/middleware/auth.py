import typing
import logging
import jwt
import fastapi
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import library_service.config

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)

# Fallback claim names for tokens issued by identity providers that use the
# WS-Federation style name identifier instead of "sub".
_FALLBACK_USER_ID_CLAIMS = (
    "nameid",
    "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier",
)


def _decode_access_token(token: str) -> typing.Optional[typing.Dict[str, typing.Any]]:
    settings = library_service.config.settings
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            leeway=0,
            options={
                "require": ["exp"],
                "verify_iss": settings.jwt_issuer is not None,
                "verify_aud": settings.jwt_audience is not None,
            }
        )
        return payload
    except jwt.ExpiredSignatureError:
        logger.debug("Access token expired")
        return None
    except jwt.InvalidTokenError as e:
        logger.debug(f"Invalid access token: {e}")
        return None


def _extract_user_id(payload: typing.Dict[str, typing.Any]) -> typing.Optional[int]:
    claim_names = (library_service.config.settings.jwt_user_id_claim,) + _FALLBACK_USER_ID_CLAIMS
    raw = next((payload[name] for name in claim_names if payload.get(name) is not None), None)
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


async def get_token_payload(
    credentials: typing.Optional[HTTPAuthorizationCredentials] = fastapi.Depends(_bearer_scheme)
) -> typing.Dict[str, typing.Any]:
    if not credentials:
        raise fastapi.HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    payload = _decode_access_token(credentials.credentials)
    if not payload:
        raise fastapi.HTTPException(
            status_code=401,
            detail="Invalid or expired access token",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return payload


async def require_user_id(
    payload: typing.Dict[str, typing.Any] = fastapi.Depends(get_token_payload)
) -> int:
    user_id = _extract_user_id(payload)
    if user_id is None:
        logger.debug("Token accepted but carries no usable user id claim")
        raise fastapi.HTTPException(
            status_code=403,
            detail="Access denied"
        )
    return user_id
