import datetime
import jwt
import pytest
import fastapi
from fastapi.security import HTTPAuthorizationCredentials

import library_service.config
import library_service.middleware.auth
from tests.conftest import make_token


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def _encode(payload) -> str:
    return jwt.encode(
        payload,
        library_service.config.settings.jwt_secret_key,
        algorithm=library_service.config.settings.jwt_algorithm
    )


class TestGetTokenPayload:
    @pytest.mark.asyncio
    async def test_valid_token(self):
        payload = await library_service.middleware.auth.get_token_payload(_credentials(make_token(7)))
        assert payload["sub"] == "7"

    @pytest.mark.asyncio
    async def test_missing_credentials_is_401(self):
        with pytest.raises(fastapi.HTTPException) as exc_info:
            await library_service.middleware.auth.get_token_payload(None)
        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    @pytest.mark.asyncio
    async def test_expired_token_is_401(self):
        with pytest.raises(fastapi.HTTPException) as exc_info:
            await library_service.middleware.auth.get_token_payload(_credentials(make_token(7, minutes=-5)))
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_signature_is_401(self):
        token = jwt.encode(
            {"sub": "7", "exp": datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(minutes=5)},
            "some-other-secret-key-that-is-long-enough",
            algorithm="HS256"
        )
        with pytest.raises(fastapi.HTTPException) as exc_info:
            await library_service.middleware.auth.get_token_payload(_credentials(token))
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_token_without_expiry_is_401(self):
        with pytest.raises(fastapi.HTTPException) as exc_info:
            await library_service.middleware.auth.get_token_payload(_credentials(_encode({"sub": "7"})))
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_issuer_checked_when_configured(self, mocker):
        mocker.patch.object(library_service.config.settings, "jwt_issuer", "library-auth")
        with pytest.raises(fastapi.HTTPException):
            await library_service.middleware.auth.get_token_payload(_credentials(make_token(7, iss="someone-else")))

        payload = await library_service.middleware.auth.get_token_payload(
            _credentials(make_token(7, iss="library-auth"))
        )
        assert payload["iss"] == "library-auth"

    @pytest.mark.asyncio
    async def test_audience_checked_when_configured(self, mocker):
        mocker.patch.object(library_service.config.settings, "jwt_audience", "library-service")
        with pytest.raises(fastapi.HTTPException):
            await library_service.middleware.auth.get_token_payload(_credentials(make_token(7, aud="other")))

        payload = await library_service.middleware.auth.get_token_payload(
            _credentials(make_token(7, aud="library-service"))
        )
        assert payload["aud"] == "library-service"


class TestRequireUserId:
    @pytest.mark.asyncio
    async def test_integer_subject(self):
        assert await library_service.middleware.auth.require_user_id({"sub": "42"}) == 42

    @pytest.mark.asyncio
    async def test_name_identifier_fallback(self):
        assert await library_service.middleware.auth.require_user_id({"nameid": "9"}) == 9

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"sub": "alice"}, {"sub": True}, {"sub": ""}])
    async def test_unusable_user_id_is_403(self, payload):
        with pytest.raises(fastapi.HTTPException) as exc_info:
            await library_service.middleware.auth.require_user_id(payload)
        assert exc_info.value.status_code == 403
