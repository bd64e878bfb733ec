"""Tests for the Auth0 identity client"""

import time
from urllib.parse import parse_qs

import httpx
import pytest

from regdesk.auth.identity import PASSWORD_REALM_GRANT, IdentityClient
from regdesk.errors import AuthError, BackendError
from tests.config import test_config


def _config(**overrides):
    values = {
        "auth0_domain": test_config["auth0_domain"],
        "auth0_client_id": "client-id",
        "auth0_client_secret": "client-secret",
        "auth0_audience": None,
        "auth0_realm": None,
        "session_max_age": 1800,
    }
    values.update(overrides)
    return values


def _auth0_handler(seen):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth/token":
            form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
            seen["token_form"] = form
            if form.get("password") != "s3cret":
                return httpx.Response(
                    403,
                    json={"error": "invalid_grant", "error_description": "Wrong email or password."},
                )
            return httpx.Response(
                200,
                json={"access_token": "abc", "token_type": "Bearer", "expires_in": 86400},
            )
        if request.url.path == "/userinfo":
            seen["authorization"] = request.headers.get("authorization")
            return httpx.Response(
                200, json={"sub": "auth0|42", "email": "admin@example.com"}
            )
        return httpx.Response(404)

    return handler


class TestIdentityClient:
    @pytest.mark.asyncio
    async def test_sign_in_success(self):
        seen = {}
        client = IdentityClient(_config(), transport=httpx.MockTransport(_auth0_handler(seen)))

        session = await client.sign_in("admin@example.com", "s3cret")

        assert session.user_id == "auth0|42"
        assert session.email == "admin@example.com"
        assert session.expires_at <= time.time() + 1800
        assert seen["token_form"]["grant_type"] == "password"
        assert seen["authorization"] == "Bearer abc"

    @pytest.mark.asyncio
    async def test_realm_grant(self):
        seen = {}
        client = IdentityClient(
            _config(auth0_realm="Username-Password-Authentication"),
            transport=httpx.MockTransport(_auth0_handler(seen)),
        )
        await client.sign_in("admin@example.com", "s3cret")
        assert seen["token_form"]["grant_type"] == PASSWORD_REALM_GRANT
        assert seen["token_form"]["realm"] == "Username-Password-Authentication"

    @pytest.mark.asyncio
    async def test_wrong_password(self):
        client = IdentityClient(_config(), transport=httpx.MockTransport(_auth0_handler({})))
        with pytest.raises(AuthError, match="Wrong email or password."):
            await client.sign_in("admin@example.com", "nope")

    @pytest.mark.asyncio
    async def test_unreachable_identity_service(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = IdentityClient(_config(), transport=httpx.MockTransport(handler))
        with pytest.raises(BackendError):
            await client.sign_in("admin@example.com", "s3cret")

    @pytest.mark.asyncio
    async def test_not_configured(self):
        client = IdentityClient(_config(auth0_domain=None))
        assert client.is_configured is False
        with pytest.raises(AuthError):
            await client.sign_in("admin@example.com", "s3cret")
