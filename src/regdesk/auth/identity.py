"""Auth0 identity client for the admin console login"""

import logging
import time
from typing import Optional

import httpx
from authlib.integrations.base_client import OAuthError
from authlib.integrations.httpx_client import AsyncOAuth2Client

from regdesk.auth.models import AdminSession
from regdesk.errors import AuthError, BackendError

logger = logging.getLogger(__name__)

PASSWORD_REALM_GRANT = "http://auth0.com/oauth/grant-type/password-realm"


class IdentityClient:
    """Exchanges admin credentials for an AdminSession via Auth0"""

    def __init__(self, config: dict, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.domain = config.get("auth0_domain")
        self.client_id = config.get("auth0_client_id")
        self.client_secret = config.get("auth0_client_secret")
        self.audience = config.get("auth0_audience")
        self.realm = config.get("auth0_realm")
        self.max_age = int(config.get("session_max_age") or 1800)
        self.transport = transport

        self.is_configured = bool(self.domain and self.client_id)
        if not self.is_configured:
            logger.warning("Auth0 credentials not configured. Admin login is disabled.")

    def _client(self) -> AsyncOAuth2Client:
        kwargs = {"timeout": 10.0}
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return AsyncOAuth2Client(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope="openid profile email",
            **kwargs,
        )

    async def sign_in(self, email: str, password: str) -> AdminSession:
        """
        Exchange email and password for an admin session

        Args:
            email: Admin email
            password: Admin password

        Returns:
            AdminSession to store in the request session

        Raises:
            AuthError: If the credentials are rejected or login is not configured
            BackendError: If Auth0 cannot be reached or fails
        """
        if not self.is_configured:
            raise AuthError("Admin login is not configured")
        if not email or not password:
            raise AuthError("Email and password are required")

        token_params = {"username": email, "password": password}
        if self.realm:
            token_params.update(grant_type=PASSWORD_REALM_GRANT, realm=self.realm)
        else:
            token_params["grant_type"] = "password"
        if self.audience:
            token_params["audience"] = self.audience

        try:
            async with self._client() as client:
                token = await client.fetch_token(
                    f"https://{self.domain}/oauth/token", **token_params
                )
                response = await client.get(f"https://{self.domain}/userinfo")
                response.raise_for_status()
                userinfo = response.json()
        except OAuthError as e:
            logger.warning(f"Admin login rejected for {email}: {e.error}")
            raise AuthError(e.description or "Invalid login credentials") from e
        except httpx.HTTPError as e:
            logger.error(f"Auth0 request failed: {e}")
            raise BackendError(f"Identity service request failed: {e}") from e

        expires_in = int(token.get("expires_in") or self.max_age)
        session = AdminSession(
            user_id=userinfo.get("sub", ""),
            email=userinfo.get("email", email),
            expires_at=time.time() + min(expires_in, self.max_age),
        )
        logger.info(f"Admin {session.email} signed in")
        return session
