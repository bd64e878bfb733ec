"""Authentication dependencies for FastAPI"""

from fastapi import Request

from regdesk.auth.identity import IdentityClient
from regdesk.auth.models import AdminSession, ThemePreference
from regdesk.config import config
from regdesk.errors import AuthError
from regdesk.logging_config import get_logger

logger = get_logger(__name__)

# Global identity client instance
_identity_client = None


def get_identity_client() -> IdentityClient:
    """Get or create the global identity client instance"""
    global _identity_client
    if _identity_client is None:
        _identity_client = IdentityClient(config)
    return _identity_client


def require_admin_session(request: Request) -> AdminSession:
    """
    Require an admin session (web flow).

    Returns:
        AdminSession stored at login

    Raises:
        AuthError: If not logged in or the session expired; the app turns this
            into a redirect to /admin/login
    """
    admin = AdminSession.load(request.session)
    if admin is None:
        raise AuthError("Login required")
    if admin.is_expired():
        logger.info(f"Admin session for {admin.email} expired")
        AdminSession.clear(request.session)
        raise AuthError("Session expired")
    return admin


def get_theme_preference(request: Request) -> ThemePreference:
    return ThemePreference(request.session, default=config.get("default_theme", "light"))
