#!/usr/bin/env python3
"""RegDesk - conference registration and admin console"""

import re

import uvicorn
from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware
from starlette_csrf.middleware import CSRFMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from regdesk.config import config
from regdesk.logging_config import get_logger, setup_logging
from regdesk.routers.admin import router as admin_router
from regdesk.routers.error_handlers import register_exception_handlers
from regdesk.routers.health import health
from regdesk.routers.preferences import router as preferences_router
from regdesk.routers.registration import router as registration_router

# Configure logging (INFO -> stdout, WARNING/ERROR -> stderr)
setup_logging()
logger = get_logger(__name__)


app = FastAPI(
    title="RegDesk",
    description="Conference registration with configurable form fields and an admin console",
    version="1.0.0",
)

# Trust proxy headers so request.url.scheme reflects the original HTTPS protocol
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

session_secret_key = config["session_secret_key"]
if not session_secret_key or len(session_secret_key) < 32:
    raise RuntimeError(
        "SESSION_SECRET_KEY must be set to a secure random string (>=32 characters)."
    )

app.add_middleware(
    SessionMiddleware,
    secret_key=session_secret_key,
    max_age=config["session_max_age"],
    https_only=True,
    same_site="lax",
)

# Enable CSRF protection for session-backed browser flows
app.add_middleware(
    CSRFMiddleware,
    secret=session_secret_key,
    sensitive_cookies={"session"},
    cookie_secure=True,
    cookie_samesite="lax",
    header_name="X-CSRFToken",
    # Public submit and admin login do not act on an existing session
    exempt_urls=[re.compile(r"^/$"), re.compile(r"^/admin/login$")],
)

register_exception_handlers(app)

app.include_router(health)
app.include_router(registration_router)
app.include_router(preferences_router)
app.include_router(admin_router)


def run():
    port = config["port"]
    logger.info(f"Starting RegDesk on 0.0.0.0:{port}")
    logger.info(f"Health check available at /health")

    try:
        uvicorn.run(
            app, host="0.0.0.0", port=port, log_level=config["log_level"].lower()
        )
    except Exception as e:
        logger.error(f"Failed to start server: {e}")


if __name__ == "__main__":
    run()
