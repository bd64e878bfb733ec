"""Configuration loader for RegDesk with environment-specific support"""

import os
from pathlib import Path

from dotenv import load_dotenv

project_dir = Path(__file__).parent.parent.parent
env_path = project_dir / ".env"

# Load .env file if it exists. For local development only.
if env_path.exists():
    load_dotenv(env_path)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Configuration dictionary - set once at initialization
config = {
    "database_url": os.getenv("DATABASE_URL"),
    "port": int(os.getenv("PORT", "8000")),
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    "session_secret_key": os.getenv("SESSION_SECRET_KEY"),
    "auth0_domain": os.getenv("AUTH0_DOMAIN"),
    "auth0_client_id": os.getenv("AUTH0_CLIENT_ID"),
    "auth0_client_secret": os.getenv("AUTH0_CLIENT_SECRET"),
    "auth0_audience": os.getenv("AUTH0_AUDIENCE"),
    # Auth0 database connection used for the password grant
    "auth0_realm": os.getenv("AUTH0_REALM"),
    # Admin session lifetime in seconds
    "session_max_age": int(os.getenv("SESSION_MAX_AGE", "1800")),
    "default_theme": os.getenv("DEFAULT_THEME", "light"),
    # Reject select values that are not one of the configured options
    "strict_select_options": _env_flag("STRICT_SELECT_OPTIONS", "true"),
    "environment": os.getenv("ENVIRONMENT", "development"),
}
