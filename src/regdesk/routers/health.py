from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException
from sqlmodel import Session, text

from regdesk.config import config
from regdesk.models.database import engine

health = APIRouter()


@health.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": "regdesk",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config["environment"],
    }


@health.get("/health/detailed")
async def detailed_health_check():
    """Detailed health check with database and identity configuration checks"""
    health_status = {
        "status": "healthy",
        "service": "regdesk",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config["environment"],
        "checks": {},
    }

    # Database connectivity check
    try:
        with Session(engine) as session:
            result = session.exec(text("SELECT 1")).first()
            health_status["checks"]["database"] = "healthy" if result else "unhealthy"
    except Exception as e:
        health_status["checks"]["database"] = f"unhealthy: {str(e)}"
        health_status["status"] = "unhealthy"

    # Required configuration check
    required = {"DATABASE_URL": "database_url", "SESSION_SECRET_KEY": "session_secret_key"}
    missing_vars = [env for env, key in required.items() if not config.get(key)]
    if missing_vars:
        health_status["checks"]["environment"] = f"missing: {', '.join(missing_vars)}"
        health_status["status"] = "unhealthy"
    else:
        health_status["checks"]["environment"] = "healthy"

    # Admin login is optional; report it without failing the check
    health_status["checks"]["identity"] = (
        "configured"
        if config.get("auth0_domain") and config.get("auth0_client_id")
        else "not configured"
    )

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status
