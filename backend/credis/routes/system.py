# backend/credis/routes/system.py
"""
Service banner and health endpoints.

GET /api/health reports database reachability and a few ledger counts; it
answers 503 when the database cannot be queried.
"""

import time

from flask import Blueprint, current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models import Credit, Customer, RefreshToken, Store
from ..time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        details = {
            "stores": db.session.query(Store).count(),
            "customers": db.session.query(Customer).count(),
            "credits": db.session.query(Credit).count(),
            "active_sessions": db.session.query(RefreshToken).filter(
                RefreshToken.revoked.is_(False),
                RefreshToken.expires_at > utcnow(),
            ).count(),
        }
        elapsed_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": details,
        }
    except SQLAlchemyError:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        db.session.rollback()
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/")
def index():
    return {"success": True, "message": "Credis API is running"}, 200


@system_bp.get("/api/health")
def health():
    """
    Returns:
    - 200: database reachable
    - 503: database unreachable
    """
    database_health = check_database_health()
    healthy = database_health["status"] == "healthy"

    response = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": to_utc_z(utcnow()),
        "checks": {
            "database": database_health,
        },
    }
    return response, 200 if healthy else 503
