from fastapi import APIRouter
from keyserver.db.Connection import database

router = APIRouter(tags=["health"])

# simple liveness
@router.get("/health")
def health():
    return {"status": "healthy", "service": "key-server"}

# readiness: check DB + Redis connectivity
@router.get("/ready")
def readiness():
    details = {
        "db": "ok" if database.verify_database_connection() else "error",
        "redis": "ok" if database.verify_redis_connection() else "error",
    }
    # Redis only backs rate limiting, which fails open
    ready = details["db"] == "ok"
    return {"ready": ready, "details": details}
