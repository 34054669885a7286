"""Health endpoint reporting ledger database reachability and schema state."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from lot_ledger.db import HEALTH_STATUS_OK, DatabaseHealthPort


def _api_health_payload(overall: str, database: str, detail: str, target: str) -> dict[str, str]:
    return {"status": overall, "app": "up", "database": database, "detail": detail, "target": target}


def api_create_health_router(db_health_service: DatabaseHealthPort) -> APIRouter:
    """Create the `/health` router.

    The endpoint answers 200 only when the database is reachable and the
    ledger schema is migrated; otherwise it answers 503 with status `degraded`.

    Args:
        db_health_service: DB-layer health service.

    Returns:
        APIRouter: Router exposing `GET /health`.

    Raises:
        ValueError: Raised when db_health_service is None.
    """

    if db_health_service is None:
        raise ValueError("db_health_service must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        target = db_health_service.db_connection_label()
        try:
            db_health = db_health_service.db_check_health()
        except ConnectionError as error:
            return JSONResponse(
                content=_api_health_payload("degraded", "down", str(error), target),
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        if db_health.status != HEALTH_STATUS_OK:
            return JSONResponse(
                content=_api_health_payload("degraded", db_health.status, db_health.detail, target),
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return JSONResponse(
            content=_api_health_payload("ok", db_health.status, db_health.detail, target),
            status_code=status.HTTP_200_OK,
        )

    return router
