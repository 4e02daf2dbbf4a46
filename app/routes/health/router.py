import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

health_router = APIRouter(
    tags=["Health"],
)


@health_router.get("/health")
async def health_check(request: Request):
    mongo_client = getattr(request.app.state, "mongo_client", None)
    try:
        if mongo_client is None:
            raise RuntimeError("no MongoDB client")
        await mongo_client.admin.command("ping")
    except (PyMongoError, RuntimeError) as e:
        logger.warning(f"Health check: database unreachable: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "disconnected"},
        )
    return {"status": "healthy", "database": "connected"}
