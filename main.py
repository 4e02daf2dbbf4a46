from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi import status
import logging
from app.database.connections import lifespan
from app.exceptions import NotFoundError, NotOwnedError, PacketHubError, UnknownError, ValidationError
from app.includes import get_all_routers
from app.services.json import return_error_json
from config import CORS_ORIGINS, LOG_LEVEL
from tools.routers import gather_routers


logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.info("🚀 Starting FastAPI application")

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    NotOwnedError: status.HTTP_403_FORBIDDEN,
    UnknownError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

app = FastAPI(
    title="PacketHub API",
    description="Users, packets and direct messages between users",
    version="1.0.0",
    docs_url="/api-docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    swagger_ui_parameters={"defaultModelsExpandDepth": -1},
)
routers = get_all_routers()
app = gather_routers(app, routers)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PacketHubError)
async def packethub_exception_handler(request: Request, exc: PacketHubError):
    code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return return_error_json(exc.message, exc.category, code, field=exc.field)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")
    return return_error_json(message, ValidationError.category, status.HTTP_400_BAD_REQUEST)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": UnknownError.category, "message": "An unexpected error occurred."},
    )


@app.get("/")
async def Index(req: Request):
    return {"message": "Welcome to PacketHub API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=4000)
