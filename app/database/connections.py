from contextlib import asynccontextmanager
import logging
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import errors
from app.database.db import ensure_indexes, get_collections, get_database
from app.exceptions import UnknownError
from app.services.message import MessageRecords
from app.services.message_service import MessageService
from app.services.packet_service import PacketService
from app.services.user_service import UserService
from config import DATABASE_URL, MONGO_SERVER_SELECTION_TIMEOUT_MS

logger = logging.getLogger(__name__)
db_config = {
    "db_url": DATABASE_URL,
    "timeout_ms": MONGO_SERVER_SELECTION_TIMEOUT_MS,
}


async def connect():
    try:
        client = AsyncIOMotorClient(
            db_config["db_url"],
            serverSelectionTimeoutMS=db_config["timeout_ms"],
            tz_aware=True,
        )
        await client.admin.command("ping")
        return client
    except errors.ConfigurationError as err:
        raise UnknownError("Invalid MongoDB configuration.") from err
    except errors.ConnectionFailure as err:
        raise UnknownError("Unable to connect to the MongoDB server.") from err
    except errors.OperationFailure as err:
        raise UnknownError(f"Authentication or command error: {err}") from err


def build_services(collections):
    """One instance of each service, shared by all requests."""
    users = UserService(collections["users"], collections["packets"])
    return {
        "users": users,
        "packets": PacketService(collections["packets"], collections["users"]),
        "messages": MessageService(MessageRecords(collections["messages"], collections["users"]), users),
    }


def attach_services(app, collections):
    services = build_services(collections)
    app.state.user_service = services["users"]
    app.state.packet_service = services["packets"]
    app.state.message_service = services["messages"]


@asynccontextmanager
async def lifespan(app):
    """Async context manager for MongoDB connection lifecycle"""
    try:
        connection = await connect()
        collections = get_collections(get_database(connection))
        await ensure_indexes(collections)
        app.state.mongo_client = connection
        attach_services(app, collections)
        logger.info("✅ MongoDB connection established successfully at startup.")
    except Exception as e:
        logger.error(f"❌ MongoDB connection failed at startup: {e}")
        raise

    yield

    mongo_client = getattr(app.state, "mongo_client", None)
    if mongo_client:
        mongo_client.close()
        logger.info("🔌 MongoDB connection closed at shutdown.")
    logger.info("🚪 Shutting down FastAPI app.")
