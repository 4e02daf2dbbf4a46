from pymongo import ASCENDING, DESCENDING, IndexModel
from config import (
    DATABASE_NAME,
    USER_COLLECTION,
    PACKET_COLLECTION,
    MESSAGES_COLLECTION,
)


def get_database(client):
    return client[DATABASE_NAME]


def get_collections(db):
    return {
        "users": db[USER_COLLECTION],
        "packets": db[PACKET_COLLECTION],
        "messages": db[MESSAGES_COLLECTION],
    }


async def ensure_indexes(collections):
    await collections["users"].create_indexes([
        IndexModel([("email", ASCENDING)], unique=True),
        IndexModel([("available", ASCENDING)]),
    ])
    # Covers both directions of the conversation query and its sort
    await collections["messages"].create_indexes([
        IndexModel([("sender", ASCENDING), ("receiver", ASCENDING), ("createdAt", DESCENDING)]),
    ])
