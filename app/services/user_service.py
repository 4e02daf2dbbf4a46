import logging
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from app.exceptions import NotFoundError, UnknownError, ValidationError
from app.utilities.convert_object_id import objid
from app.utilities.validation import require_text
from app.utilities.security import hash_password

logger = logging.getLogger(__name__)

# Password hashes never leave the service
PUBLIC_PROJECTION = {"password": 0}


class UserService:

    def __init__(self, users, packets):
        self.users = users
        self.packets = packets

    async def find_available(self, user_id: ObjectId) -> Optional[dict]:
        return await self.users.find_one({"_id": user_id, "available": True}, PUBLIC_PROJECTION)

    async def create_user(self, data: dict) -> dict:
        try:
            if await self.users.find_one({"email": data["email"]}):
                raise ValidationError("Email already registered", field="email")

            user = {
                "name": require_text(data["name"], "Name is required", "name"),
                "email": data["email"],
                "password": hash_password(data["password"]),
                "phone": data.get("phone", ""),
                "available": data.get("available", True),
                "packets": [],
                "createdAt": datetime.now(timezone.utc),
            }
            result = await self.users.insert_one(user)
        except DuplicateKeyError as e:
            raise ValidationError("Email already registered", field="email") from e
        except PyMongoError as e:
            logger.error(f"Failed to create user: {e}")
            raise UnknownError(str(e)) from e

        user["_id"] = result.inserted_id
        user.pop("password")
        logger.info(f"User {user['_id']} created")
        return user

    async def list_users(self) -> List[dict]:
        try:
            cursor = self.users.find({}, PUBLIC_PROJECTION).sort("createdAt", DESCENDING)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Failed to list users: {e}")
            raise UnknownError(str(e)) from e

    async def get_user(self, user_id: str) -> dict:
        oid = objid(user_id, "user id")
        try:
            user = await self.users.find_one({"_id": oid}, PUBLIC_PROJECTION)
        except PyMongoError as e:
            raise UnknownError(str(e)) from e
        if not user:
            raise NotFoundError("User not found")
        return user

    async def update_user(self, user_id: str, changes: dict) -> dict:
        oid = objid(user_id, "user id")
        changes = {key: value for key, value in changes.items() if value is not None}
        if not changes:
            raise ValidationError("No fields to update")
        if "name" in changes:
            changes["name"] = require_text(changes["name"], "Name is required", "name")
        if "password" in changes:
            changes["password"] = hash_password(changes["password"])
        changes["updatedAt"] = datetime.now(timezone.utc)

        return await self._update(oid, {"$set": changes})

    async def deactivate_user(self, user_id: str) -> dict:
        oid = objid(user_id, "user id")
        user = await self._update(oid, {"$set": {"available": False, "updatedAt": datetime.now(timezone.utc)}})
        logger.info(f"User {user_id} deactivated")
        return user

    async def add_packet(self, user_id: str, packet_id: str) -> dict:
        user_oid = objid(user_id, "user id")
        packet_oid = objid(packet_id, "packet id")
        try:
            packet = await self.packets.find_one({"_id": packet_oid})
        except PyMongoError as e:
            raise UnknownError(str(e)) from e
        if not packet:
            raise NotFoundError("Packet not found")

        return await self._update(user_oid, {
            "$addToSet": {"packets": packet_oid},
            "$set": {"updatedAt": datetime.now(timezone.utc)},
        })

    async def _update(self, oid: ObjectId, update: dict) -> dict:
        try:
            user = await self.users.find_one_and_update(
                {"_id": oid},
                update,
                projection=PUBLIC_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise ValidationError("Email already registered", field="email") from e
        except PyMongoError as e:
            logger.error(f"Failed to update user {oid}: {e}")
            raise UnknownError(str(e)) from e
        if not user:
            raise NotFoundError("User not found")
        return user
