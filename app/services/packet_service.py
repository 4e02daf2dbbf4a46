import logging
from datetime import datetime, timezone
from typing import List

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from app.exceptions import NotFoundError, UnknownError, ValidationError
from app.utilities.convert_object_id import objid
from app.utilities.validation import require_text

logger = logging.getLogger(__name__)


class PacketService:

    def __init__(self, packets, users):
        self.packets = packets
        self.users = users

    async def create_packet(self, data: dict) -> dict:
        packet = {
            "name": require_text(data["name"], "Name is required", "name"),
            "description": data.get("description", ""),
            "status": data.get("status", "pending"),
            "createdAt": datetime.now(timezone.utc),
        }
        try:
            result = await self.packets.insert_one(packet)
        except PyMongoError as e:
            logger.error(f"Failed to create packet: {e}")
            raise UnknownError(str(e)) from e
        packet["_id"] = result.inserted_id
        return packet

    async def list_packets(self) -> List[dict]:
        try:
            cursor = self.packets.find({}).sort("createdAt", DESCENDING)
            return await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Failed to list packets: {e}")
            raise UnknownError(str(e)) from e

    async def get_packet(self, packet_id: str) -> dict:
        oid = objid(packet_id, "packet id")
        try:
            packet = await self.packets.find_one({"_id": oid})
        except PyMongoError as e:
            raise UnknownError(str(e)) from e
        if not packet:
            raise NotFoundError("Packet not found")
        return packet

    async def update_packet(self, packet_id: str, changes: dict) -> dict:
        oid = objid(packet_id, "packet id")
        changes = {key: value for key, value in changes.items() if value is not None}
        if not changes:
            raise ValidationError("No fields to update")
        if "name" in changes:
            changes["name"] = require_text(changes["name"], "Name is required", "name")
        changes["updatedAt"] = datetime.now(timezone.utc)

        try:
            packet = await self.packets.find_one_and_update(
                {"_id": oid},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Failed to update packet {packet_id}: {e}")
            raise UnknownError(str(e)) from e
        if not packet:
            raise NotFoundError("Packet not found")
        return packet

    async def delete_packet(self, packet_id: str) -> dict:
        oid = objid(packet_id, "packet id")
        try:
            packet = await self.packets.find_one_and_delete({"_id": oid})
            if not packet:
                raise NotFoundError("Packet not found")
            # Drop dangling references from users
            await self.users.update_many({"packets": oid}, {"$pull": {"packets": oid}})
        except PyMongoError as e:
            logger.error(f"Failed to delete packet {packet_id}: {e}")
            raise UnknownError(str(e)) from e

        logger.info(f"Packet {packet_id} deleted")
        return packet
