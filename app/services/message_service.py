import asyncio
import logging
from datetime import datetime, timezone
from typing import List

from pymongo.errors import PyMongoError

from app.exceptions import NotFoundError, NotOwnedError, UnknownError
from app.services.message import MessageRecords
from app.services.user_service import UserService
from app.utilities.convert_object_id import objid
from app.utilities.validation import require_text

logger = logging.getLogger(__name__)

CONTENT_REQUIRED = "Message content is required"


class MessageService:
    """Direct messages between users.

    Holds no per-request state; one instance is built at startup and shared by
    every request handler.
    """

    def __init__(self, records: MessageRecords, users: UserService):
        self.records = records
        self.users = users

    async def send_message(self, sender_id: str, receiver_id: str, content) -> dict:
        content = require_text(content, CONTENT_REQUIRED)
        sender_oid = objid(sender_id, "sender id")
        receiver_oid = objid(receiver_id, "receiver id")

        try:
            sender, receiver = await asyncio.gather(
                self.users.find_available(sender_oid),
                self.users.find_available(receiver_oid),
            )
            if not sender:
                raise NotFoundError("Sender not found or unavailable")
            if not receiver:
                raise NotFoundError("Receiver not found or unavailable")

            message = await self.records.create({
                "content": content,
                "sender": sender["_id"],
                "receiver": receiver["_id"],
                "read": False,
                "createdAt": datetime.now(timezone.utc),
            })
        except PyMongoError as e:
            logger.error(f"Failed to send message from {sender_id} to {receiver_id}: {e}")
            raise UnknownError(str(e)) from e

        logger.info(f"Message {message['_id']} sent from {sender_id} to {receiver_id}")
        return message

    async def get_messages_between_users(self, user_id_1: str, user_id_2: str) -> List[dict]:
        first = objid(user_id_1, "user id")
        second = objid(user_id_2, "user id")

        try:
            messages = await self.records.find_between(first, second)
            return await self.records.expand_participants(messages)
        except PyMongoError as e:
            logger.error(f"Failed to load messages between {user_id_1} and {user_id_2}: {e}")
            raise UnknownError(str(e)) from e

    async def update_message(self, message_id: str, new_content, sender_id: str) -> dict:
        message_oid = objid(message_id, "message id")
        content = require_text(new_content, CONTENT_REQUIRED)
        sender_oid = objid(sender_id, "sender id")

        try:
            updated = await self.records.update_owned(
                message_oid, sender_oid, content, datetime.now(timezone.utc)
            )
            if not updated:
                raise NotOwnedError("Message not found or no permission to edit")
            expanded, = await self.records.expand_participants([updated])
        except PyMongoError as e:
            logger.error(f"Failed to update message {message_id}: {e}")
            raise UnknownError(str(e)) from e

        return expanded

    async def delete_message(self, message_id: str, sender_id: str) -> dict:
        message_oid = objid(message_id, "message id")
        sender_oid = objid(sender_id, "sender id")

        try:
            deleted = await self.records.delete_owned(message_oid, sender_oid)
            if not deleted:
                raise NotOwnedError("Message not found or no permission to delete")
            expanded, = await self.records.expand_participants([deleted])
        except PyMongoError as e:
            logger.error(f"Failed to delete message {message_id}: {e}")
            raise UnknownError(str(e)) from e

        logger.info(f"Message {message_id} deleted by {sender_id}")
        return expanded
