from typing import Iterable, List, Optional
from bson import ObjectId
from datetime import datetime
from pymongo import DESCENDING, ReturnDocument

PARTICIPANT_PROJECTION = {"name": 1, "email": 1}


class MessageRecords:
    """Raw reads and writes on the messages collection.

    ``update_owned`` and ``delete_owned`` put the sender in the match filter,
    so the ownership check and the write are one atomic server operation.
    """

    def __init__(self, messages, users):
        self.messages = messages
        self.users = users

    async def create(self, document: dict) -> dict:
        result = await self.messages.insert_one(document)
        document["_id"] = result.inserted_id
        return document

    async def find_between(self, first: ObjectId, second: ObjectId) -> List[dict]:
        cursor = self.messages.find({
            "$or": [
                {"sender": first, "receiver": second},
                {"sender": second, "receiver": first}
            ]
        }).sort("createdAt", DESCENDING)
        return await cursor.to_list(length=None)

    async def update_owned(self, message_id: ObjectId, sender_id: ObjectId,
                           content: str, updated_at: datetime) -> Optional[dict]:
        return await self.messages.find_one_and_update(
            {"_id": message_id, "sender": sender_id},
            {"$set": {"content": content, "updatedAt": updated_at}},
            return_document=ReturnDocument.AFTER,
        )

    async def delete_owned(self, message_id: ObjectId, sender_id: ObjectId) -> Optional[dict]:
        return await self.messages.find_one_and_delete({"_id": message_id, "sender": sender_id})

    async def expand_participants(self, documents: Iterable[dict]) -> List[dict]:
        # Replace sender/receiver ids with {_id, name, email}; None when the user is gone
        documents = list(documents)
        ids = {doc[key] for doc in documents for key in ("sender", "receiver") if doc.get(key) is not None}
        if not ids:
            return documents

        cursor = self.users.find({"_id": {"$in": list(ids)}}, PARTICIPANT_PROJECTION)
        participants = {user["_id"]: user for user in await cursor.to_list(length=None)}

        expanded = []
        for doc in documents:
            doc = dict(doc)
            doc["sender"] = participants.get(doc.get("sender"))
            doc["receiver"] = participants.get(doc.get("receiver"))
            expanded.append(doc)
        return expanded
