from fastapi import APIRouter, Depends, status
from app.dependencies import get_message_service
from app.models.message.message import ErrorOut, MessageCreate, MessageDelete, MessageOut, MessageUpdate
from app.services.json import return_error_json, return_json
from app.services.message_service import MessageService
from app.utilities.validation import require_fields

message_router = APIRouter(
    prefix="/api/messages",
    tags=["Messages"],
)

ERRORS = {
    400: {"model": ErrorOut, "description": "Invalid or missing data"},
    404: {"model": ErrorOut, "description": "Not found, or not owned by the sender"},
}


# Send a message
@message_router.post(
    "/{sender_id}/{receiver_id}",
    status_code=status.HTTP_201_CREATED,
    responses={201: {"model": MessageOut}, **ERRORS},
)
async def send_message(
    sender_id: str,
    receiver_id: str,
    body: MessageCreate,
    service: MessageService = Depends(get_message_service),
):
    message = await service.send_message(sender_id, receiver_id, body.content)
    return return_json(message, status.HTTP_201_CREATED)


# Conversation between two users, newest first
@message_router.get(
    "/{user_id_1}/{user_id_2}",
    responses={200: {"model": list[MessageOut]}, **ERRORS},
)
async def get_messages_between_users(
    user_id_1: str,
    user_id_2: str,
    service: MessageService = Depends(get_message_service),
):
    messages = await service.get_messages_between_users(user_id_1, user_id_2)
    if not messages:
        return return_error_json("No messages found between these users", "not_found", status.HTTP_404_NOT_FOUND)
    return return_json(messages)


# Edit a message (sender only)
@message_router.put("/{message_id}", responses={200: {"model": MessageOut}, **ERRORS})
@message_router.patch("/{message_id}", responses={200: {"model": MessageOut}, **ERRORS})
async def update_message(
    message_id: str,
    body: MessageUpdate,
    service: MessageService = Depends(get_message_service),
):
    require_fields(body.model_dump(), "content", "senderId")
    message = await service.update_message(message_id, body.content, body.senderId)
    return return_json(message)


# Delete a message (sender only)
@message_router.delete("/{message_id}", responses={200: {"model": MessageOut}, **ERRORS})
async def delete_message(
    message_id: str,
    body: MessageDelete,
    service: MessageService = Depends(get_message_service),
):
    require_fields(body.model_dump(), "senderId")
    message = await service.delete_message(message_id, body.senderId)
    return return_json(message)
