from fastapi import Request

from app.services.message_service import MessageService
from app.services.packet_service import PacketService
from app.services.user_service import UserService


def get_message_service(request: Request) -> MessageService:
    return request.app.state.message_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_packet_service(request: Request) -> PacketService:
    return request.app.state.packet_service
