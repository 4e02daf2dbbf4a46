from app.routes.health.router import health_router as health
from app.routes.user.router import user_router as user
from app.routes.packet.router import packet_router as packet
from app.routes.message.router import message_router as message


def get_all_routers():
    return [
        health,
        user,
        packet,
        message,
    ]
