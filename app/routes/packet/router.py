from fastapi import APIRouter, Depends, status
from app.dependencies import get_packet_service
from app.models.message.message import ErrorOut
from app.models.packet.packet import Packet, PacketOut, UpdatePacket
from app.services.json import return_json
from app.services.packet_service import PacketService

packet_router = APIRouter(
    prefix="/api/packets",
    tags=["Packets"],
)

ERRORS = {
    400: {"model": ErrorOut, "description": "Invalid data"},
    404: {"model": ErrorOut, "description": "Packet not found"},
}


@packet_router.post("", status_code=status.HTTP_201_CREATED, responses={201: {"model": PacketOut}, 400: ERRORS[400]})
async def create_packet(data: Packet, service: PacketService = Depends(get_packet_service)):
    packet = await service.create_packet(data.model_dump())
    return return_json(packet, status.HTTP_201_CREATED)


@packet_router.get("", responses={200: {"model": list[PacketOut]}})
async def list_packets(service: PacketService = Depends(get_packet_service)):
    return return_json(await service.list_packets())


@packet_router.get("/{packet_id}", responses={200: {"model": PacketOut}, **ERRORS})
async def get_packet(packet_id: str, service: PacketService = Depends(get_packet_service)):
    return return_json(await service.get_packet(packet_id))


@packet_router.put("/{packet_id}", responses={200: {"model": PacketOut}, **ERRORS})
@packet_router.patch("/{packet_id}", responses={200: {"model": PacketOut}, **ERRORS})
async def update_packet(packet_id: str, data: UpdatePacket, service: PacketService = Depends(get_packet_service)):
    packet = await service.update_packet(packet_id, data.model_dump(exclude_unset=True))
    return return_json(packet)


# Also removes the packet from every user holding it
@packet_router.delete("/{packet_id}", responses={200: {"model": PacketOut}, **ERRORS})
async def delete_packet(packet_id: str, service: PacketService = Depends(get_packet_service)):
    return return_json(await service.delete_packet(packet_id))
