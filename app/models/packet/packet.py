from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class Packet(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    status: str = Field("pending", description="Free-form status label")


class UpdatePacket(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[str] = None


class PacketOut(BaseModel):
    id: str = Field(..., alias="_id")
    name: str
    description: str = ""
    status: str
    createdAt: datetime
    updatedAt: Optional[datetime] = None
