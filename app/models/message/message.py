from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Union


# Request bodies. Fields are optional here so a missing value is reported
# by the handler as a 400 with a readable message.
class MessageCreate(BaseModel):
    content: Optional[str] = Field(None, description="Message text")


class MessageUpdate(BaseModel):
    content: Optional[str] = Field(None, description="New message text")
    senderId: Optional[str] = Field(None, description="Id of the sender, used for the ownership check")


class MessageDelete(BaseModel):
    senderId: Optional[str] = Field(None, description="Id of the sender, used for the ownership check")


class Participant(BaseModel):
    id: str = Field(..., alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None


# Response documentation only; handlers return the stored document as is
class MessageOut(BaseModel):
    id: str = Field(..., alias="_id")
    content: str
    sender: Union[Participant, str, None]
    receiver: Union[Participant, str, None]
    read: bool = False
    createdAt: datetime
    updatedAt: Optional[datetime] = None


class ErrorOut(BaseModel):
    error: str
    message: str
