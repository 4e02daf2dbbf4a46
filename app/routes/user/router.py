from fastapi import APIRouter, Depends, status
from app.dependencies import get_user_service
from app.models.message.message import ErrorOut
from app.models.user.user import UpdateUser, User, UserOut
from app.services.json import return_json
from app.services.user_service import UserService

user_router = APIRouter(
    prefix="/api/users",
    tags=["Users"],
)

ERRORS = {
    400: {"model": ErrorOut, "description": "Invalid data"},
    404: {"model": ErrorOut, "description": "User not found"},
}


# Create a new user
@user_router.post("", status_code=status.HTTP_201_CREATED, responses={201: {"model": UserOut}, 400: ERRORS[400]})
async def create_user(data: User, service: UserService = Depends(get_user_service)):
    user = await service.create_user(data.model_dump())
    return return_json(user, status.HTTP_201_CREATED)


@user_router.get("", responses={200: {"model": list[UserOut]}})
async def list_users(service: UserService = Depends(get_user_service)):
    return return_json(await service.list_users())


@user_router.get("/{user_id}", responses={200: {"model": UserOut}, **ERRORS})
async def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    return return_json(await service.get_user(user_id))


@user_router.put("/{user_id}", responses={200: {"model": UserOut}, **ERRORS})
@user_router.patch("/{user_id}", responses={200: {"model": UserOut}, **ERRORS})
async def update_user(user_id: str, data: UpdateUser, service: UserService = Depends(get_user_service)):
    user = await service.update_user(user_id, data.model_dump(exclude_unset=True))
    return return_json(user)


# Users are deactivated, not removed, so their messages keep resolving
@user_router.delete("/{user_id}", responses={200: {"model": UserOut}, **ERRORS})
async def deactivate_user(user_id: str, service: UserService = Depends(get_user_service)):
    return return_json(await service.deactivate_user(user_id))


# Assign a packet to a user
@user_router.post("/{user_id}/packets/{packet_id}", responses={200: {"model": UserOut}, **ERRORS})
async def add_packet_to_user(user_id: str, packet_id: str, service: UserService = Depends(get_user_service)):
    return return_json(await service.add_packet(user_id, packet_id))
