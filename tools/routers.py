from typing import List
from fastapi import APIRouter, FastAPI


def gather_routers(app: FastAPI, routers: List[APIRouter]) -> FastAPI:
    for router in routers:
        app.include_router(router)
    return app
