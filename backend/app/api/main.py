from fastapi import APIRouter

from app.api.routes import (
    collaborations,
    profiles,
    utils,
)

api_router = APIRouter()
api_router.include_router(utils.router)
api_router.include_router(profiles.router)
api_router.include_router(collaborations.router)
