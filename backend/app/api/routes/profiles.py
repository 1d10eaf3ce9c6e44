import uuid

from fastapi import APIRouter, status

from app.api.deps import CurrentProfile, SessionDep
from app.converters import profile as profile_converters
from app.models.profile import ProfileCreate
from app.schemas.profile import ProfilePublic
from app.services import profiles as profiles_service

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_profile(*, session: SessionDep, profile_in: ProfileCreate) -> ProfilePublic:
    return profiles_service.create_profile(session=session, profile_create=profile_in)


@router.get("/me")
def read_own_profile(current_profile: CurrentProfile) -> ProfilePublic:
    return profile_converters.to_public(current_profile)


@router.get("/{profile_id}")
def read_profile(*, session: SessionDep, profile_id: uuid.UUID) -> ProfilePublic:
    return profiles_service.get_profile(session=session, profile_id=profile_id)
