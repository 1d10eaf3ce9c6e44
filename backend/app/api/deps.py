from collections.abc import Generator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session

from app.core import db
from app.crud import profile as profile_crud
from app.models.profile import Profile


def get_db() -> Generator[Session, None, None]:
    yield from db.get_db()


SessionDep = Annotated[Session, Depends(get_db)]


def get_current_profile(
    session: SessionDep,
    x_user_id: Annotated[UUID | None, Header()] = None,
) -> Profile:
    # Identity comes from the auth gateway in front of this service.
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-Id header",
        )
    profile = profile_crud.get_profile_by_id(session=session, profile_id=x_user_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )
    return profile


CurrentProfile = Annotated[Profile, Depends(get_current_profile)]
