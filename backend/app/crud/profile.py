from uuid import UUID

from sqlmodel import Session, select

from app.core.db import retry_read
from app.models.profile import Profile, ProfileCreate


def create_profile(
    *,
    session: Session,
    profile_create: ProfileCreate,
) -> Profile:
    """
    Create a new profile.

    Parameters:
        session (Session): The database session.
        profile_create (ProfileCreate): The profile data.
    Returns:
        Profile: The created profile.
    Raises:
        IntegrityError: If the username is already taken.
    """
    profile = Profile.model_validate(profile_create)
    session.add(profile)
    session.flush()
    return profile


@retry_read
def get_profile_by_id(
    *,
    session: Session,
    profile_id: UUID,
) -> Profile | None:
    return session.get(Profile, profile_id)


@retry_read
def get_profile_by_username(
    *,
    session: Session,
    username: str,
) -> Profile | None:
    return session.exec(
        select(Profile).where(Profile.username == username)
    ).one_or_none()
