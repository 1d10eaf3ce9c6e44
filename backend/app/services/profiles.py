from uuid import UUID

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlmodel import Session

from app.converters import profile as profile_converters
from app.crud import profile as profile_crud
from app.exceptions.base import AppError, TransportError
from app.exceptions.profile_exceptions import ProfileNotFound, UsernameAlreadyExists
from app.models.profile import ProfileCreate
from app.schemas.profile import ProfilePublic


def create_profile(
    *,
    session: Session,
    profile_create: ProfileCreate,
) -> ProfilePublic:
    """
    Register a profile.
    Raises:
        UsernameAlreadyExists: If the username is taken.
        TransportError: If the data store fails.
        AppError: For any other (unexpected) errors.
    """
    try:
        profile = profile_crud.create_profile(
            session=session,
            profile_create=profile_create,
        )
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise UsernameAlreadyExists(profile_create.username) from e
    except DBAPIError as e:
        session.rollback()
        raise TransportError from e
    except Exception as e:
        session.rollback()
        raise AppError from e
    return profile_converters.to_public(profile)


def get_profile(
    *,
    session: Session,
    profile_id: UUID,
) -> ProfilePublic:
    profile = profile_crud.get_profile_by_id(session=session, profile_id=profile_id)
    if profile is None:
        raise ProfileNotFound(profile_id)
    return profile_converters.to_public(profile)
