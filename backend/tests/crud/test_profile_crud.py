import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.crud import profile as profile_crud


def test_create_profile(db_transaction: Session, profile_create_factory):
    profile_in = profile_create_factory(username="agnes", specialty="Director")

    profile = profile_crud.create_profile(
        session=db_transaction, profile_create=profile_in
    )

    assert profile.id is not None
    assert profile.username == "agnes"
    assert profile.specialty == "Director"
    assert profile_crud.get_profile_by_id(
        session=db_transaction, profile_id=profile.id
    ) is profile
    assert profile_crud.get_profile_by_username(
        session=db_transaction, username="agnes"
    ) is profile


def test_create_profile_duplicate_username(
    db_transaction: Session,
    profile_factory,
    profile_create_factory,
):
    profile_factory(username="taken")

    with pytest.raises(IntegrityError):
        profile_crud.create_profile(
            session=db_transaction,
            profile_create=profile_create_factory(username="taken"),
        )


def test_get_profile_by_username_missing(db_transaction: Session):
    assert profile_crud.get_profile_by_username(
        session=db_transaction, username="nobody"
    ) is None
