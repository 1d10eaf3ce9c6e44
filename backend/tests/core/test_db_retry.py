import pytest
from pytest_mock import MockerFixture
from sqlalchemy.exc import InterfaceError, OperationalError

from app.core import db
from app.core.config import settings
from app.exceptions.base import TransportError


def _operational_error() -> OperationalError:
    return OperationalError(statement="SELECT 1", params=None, orig=Exception("timeout"))


@pytest.fixture
def no_sleep(mocker: MockerFixture):
    return mocker.patch("app.core.db.time.sleep")


def test_retry_read_recovers(mocker: MockerFixture, no_sleep):
    read = mocker.MagicMock(side_effect=[_operational_error(), "row"])
    read.__name__ = "read"
    session = mocker.MagicMock()

    result = db.retry_read(read)(session=session, key=1)

    assert result == "row"
    assert read.call_count == 2
    read.assert_called_with(session=session, key=1)
    session.rollback.assert_called_once()
    no_sleep.assert_called_once_with(settings.READ_RETRY_BACKOFF_SECONDS)


def test_retry_read_gives_up(mocker: MockerFixture, no_sleep):
    mocker.patch.object(settings, "READ_RETRY_ATTEMPTS", 3)
    read = mocker.MagicMock(side_effect=_operational_error())
    read.__name__ = "read"
    session = mocker.MagicMock()

    with pytest.raises(TransportError) as exc_info:
        db.retry_read(read)(session=session)

    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert read.call_count == 3
    delays = [c.args[0] for c in no_sleep.call_args_list]
    assert delays == [
        settings.READ_RETRY_BACKOFF_SECONDS,
        settings.READ_RETRY_BACKOFF_SECONDS * 2,
    ]


def test_retry_read_does_not_retry_other_errors(mocker: MockerFixture, no_sleep):
    read = mocker.MagicMock(side_effect=ValueError("bad"))
    read.__name__ = "read"

    with pytest.raises(ValueError):
        db.retry_read(read)(session=mocker.MagicMock())

    assert read.call_count == 1
    no_sleep.assert_not_called()


def test_crud_read_retries_through_session(
    mocker: MockerFixture,
    no_sleep,
    profile_factory,
):
    from app.crud import profile as profile_crud

    profile = profile_factory.build()
    session = mocker.MagicMock()
    session.get.side_effect = [_operational_error(), profile]

    assert profile_crud.get_profile_by_id(session=session, profile_id=profile.id) is profile
    assert session.get.call_count == 2


def test_sqlite_foreign_keys_enforced(db_transaction):
    assert db_transaction.connection().exec_driver_sql("PRAGMA foreign_keys").scalar() == 1


def test_retry_read_maps_other_dbapi_errors_without_retry(mocker: MockerFixture, no_sleep):
    read = mocker.MagicMock(
        side_effect=InterfaceError(
            statement="SELECT 1", params=None, orig=Exception("connection closed")
        )
    )
    read.__name__ = "read"
    session = mocker.MagicMock()

    with pytest.raises(TransportError) as exc_info:
        db.retry_read(read)(session=session)

    assert isinstance(exc_info.value.__cause__, InterfaceError)
    assert read.call_count == 1
    session.rollback.assert_called_once()
    no_sleep.assert_not_called()
