from pytest_mock import MockerFixture

from app.core.enums import ChangeKind
from app.realtime.feed import ChangeEvent, ChangeFeed


def test_publish_filters_by_table_and_predicate(mocker: MockerFixture):
    feed = ChangeFeed()
    matching = mocker.MagicMock()
    other_row = mocker.MagicMock()
    other_table = mocker.MagicMock()
    feed.subscribe("requests", lambda row: row["owner"] == "a", matching)
    feed.subscribe("requests", lambda row: row["owner"] == "b", other_row)
    feed.subscribe("agreements", lambda row: True, other_table)

    feed.publish("requests", {"owner": "a", "secret": 42}, ChangeKind.INSERT)

    matching.assert_called_once_with(ChangeEvent(table="requests", kind=ChangeKind.INSERT))
    other_row.assert_not_called()
    other_table.assert_not_called()


def test_callback_receives_no_row_data():
    feed = ChangeFeed()
    received = []
    feed.subscribe("requests", lambda row: True, received.append)

    feed.publish("requests", {"id": 1, "message": "hello"}, ChangeKind.UPDATE)

    assert len(received) == 1
    assert not hasattr(received[0], "row")
    assert received[0].kind == ChangeKind.UPDATE


def test_failing_subscriber_does_not_block_others(mocker: MockerFixture):
    feed = ChangeFeed()
    broken_callback = mocker.MagicMock(side_effect=RuntimeError("boom"))
    healthy = mocker.MagicMock()
    feed.subscribe("requests", lambda row: row["missing"], mocker.MagicMock())
    feed.subscribe("requests", lambda row: True, broken_callback)
    feed.subscribe("requests", lambda row: True, healthy)

    feed.publish("requests", {}, ChangeKind.DELETE)

    broken_callback.assert_called_once()
    healthy.assert_called_once()


def test_unsubscribe_is_idempotent(mocker: MockerFixture):
    feed = ChangeFeed()
    callback = mocker.MagicMock()
    subscription = feed.subscribe("requests", lambda row: True, callback)
    kept = feed.subscribe("requests", lambda row: True, mocker.MagicMock())

    subscription.unsubscribe()
    subscription.unsubscribe()
    feed.publish("requests", {}, ChangeKind.INSERT)

    callback.assert_not_called()
    assert not subscription.active
    assert kept.active
    assert feed.subscriber_count("requests") == 1


def test_subscribe_many_shares_one_subscription(mocker: MockerFixture):
    feed = ChangeFeed()
    callback = mocker.MagicMock()

    with feed.subscribe_many(
        [("requests", lambda row: True), ("agreements", lambda row: True)], callback
    ):
        assert feed.subscriber_count() == 2
        feed.publish("requests", {}, ChangeKind.INSERT)
        feed.publish("agreements", {}, ChangeKind.INSERT)

    assert callback.call_count == 2
    assert feed.subscriber_count() == 0


def test_publish_without_subscribers():
    ChangeFeed().publish("requests", {}, ChangeKind.INSERT)
