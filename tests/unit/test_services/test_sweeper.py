"""Unit tests for lazy expiry."""
import pytest

from groupshare.core.constants import MS_PER_MINUTE
from groupshare.core.utils import now_ms
from groupshare.services import CheckinState, CheckinStatus, ExpirySweeper
from tests.utils import add_checkin, minutes_ago


@pytest.mark.unit
class TestExpirySweeper:
    """Stale check-ins expire without being checked out."""

    def test_stale_checkin_expires(self, store, group, db_session):
        stale = add_checkin(db_session, group.code, "dave2", checked_in_at=minutes_ago(120))

        expired = ExpirySweeper(store).sweep(group.code)

        assert expired == 1
        db_session.refresh(stale)
        assert stale.is_active is False
        assert stale.checked_out_at is None
        assert CheckinState.of(stale).status == CheckinStatus.EXPIRED

    def test_fresh_checkin_untouched(self, store, group, db_session):
        fresh = add_checkin(db_session, group.code, "dave2", checked_in_at=minutes_ago(30))

        assert ExpirySweeper(store).sweep(group.code) == 0
        db_session.refresh(fresh)
        assert fresh.is_active is True

    def test_checked_out_rows_keep_their_status(self, store, group, db_session):
        """Rows already checked out are not re-stamped as expired."""
        closed = add_checkin(
            db_session, group.code, "dave2",
            checked_in_at=minutes_ago(180), is_active=False, checked_out_at=minutes_ago(170),
        )

        assert ExpirySweeper(store).sweep(group.code) == 0
        db_session.refresh(closed)
        assert CheckinState.of(closed).status == CheckinStatus.CHECKED_OUT

    def test_custom_ttl(self, store, group, db_session):
        add_checkin(db_session, group.code, "dave2", checked_in_at=minutes_ago(20))

        assert ExpirySweeper(store, ttl_minutes=15).sweep(group.code) == 1

    def test_sweep_is_scoped_to_group(self, store, group, db_session):
        from groupshare.services import GroupRegistry

        other = GroupRegistry(store).create_group()
        add_checkin(db_session, other.code, "dave2", checked_in_at=minutes_ago(120))

        assert ExpirySweeper(store).sweep(group.code) == 0
        assert ExpirySweeper(store).sweep(other.code) == 1

    def test_upcoming_meetup_not_expired(self, store, group, db_session):
        """Meetups age from their scheduled time, not from when they were posted."""
        add_checkin(
            db_session, group.code, "dave2",
            checked_in_at=minutes_ago(120), scheduled_for=now_ms() + 30 * MS_PER_MINUTE,
        )

        assert ExpirySweeper(store).sweep(group.code) == 0

    def test_past_meetup_expires(self, store, group, db_session):
        add_checkin(
            db_session, group.code, "dave2",
            checked_in_at=minutes_ago(300), scheduled_for=minutes_ago(120),
        )

        assert ExpirySweeper(store).sweep(group.code) == 1

    def test_sweep_at_explicit_time(self, store, group, db_session):
        """``now`` can be passed in, so expiry is checked against that clock."""
        add_checkin(db_session, group.code, "dave2", checked_in_at=minutes_ago(30))

        assert ExpirySweeper(store).sweep(group.code, now=now_ms() + 60 * MS_PER_MINUTE) == 1
