"""Check-in store: the single data-access object over groups and checkins.

Services never touch the session directly; they receive a ``CheckinStore``
through their constructor and wrap each mutation in ``store.transaction()``.
"""
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from groupshare.core.errors import GroupShareError, StorageError
from groupshare.core.logging_config import get_logger
from groupshare.db.models import Checkin, Group

logger = get_logger(__name__)


def _latest_first():
    """Ordering for "most recent": checked_in_at, then row id as tie-break."""
    return (Checkin.checked_in_at.desc(), Checkin.id.desc())


class CheckinStore:
    """Repository for the groups and checkins tables."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator["CheckinStore"]:
        """
        Run a unit of work atomically.

        Commits when the block exits cleanly and rolls back on any exception.
        Database failures surface as ``StorageError``; domain errors raised
        inside the block propagate unchanged after the rollback.
        """
        try:
            yield self
            self.db.commit()
        except GroupShareError:
            self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("transaction_failed", error=str(exc), error_type=type(exc).__name__)
            raise StorageError("Storage operation failed") from exc
        except Exception:
            self.db.rollback()
            raise

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    def get_group(self, code: str) -> Optional[Group]:
        return self.db.query(Group).filter(Group.code == code).first()

    def lock_group(self, code: str) -> Optional[Group]:
        """
        Fetch a group row with ``FOR UPDATE``.

        Every ledger mutation takes this lock first, which serializes writes
        within a group so two requests from one device cannot both pass the
        deactivate step before either inserts.
        """
        return self.db.query(Group).filter(Group.code == code).with_for_update().first()

    def insert_group(self, group: Group) -> bool:
        """
        Insert and commit a new group.

        Returns:
            False if the code is already taken (the insert is rolled back)

        Raises:
            StorageError: On any other database failure
        """
        try:
            self.db.add(group)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return False
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("group_insert_failed", error=str(exc))
            raise StorageError("Could not create group") from exc

        self.db.refresh(group)
        return True

    # ------------------------------------------------------------------
    # Latest-row lookups
    # ------------------------------------------------------------------

    def latest_checkin(self, group_code: str, device_id: str, for_update: bool = False) -> Optional[Checkin]:
        """The device's single most recent row, active or not."""
        query = self.db.query(Checkin).filter(
            Checkin.group_code == group_code,
            Checkin.device_id == device_id,
        ).order_by(*_latest_first())

        if for_update:
            query = query.with_for_update()

        return query.first()

    def latest_checkin_with_accommodation(self, group_code: str, device_id: str) -> Optional[Checkin]:
        """The device's most recent row that carries accommodation data."""
        return self.db.query(Checkin).filter(
            Checkin.group_code == group_code,
            Checkin.device_id == device_id,
            Checkin.accommodation_place_id.isnot(None),
        ).order_by(*_latest_first()).first()

    def latest_checkins_by_device(self, group_code: str, since_ms: int) -> List[Checkin]:
        """
        Bulk form of ``latest_checkin`` for every device active in the window.

        Returns:
            One row per device, most recently active device first
        """
        rank = func.row_number().over(
            partition_by=Checkin.device_id,
            order_by=_latest_first(),
        ).label("rank")

        ranked = self.db.query(Checkin.id.label("id"), rank).filter(
            Checkin.group_code == group_code,
            Checkin.checked_in_at >= since_ms,
        ).subquery()

        return self.db.query(Checkin).join(
            ranked, Checkin.id == ranked.c.id
        ).filter(
            ranked.c.rank == 1
        ).order_by(*_latest_first()).all()

    def latest_accommodations_by_device(self, group_code: str, device_ids: Iterable[str]) -> Dict[str, Checkin]:
        """
        Bulk form of ``latest_checkin_with_accommodation``.

        Not limited to the history window: a device that declared its stay
        eight days ago and has checked in since still shows that stay.
        """
        device_ids = list(device_ids)
        if not device_ids:
            return {}

        rank = func.row_number().over(
            partition_by=Checkin.device_id,
            order_by=_latest_first(),
        ).label("rank")

        ranked = self.db.query(Checkin.id.label("id"), rank).filter(
            Checkin.group_code == group_code,
            Checkin.device_id.in_(device_ids),
            Checkin.accommodation_place_id.isnot(None),
        ).subquery()

        rows = self.db.query(Checkin).join(
            ranked, Checkin.id == ranked.c.id
        ).filter(ranked.c.rank == 1).all()

        return {row.device_id: row for row in rows}

    # ------------------------------------------------------------------
    # Ledger writes
    # ------------------------------------------------------------------

    def add_checkin(self, record: Checkin) -> Checkin:
        self.db.add(record)
        self.db.flush()
        return record

    def flush(self) -> None:
        """Push pending attribute changes before a bulk UPDATE in the same transaction."""
        self.db.flush()

    def deactivate_active(
        self,
        group_code: str,
        device_id: str,
        checked_out_at: Optional[int],
        place_id: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> int:
        """
        Mark the device's active rows inactive.

        Args:
            checked_out_at: Stamp for checked_out_at (explicit checkout/supersede)
            place_id: Only rows at this place (targeted checkout)
            exclude_id: Leave this row untouched (accommodation stale-row cleanup)

        Returns:
            Number of rows deactivated
        """
        query = self.db.query(Checkin).filter(
            Checkin.group_code == group_code,
            Checkin.device_id == device_id,
            Checkin.is_active.is_(True),
        )
        if place_id is not None:
            query = query.filter(Checkin.place_id == place_id)
        if exclude_id is not None:
            query = query.filter(Checkin.id != exclude_id)

        return query.update(
            {Checkin.is_active: False, Checkin.checked_out_at: checked_out_at},
            synchronize_session="fetch",
        )

    def expire_stale(self, group_code: str, cutoff_ms: int) -> int:
        """
        Deactivate active rows that were never checked out and are older than
        ``cutoff_ms``. Meetups age from their scheduled time.

        ``checked_out_at`` stays NULL so these rows read back as expired.
        """
        return self.db.query(Checkin).filter(
            Checkin.group_code == group_code,
            Checkin.is_active.is_(True),
            Checkin.checked_out_at.is_(None),
            func.coalesce(Checkin.scheduled_for, Checkin.checked_in_at) < cutoff_ms,
        ).update({Checkin.is_active: False}, synchronize_session="fetch")

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def active_checkins(self, group_code: str) -> List[Checkin]:
        return self.db.query(Checkin).filter(
            Checkin.group_code == group_code,
            Checkin.is_active.is_(True),
        ).order_by(*_latest_first()).all()

    def checkins_since(self, group_code: str, since_ms: int) -> List[Checkin]:
        return self.db.query(Checkin).filter(
            Checkin.group_code == group_code,
            Checkin.checked_in_at >= since_ms,
        ).order_by(*_latest_first()).all()

    def count_active(self, group_code: str, device_id: str) -> int:
        return self.db.query(Checkin).filter(
            Checkin.group_code == group_code,
            Checkin.device_id == device_id,
            Checkin.is_active.is_(True),
        ).count()
