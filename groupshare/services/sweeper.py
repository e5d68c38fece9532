"""Lazy expiry of check-ins nobody closed."""
from typing import Optional

from groupshare.core.config import settings
from groupshare.core.constants import MS_PER_MINUTE
from groupshare.core.logging_config import get_logger
from groupshare.core.utils import now_ms
from groupshare.db.store import CheckinStore

logger = get_logger(__name__)


class ExpirySweeper:
    """
    Deactivates active check-ins older than the TTL.

    There is no background scheduler: every presence read sweeps its group
    first, so staleness is bounded by how often the group is viewed.
    """

    def __init__(self, store: CheckinStore, ttl_minutes: Optional[int] = None):
        self.store = store
        self.ttl_minutes = ttl_minutes if ttl_minutes is not None else settings.CHECKIN_TTL_MINUTES

    def sweep(self, group_code: str, now: Optional[int] = None) -> int:
        """Expire stale rows in one group. Returns how many were expired."""
        now = now if now is not None else now_ms()
        cutoff = now - self.ttl_minutes * MS_PER_MINUTE

        with self.store.transaction():
            expired = self.store.expire_stale(group_code, cutoff)

        if expired:
            logger.info("checkins_expired", group_code=group_code, count=expired, ttl_minutes=self.ttl_minutes)
        return expired
