"""Group registry business logic."""
from typing import Optional

from groupshare.core.config import settings
from groupshare.core.errors import CodeGenerationExhausted, NotFoundError
from groupshare.core.logging_config import get_logger
from groupshare.core.utils import generate_group_code, to_utc
from groupshare.db.models import Group
from groupshare.db.store import CheckinStore

logger = get_logger(__name__)


class GroupRegistry:
    """Issues and validates 6-digit join codes."""

    def __init__(self, store: CheckinStore, max_attempts: Optional[int] = None):
        self.store = store
        self.max_attempts = max_attempts if max_attempts is not None else settings.GROUP_CODE_MAX_ATTEMPTS

    def create_group(self) -> Group:
        """
        Create a group with a fresh random code.

        Codes are only unique by virtue of the database constraint, so a
        collision is detected on insert and retried with a new code.

        Raises:
            CodeGenerationExhausted: If every attempt collided
            StorageError: On any other database failure
        """
        expires_at = to_utc(settings.GROUP_SEASON_END) if settings.GROUP_SEASON_END else None

        for attempt in range(1, self.max_attempts + 1):
            group = Group(code=generate_group_code(), expires_at=expires_at)
            if self.store.insert_group(group):
                logger.info("group_created", group_code=group.code, attempts=attempt)
                return group
            logger.warning("group_code_collision", group_code=group.code, attempt=attempt)

        raise CodeGenerationExhausted(
            f"Failed to generate a unique group code after {self.max_attempts} attempts"
        )

    def get_group(self, code: str) -> Optional[Group]:
        return self.store.get_group(code)

    def group_exists(self, code: str) -> bool:
        return self.get_group(code) is not None

    def require_group(self, code: str) -> Group:
        """Return the group or raise ``NotFoundError``."""
        group = self.get_group(code)
        if group is None:
            raise NotFoundError(f"Group {code} not found")
        return group
