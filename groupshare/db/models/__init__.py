"""Database models."""
from groupshare.db.models.group import Group
from groupshare.db.models.checkin import Checkin

__all__ = ["Group", "Checkin"]
