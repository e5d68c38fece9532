"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here for Alembic to detect them
from groupshare.db.models.group import Group  # noqa: F401, E402
from groupshare.db.models.checkin import Checkin  # noqa: F401, E402
