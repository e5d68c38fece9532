"""Group schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class GroupResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: str
    created_at: datetime
    expires_at: Optional[datetime] = None


class GroupLookupResponse(BaseModel):
    exists: bool
    group: Optional[GroupResponse] = None
