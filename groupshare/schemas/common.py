"""Common response schemas."""
from pydantic import BaseModel
from typing import List, Optional


class ErrorDetail(BaseModel):
    """Error detail structure. ``code`` is the machine-readable error kind."""
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response for documentation."""
    success: bool = False
    error: ErrorDetail
    details: Optional[List[dict]] = None
