"""
Response envelopes shared by all routers
"""

from typing import Any, List, Optional
from pydantic import BaseModel

class StandardResponse(BaseModel):
    """Envelope of every successful API response"""
    success: bool
    message: str
    data: Optional[Any] = None

class ErrorResponse(BaseModel):
    """Envelope of a failed request, ``details`` lists offending field names for validation errors"""
    success: bool = False
    message: str
    error_code: Optional[str] = None
    details: Optional[Any] = None

class CategoryOption(BaseModel):
    value: str
    label: str

class CalendarSection(BaseModel):
    """One month of the public calendar as returned by the API"""
    key: str
    heading: str
    events: List[dict]
