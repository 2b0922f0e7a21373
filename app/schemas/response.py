from pydantic import BaseModel
from typing import Optional, Any


class ApiResponse(BaseModel):
    """Envelope shared by success and error responses."""

    success: bool
    message: str
    data: Optional[Any] = None
