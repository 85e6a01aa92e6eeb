from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, Optional
from datetime import datetime, timezone


class StandardErrorResponse(BaseModel):
    """Error body returned for every failed request.

    ``error`` carries the human-readable message so clients that only look
    for ``{"error": "..."}`` keep working.
    """
    error: str
    error_code: str
    details: Optional[Dict[str, Any]] = None
    request_id: str = "unknown"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator('error_code')
    @classmethod
    def validate_error_code(cls, v):
        if not v or not v.isupper():
            raise ValueError("error_code must be a non-empty uppercase string")
        return v