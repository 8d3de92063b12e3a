"""
Immutable data models for API responses.
"""
from typing import Optional, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_serializer


class APIResponse(BaseModel):
    """Base API response model."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool = Field(..., description="Whether the request was successful")
    message: str = Field(..., description="Response message")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response timestamp")

    @field_serializer('timestamp')
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class SyncResponse(APIResponse):
    """Counts returned by a mailbox sync trigger."""
    model_config = ConfigDict(populate_by_name=True)

    added: int = Field(..., ge=0, description="Records inserted by this run")
    total_processed: int = Field(..., ge=0, alias="totalProcessed", description="Messages fetched by this run")


class ErrorResponse(APIResponse):
    """Error response model."""
    error_code: Optional[str] = Field(None, description="Error code for debugging")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class AuthRequiredResponse(ErrorResponse):
    """Returned when the Gmail credential must be re-authorized."""
    auth_required: bool = Field(True, description="Machine-checkable re-authorization flag")
    auth_url: str = Field(..., description="Where to start the Gmail consent flow")


class GmailConnectionResponse(APIResponse):
    """Result of the OAuth callback."""
    data: Dict[str, Any] = Field(..., description="Connection result")


class HealthResponse(BaseModel):
    """Health check response model."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Health check timestamp")
    version: str = Field(..., description="API version")
    dependencies: Dict[str, str] = Field(default_factory=dict, description="Dependency statuses")

    @field_serializer('timestamp')
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()
