from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, Literal

DataType = TypeVar("DataType")

class APIResponse(BaseModel, Generic[DataType]):
    """Generic API response model for consistent output."""
    status: Literal["success", "error"] = Field("success", description="Outcome of the request.")
    message: str = Field(..., description="A human-readable message about the response.")
    data: Optional[DataType] = Field(None, description="The actual data returned by the API, if any.")
    code: int = Field(200, description="HTTP status code mirrored in the body.")

class ErrorResponse(BaseModel):
    """Standardized error response model."""
    status: Literal["error"] = "error"
    message: str = Field(..., description="Human-readable error message")
    data: Optional[dict] = Field(None, description="Additional error context")
    code: int = Field(..., description="HTTP status code mirrored in the body")
    error_code: str = Field(..., description="Error code for client handling")
    hint: Optional[str] = Field(None, description="How the client can recover, when known")
    request_id: Optional[str] = Field(None, description="Unique request identifier for debugging")
