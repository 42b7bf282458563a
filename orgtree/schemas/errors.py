"""Error response schemas."""
from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    error: str = Field(
        ...,
        description="Opaque error code for client-side translation",
        examples=["organization.errors.notAdmin", "domain.joinParentRequest.messageEmpty"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["You must be an admin of this organization"],
    )


class ErrorResponse(BaseModel):
    """Standard error response schema for business-rule failures (4xx)."""

    detail: ErrorDetail

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "detail": {
                        "error": "organization.errors.cannotJoinOwnDescendant",
                        "message": "An organization cannot join one of its own descendants",
                    }
                },
                {
                    "detail": {
                        "error": "organization.errors.pendingParentRequest",
                        "message": "This organization already has a pending parent request",
                    }
                },
            ]
        }
    )
