"""Error payload schema."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str
    message: str
    validation_errors: dict[str, list[str]] | None = None
