"""Caller identity passed explicitly to user-scoped operations."""

from pydantic import BaseModel, ConfigDict, Field


class GuestSession(BaseModel):
    """An authenticated guest.

    Built by the HTTP layer from gateway-provided identity headers and handed
    to each booking operation that acts on behalf of a guest.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1, description="Identity provider subject")
    email: str | None = Field(default=None, description="Guest email")
    full_name: str | None = Field(default=None, description="Guest name")
