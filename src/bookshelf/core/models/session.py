"""Session payload models."""

from pydantic import BaseModel, ConfigDict, Field


class SessionIdentity(BaseModel):
    """Identity stored in a session record and handed to request handlers.

    Serialized as ``{"userId": ..., "email": ...}`` in the session store.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    user_id: int = Field(alias="userId", description="Authenticated user's id")
    email: str = Field(description="Authenticated user's email")
