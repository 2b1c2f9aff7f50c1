"""User and authenticated principal entities."""

from datetime import datetime

from pydantic import BaseModel, Field

from srecha.core.clock import utc_now


class User(BaseModel):
    """Stored user record. ``password_hash`` never leaves the storage layer."""

    id: int | None = None
    username: str = Field(min_length=1)
    password_hash: str = Field(repr=False)
    role: str = "admin"
    created_at: datetime = Field(default_factory=utc_now)


class Principal(BaseModel):
    """Result of a successful login."""

    id: int
    username: str
    role: str
