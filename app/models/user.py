# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Persistent user profile, the owner of a cart.

    Identity:
      - id: MUST match the auth provider's user id (UUID from JWT "sub")

    This table is *not* responsible for password hashes. The auth
    provider stores credentials; we only mirror identity and name.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches the JWT 'sub' claim",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Email from the auth provider",
    )

    name: str = Field(
        max_length=50,
        description="Display name; first part of email by default",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
