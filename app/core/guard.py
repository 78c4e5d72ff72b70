# app/core/guard.py
import uuid

from app.core.errors import UnauthorizedError


def authorize(acting_id: uuid.UUID, owner_id: uuid.UUID) -> None:
    """
    Allow an operation on owner_id's cart only if the caller is owner_id.

    Called by every cart route before the service runs. The acting identity
    is passed in explicitly; nothing here reads request or global state.

    Raises:
        UnauthorizedError: if the identities differ.
    """
    if acting_id != owner_id:
        raise UnauthorizedError("Unauthorized")
