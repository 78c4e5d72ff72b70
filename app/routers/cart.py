# app/routers/cart.py
import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.core.errors import InvalidArgumentError
from app.core.guard import authorize
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    CartCleared,
    CartItemCreate,
    CartItemRead,
    CartItemRemoved,
    CartItemUpdate,
    CartSummary,
)
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


def _parse_id(raw: str, name: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise InvalidArgumentError(f"{name} is not valid")


def _authorized_owner(owner_id: str, current_user: User) -> uuid.UUID:
    owner = _parse_id(owner_id, "owner_id")
    authorize(current_user.id, owner)
    return owner


@router.get("/{owner_id}", response_model=CartSummary)
def get_cart(
    owner_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get the owner's cart with live product details and snapshot totals.

    Auth:
      - Only the owner may read their cart (403 otherwise).
    """
    owner = _authorized_owner(owner_id, current_user)
    return service.fetch(session, owner)


@router.post(
    "/{owner_id}",
    response_model=CartItemRead,
    status_code=status.HTTP_201_CREATED,
)
def add_to_cart(
    owner_id: str,
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add a product to the cart, merging with an existing line item.

    Returns the created or merged line item.
    """
    owner = _authorized_owner(owner_id, current_user)
    return service.add(session, owner, payload.product_id, payload.quantity)


@router.put("/{owner_id}/{item_id}", response_model=CartItemRead | CartItemRemoved)
def update_cart_item(
    owner_id: str,
    item_id: str,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update the quantity of a line item.

    A quantity of 0 or less removes the item and returns {"id", "removed"}.
    """
    owner = _authorized_owner(owner_id, current_user)
    return service.update_quantity(
        session=session,
        owner_id=owner,
        item_id=_parse_id(item_id, "item_id"),
        quantity=payload.quantity,
    )


@router.delete("/{owner_id}/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_cart_item(
    owner_id: str,
    item_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Remove a line item from the cart.
    """
    owner = _authorized_owner(owner_id, current_user)
    service.remove(session, owner, _parse_id(item_id, "item_id"))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{owner_id}", response_model=CartCleared)
def clear_cart(
    owner_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Clear the entire cart. Succeeds on an already empty cart.
    """
    owner = _authorized_owner(owner_id, current_user)
    return CartCleared(removed=service.clear(session, owner))
