# app/schemas/cart.py
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import StrictInt
from sqlmodel import SQLModel


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.

    quantity is range-checked by the service so that every caller,
    HTTP or not, gets the same InvalidArgumentError.
    """

    product_id: uuid.UUID
    quantity: StrictInt = 1


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item.
    A quantity of 0 or less removes the item.
    """

    quantity: StrictInt


class ProductSummary(SQLModel):
    """
    Live catalog fields joined onto a line item for display.
    """

    id: uuid.UUID
    name: str
    price: Decimal
    image_url: str | None = None


class CartItemRead(SQLModel):
    """
    Read model for a single cart item, including line_total.

    line_total is always price_snapshot * quantity; product.price is the
    live catalog price and is for display only.
    """

    id: uuid.UUID
    owner_id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    price_snapshot: Decimal
    line_total: Decimal
    product: ProductSummary | None = None
    created_at: datetime
    updated_at: datetime


class CartItemRemoved(SQLModel):
    """
    Returned when an update drops the quantity to 0 or below.
    """

    id: uuid.UUID
    removed: Literal[True]


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    owner_id: uuid.UUID
    items: list[CartItemRead]
    total_quantity: int
    total_price: Decimal


class CartCleared(SQLModel):
    removed: int
