# app/models/cart.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlmodel import SQLModel, Field


# Largest quantity a line item may hold (signed 32-bit INTEGER column).
MAX_QUANTITY = 2**31 - 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CartItem(SQLModel, table=True):
    """
    Shopping cart entry (line item) for a user.

    - One user cannot have 2 rows for the same product.
    - quantity is never stored below 1; dropping to 0 deletes the row.
    - price_snapshot is the catalog price at first add and never changes.
    """

    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("owner_id", "product_id", name="uq_cart_items_owner_product"),
        CheckConstraint(
            f"quantity >= 1 AND quantity <= {MAX_QUANTITY}",
            name="ck_cart_items_quantity_range",
        ),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    owner_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        ge=1,
        le=MAX_QUANTITY,
        description="Must be >= 1",
    )

    price_snapshot: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="Catalog price when first added to cart",
    )

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
