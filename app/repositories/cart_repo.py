# app/repositories/cart_repo.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.errors import (
    DuplicateLineItemError,
    InvalidArgumentError,
    ProductNotFoundError,
)
from app.database import store_errors
from app.models.cart import MAX_QUANTITY, CartItem
from app.models.product import Product
from app.models.user import User


class CartRepository:
    """
    Cart store: single-purpose accessors over cart_items.

    Every write commits its own unit of work. Business rules (merge,
    quantity validation, ownership) live in CartService.
    """

    # ----- Reads -----

    def find_by_owner_and_product(
        self, session: Session, owner_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.owner_id == owner_id, CartItem.product_id == product_id
        )
        with store_errors(session, "cart.find_by_owner_and_product"):
            return session.exec(stmt).first()

    def find_by_id(self, session: Session, item_id: uuid.UUID) -> CartItem | None:
        with store_errors(session, "cart.find_by_id"):
            return session.get(CartItem, item_id, populate_existing=True)

    # Items for a user, oldest first
    def find_all_by_owner(self, session: Session, owner_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.owner_id == owner_id)
            .order_by(CartItem.created_at, CartItem.id)
        )
        with store_errors(session, "cart.find_all_by_owner"):
            return list(session.exec(stmt).all())

    # ----- Writes -----

    def insert(
        self,
        session: Session,
        *,
        owner_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int,
        price_snapshot: Decimal,
    ) -> CartItem:
        """
        Create a new line item.

        Referential integrity is checked here rather than left to the
        engine (SQLite does not enforce foreign keys by default).

        Raises:
            InvalidArgumentError: owner does not exist.
            ProductNotFoundError: product does not exist.
            DuplicateLineItemError: a row for (owner, product) already exists.
        """
        with store_errors(session, "cart.insert"):
            if session.get(User, owner_id) is None:
                raise InvalidArgumentError("Unknown cart owner")
            if session.get(Product, product_id) is None:
                raise ProductNotFoundError("Product not found")

            item = CartItem(
                owner_id=owner_id,
                product_id=product_id,
                quantity=quantity,
                price_snapshot=price_snapshot,
            )
            session.add(item)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateLineItemError(str(owner_id), str(product_id)) from e
            session.refresh(item)
            return item

    def update_quantity(
        self, session: Session, item_id: uuid.UUID, owner_id: uuid.UUID, quantity: int
    ) -> bool:
        """Set quantity. Returns False if the row no longer exists."""
        stmt = (
            update(CartItem)
            .where(CartItem.id == item_id, CartItem.owner_id == owner_id)
            .values(quantity=quantity, updated_at=datetime.now(timezone.utc))
        )
        with store_errors(session, "cart.update_quantity"):
            result = session.execute(stmt)
            session.commit()
        return result.rowcount > 0

    def increment_quantity(
        self, session: Session, item_id: uuid.UUID, amount: int
    ) -> bool:
        """
        Atomic quantity = quantity + amount in a single UPDATE.

        Returns False if the row vanished since it was read, or if the
        result would exceed MAX_QUANTITY.
        """
        stmt = (
            update(CartItem)
            .where(
                CartItem.id == item_id,
                CartItem.quantity <= MAX_QUANTITY - amount,
            )
            .values(
                quantity=CartItem.quantity + amount,
                updated_at=datetime.now(timezone.utc),
            )
        )
        with store_errors(session, "cart.increment_quantity"):
            result = session.execute(stmt)
            session.commit()
        return result.rowcount > 0

    def delete_by_id(
        self, session: Session, item_id: uuid.UUID, owner_id: uuid.UUID
    ) -> bool:
        stmt = delete(CartItem).where(
            CartItem.id == item_id, CartItem.owner_id == owner_id
        )
        with store_errors(session, "cart.delete_by_id"):
            result = session.execute(stmt)
            session.commit()
        return result.rowcount > 0

    def delete_all_by_owner(self, session: Session, owner_id: uuid.UUID) -> int:
        stmt = delete(CartItem).where(CartItem.owner_id == owner_id)
        with store_errors(session, "cart.delete_all_by_owner"):
            result = session.execute(stmt)
            session.commit()
        return result.rowcount
