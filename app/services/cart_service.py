# app/services/cart_service.py
import logging
import uuid
from decimal import Decimal

from sqlmodel import Session

from app.core.config import get_settings
from app.core.errors import (
    DuplicateLineItemError,
    InvalidArgumentError,
    NotFoundError,
    ProductNotFoundError,
    TransientError,
)
from app.models.cart import MAX_QUANTITY, CartItem
from app.models.product import Product
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    CartItemRead,
    CartItemRemoved,
    CartSummary,
    ProductSummary,
)

logger = logging.getLogger(__name__)

def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate quantities and product existence
      - merge repeated adds of the same product into one line item
      - take price_snapshot from Product.price on first add only
      - re-check row ownership on item-level operations
      - join live catalog fields for display, compute totals from snapshots

    Every method expects an owner_id that the caller already authorized
    (see app.core.guard.authorize). Nothing is cached between calls.
    """

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        max_add_retries: int | None = None,
    ):
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        if max_add_retries is None:
            max_add_retries = get_settings().CART_ADD_MAX_RETRIES
        self.max_add_retries = max_add_retries

    # ---- internal helpers ----

    @staticmethod
    def _to_read(item: CartItem, product: Product | None) -> CartItemRead:
        summary = None
        if product is not None:
            summary = ProductSummary(
                id=product.id,
                name=product.name,
                price=product.price,
                image_url=product.image_url,
            )
        return CartItemRead(
            id=item.id,
            owner_id=item.owner_id,
            product_id=item.product_id,
            quantity=item.quantity,
            price_snapshot=item.price_snapshot,
            line_total=item.price_snapshot * item.quantity,
            product=summary,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

    def _enrich(self, session: Session, item: CartItem) -> CartItemRead:
        product = self.product_repo.get_product(session, item.product_id)
        return self._to_read(item, product)

    def _get_owned_item(
        self, session: Session, owner_id: uuid.UUID, item_id: uuid.UUID
    ) -> CartItem:
        """
        Look up a line item and check it belongs to owner_id.

        A row owned by someone else is reported exactly like a missing one.
        """
        item = self.cart_repo.find_by_id(session, item_id)
        if item is None or item.owner_id != owner_id:
            raise NotFoundError("Item not found")
        return item

    def _reload(self, session: Session, item_id: uuid.UUID) -> CartItem | None:
        return self.cart_repo.find_by_id(session, item_id)

    # ---- public operations ----

    def fetch(self, session: Session, owner_id: uuid.UUID) -> CartSummary:
        """
        Return the owner's cart:
          - items in insertion order, each with live product fields
          - total_quantity
          - total_price (sum of price_snapshot * quantity)
        """
        items = self.cart_repo.find_all_by_owner(session, owner_id)
        products = self.product_repo.get_products(
            session, (it.product_id for it in items)
        )

        item_reads = [self._to_read(it, products.get(it.product_id)) for it in items]

        return CartSummary(
            owner_id=owner_id,
            items=item_reads,
            total_quantity=sum(it.quantity for it in item_reads),
            total_price=sum((it.line_total for it in item_reads), Decimal("0")),
        )

    def add(
        self,
        session: Session,
        owner_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int = 1,
    ) -> CartItemRead:
        """
        Add a product to the owner's cart.

        Rules:
          - quantity must be a positive integer, at most MAX_QUANTITY
          - a merge may not push the line item past MAX_QUANTITY
          - product must exist in the catalog
          - existing line item => quantity is incremented, snapshot kept
          - otherwise a new line item snapshots the current product.price

        Two requests racing to create the same line item both see "no row";
        the loser hits the unique constraint and retries as a merge.
        """
        if not _is_int(quantity) or not 1 <= quantity <= MAX_QUANTITY:
            raise InvalidArgumentError(
                f"Quantity must be an integer between 1 and {MAX_QUANTITY}"
            )

        product = self.product_repo.get_product(session, product_id)
        if product is None:
            raise ProductNotFoundError("Product not found")

        for attempt in range(self.max_add_retries + 1):
            existing = self.cart_repo.find_by_owner_and_product(
                session, owner_id, product_id
            )

            if existing is not None:
                existing_id = existing.id
                if existing.quantity + quantity > MAX_QUANTITY:
                    raise InvalidArgumentError(
                        f"Quantity in cart cannot exceed {MAX_QUANTITY}"
                    )
                if self.cart_repo.increment_quantity(session, existing_id, quantity):
                    merged = self._reload(session, existing_id)
                    if merged is not None:
                        logger.debug(
                            "Merged add into item %s (+%d)", existing_id, quantity
                        )
                        return self._to_read(merged, product)
                # Row vanished or grew concurrently; re-read and re-check.
                continue

            try:
                created = self.cart_repo.insert(
                    session,
                    owner_id=owner_id,
                    product_id=product_id,
                    quantity=quantity,
                    price_snapshot=product.price,
                )
            except DuplicateLineItemError:
                logger.info(
                    "Concurrent add for owner=%s product=%s, retrying as merge (attempt %d)",
                    owner_id,
                    product_id,
                    attempt + 1,
                )
                continue
            return self._to_read(created, product)

        raise TransientError("Cart is busy, please retry")

    def update_quantity(
        self,
        session: Session,
        owner_id: uuid.UUID,
        item_id: uuid.UUID,
        quantity: int,
    ) -> CartItemRead | CartItemRemoved:
        """
        Set the quantity of a line item.

        quantity <= 0 removes the item and returns CartItemRemoved.
        """
        if not _is_int(quantity):
            raise InvalidArgumentError("Quantity must be an integer")
        if quantity > MAX_QUANTITY:
            raise InvalidArgumentError(f"Quantity cannot exceed {MAX_QUANTITY}")

        self._get_owned_item(session, owner_id, item_id)

        if quantity <= 0:
            self.cart_repo.delete_by_id(session, item_id, owner_id)
            logger.debug("Removed item %s via quantity update", item_id)
            return CartItemRemoved(id=item_id, removed=True)

        if not self.cart_repo.update_quantity(session, item_id, owner_id, quantity):
            raise NotFoundError("Item not found")

        updated = self._reload(session, item_id)
        if updated is None:
            raise NotFoundError("Item not found")
        return self._enrich(session, updated)

    def remove(
        self,
        session: Session,
        owner_id: uuid.UUID,
        item_id: uuid.UUID,
    ) -> None:
        """
        Remove a line item. Removing it again raises NotFoundError.
        """
        self._get_owned_item(session, owner_id, item_id)
        if not self.cart_repo.delete_by_id(session, item_id, owner_id):
            raise NotFoundError("Item not found")
        logger.debug("Removed item %s", item_id)

    def clear(self, session: Session, owner_id: uuid.UUID) -> int:
        """
        Remove every item from the owner's cart.

        Returns the number of rows removed; an empty cart is not an error.
        """
        removed = self.cart_repo.delete_all_by_owner(session, owner_id)
        logger.debug("Cleared cart for owner %s (%d items)", owner_id, removed)
        return removed
