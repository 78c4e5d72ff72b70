# app/repositories/product_repo.py
import uuid
from collections.abc import Iterable

from sqlmodel import Session, select

from app.database import store_errors
from app.models.product import Product


class ProductRepository:
    """
    Catalog lookup for the cart.

    - Read-only: the cart never writes products.
    - No FastAPI, no business logic.
    """

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product | None:
        with store_errors(session, "catalog.get_product"):
            return session.get(Product, product_id)

    def get_products(
        self,
        session: Session,
        product_ids: Iterable[uuid.UUID],
    ) -> dict[uuid.UUID, Product]:
        """Batch lookup keyed by id; unknown ids are simply absent."""
        ids = set(product_ids)
        if not ids:
            return {}
        stmt = select(Product).where(Product.id.in_(list(ids)))
        with store_errors(session, "catalog.get_products"):
            return {p.id: p for p in session.exec(stmt).all()}
