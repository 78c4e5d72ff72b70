"""
Store and catalog accessors: referential checks, uniqueness and error translation.
"""
import uuid
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import (
    DuplicateLineItemError,
    InvalidArgumentError,
    ProductNotFoundError,
    TransientError,
)
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository


@pytest.fixture
def repo():
    return CartRepository()


def _insert(repo, session, owner, product, quantity=1):
    return repo.insert(
        session,
        owner_id=owner.id,
        product_id=product.id,
        quantity=quantity,
        price_snapshot=product.price,
    )


def test_insert_sets_timestamps(session, repo, alice, cake):
    item = _insert(repo, session, alice, cake)
    assert item.created_at is not None
    assert item.updated_at is not None
    assert item.price_snapshot == Decimal("10.00")


def test_duplicate_owner_product_pair(session, repo, alice, cake):
    _insert(repo, session, alice, cake)
    with pytest.raises(DuplicateLineItemError):
        _insert(repo, session, alice, cake)
    assert len(repo.find_all_by_owner(session, alice.id)) == 1


def test_insert_unknown_owner(session, repo, cake):
    with pytest.raises(InvalidArgumentError):
        repo.insert(
            session,
            owner_id=uuid.uuid4(),
            product_id=cake.id,
            quantity=1,
            price_snapshot=cake.price,
        )


def test_insert_unknown_product(session, repo, alice):
    with pytest.raises(ProductNotFoundError):
        repo.insert(
            session,
            owner_id=alice.id,
            product_id=uuid.uuid4(),
            quantity=1,
            price_snapshot=Decimal("1.00"),
        )


def test_increment_is_relative(session, repo, alice, cake):
    item = _insert(repo, session, alice, cake, quantity=2)
    assert repo.increment_quantity(session, item.id, 3) is True
    assert repo.find_by_id(session, item.id).quantity == 5


def test_increment_missing_row(session, repo):
    assert repo.increment_quantity(session, uuid.uuid4(), 1) is False


def test_update_quantity_is_scoped_to_owner(session, repo, alice, bob, cake):
    item = _insert(repo, session, alice, cake)
    assert repo.update_quantity(session, item.id, bob.id, 9) is False
    assert repo.find_by_id(session, item.id).quantity == 1


def test_delete_all_by_owner_counts_rows(session, repo, alice, cake, tart):
    _insert(repo, session, alice, cake)
    _insert(repo, session, alice, tart)
    assert repo.delete_all_by_owner(session, alice.id) == 2
    assert repo.delete_all_by_owner(session, alice.id) == 0


def test_get_products_batches(session, cake, tart):
    products = ProductRepository().get_products(session, [cake.id, tart.id, uuid.uuid4()])
    assert set(products) == {cake.id, tart.id}


def test_get_products_with_no_ids(session):
    assert ProductRepository().get_products(session, []) == {}


def test_connection_failure_is_transient(session, monkeypatch):
    def broken_get(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("server closed the connection"))

    monkeypatch.setattr(session, "get", broken_get)

    with pytest.raises(TransientError):
        ProductRepository().get_product(session, uuid.uuid4())
