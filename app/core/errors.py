# app/core/errors.py
"""
Error kinds raised by the cart core.

Services and repositories raise these instead of HTTPException so the
cart logic stays independent of the transport. The HTTP layer maps them
to status codes in app/core/error_handlers.py.
"""


class CartError(Exception):
    """Base class for every cart outcome that is not a success."""

    code = "cart_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnauthorizedError(CartError):
    """Acting identity does not match the target owner."""

    code = "unauthorized"


class InvalidArgumentError(CartError):
    """Malformed identifier or unusable quantity."""

    code = "invalid_argument"


class ProductNotFoundError(CartError):
    """Referenced product does not exist in the catalog."""

    code = "product_not_found"


class NotFoundError(CartError):
    """Line item does not exist or belongs to someone else."""

    code = "not_found"


class TransientError(CartError):
    """Store or catalog I/O failed or timed out. Safe to retry."""

    code = "transient"


class DuplicateLineItemError(Exception):
    """
    Store-level conflict on the (owner_id, product_id) pair.

    Never leaves the cart service: add() turns it into a merge retry.
    """
