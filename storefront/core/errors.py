"""
Storefront error taxonomy.

Every error carries the HTTP status and a stable machine-readable code so
the API layer can render it without knowing the concrete type.
"""

from typing import Any, Iterable, Optional


class StorefrontError(Exception):
    """Base class for all storefront errors"""

    status_code: int = 500
    code: str = "storefront_error"
    retryable: bool = False

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message())
        self.message = message or self.default_message()

    def default_message(self) -> str:
        return "Storefront error"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for an API error body"""
        body: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.retryable:
            body["retryable"] = True
        return body


class InvalidQuantity(StorefrontError):
    status_code = 422
    code = "invalid_quantity"

    def __init__(self, quantity: Any):
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")


class LineNotFound(StorefrontError):
    status_code = 404
    code = "line_not_found"

    def __init__(self, line_id: int):
        self.line_id = line_id
        super().__init__(f"Cart line {line_id} not found")


class IdentityMissing(StorefrontError):
    status_code = 401
    code = "identity_missing"

    def default_message(self) -> str:
        return "Request carries neither an authenticated user nor a session id"


class EmptyCart(StorefrontError):
    status_code = 400
    code = "empty_cart"

    def default_message(self) -> str:
        return "Cart is empty"


class ProductUnavailable(StorefrontError):
    """One or more products referenced by the cart cannot be ordered"""

    status_code = 409
    code = "product_unavailable"

    def __init__(self, product_ids: Iterable[str]):
        self.product_ids = list(product_ids)
        super().__init__(f"Products unavailable: {', '.join(self.product_ids)}")

    @property
    def product_id(self) -> str:
        return self.product_ids[0]

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        body["productId"] = self.product_id
        body["productIds"] = self.product_ids
        return body


class PersistenceError(StorefrontError):
    status_code = 503
    code = "persistence_error"
    retryable = True

    def default_message(self) -> str:
        return "Storage is temporarily unavailable, please retry"


class Timeout(PersistenceError):
    code = "timeout"

    def default_message(self) -> str:
        return "Storage operation timed out, please retry"


class CatalogUnavailable(StorefrontError):
    status_code = 503
    code = "catalog_unavailable"
    retryable = True

    def default_message(self) -> str:
        return "Product catalog is temporarily unavailable, please retry"


class OrderNotFound(StorefrontError):
    status_code = 404
    code = "order_not_found"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class Forbidden(StorefrontError):
    status_code = 403
    code = "forbidden"

    def default_message(self) -> str:
        return "This endpoint requires an administrator"
