# Database modules

from .products import product_db, ProductDatabase
from .carts import cart_db, CartDatabase, LockedCart
from .orders import order_db, OrderDatabase, OrderTransaction

__all__ = [
    "product_db",
    "ProductDatabase",
    "cart_db",
    "CartDatabase",
    "LockedCart",
    "order_db",
    "OrderDatabase",
    "OrderTransaction",
]
