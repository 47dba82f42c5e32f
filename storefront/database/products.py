"""Product catalog storage for the storefront"""

from decimal import Decimal
from typing import Optional

from ..models.product import Product, ProductCategory

# Seed catalog
PRODUCTS: dict[str, Product] = {
    "prod-001": Product(
        id="prod-001",
        name="Organic Cotton Crew Tee",
        slug="organic-cotton-crew-tee",
        description="Midweight jersey tee in GOTS-certified organic cotton. Relaxed fit.",
        price=Decimal("30.00"),
        category=ProductCategory.TOPS,
        sizes=["XS", "S", "M", "L", "XL"],
        colors=["white", "black", "sage"],
        image_url="/static/images/crew-tee.jpg",
        stock=120,
        featured=True,
    ),
    "prod-002": Product(
        id="prod-002",
        name="Ribbed Knit Beanie",
        slug="ribbed-knit-beanie",
        description="Soft merino blend beanie with a fold-over cuff.",
        price=Decimal("20.00"),
        category=ProductCategory.ACCESSORIES,
        colors=["charcoal", "rust"],
        image_url="/static/images/beanie.jpg",
        stock=80,
    ),
    "prod-003": Product(
        id="prod-003",
        name="Relaxed Straight Jeans",
        slug="relaxed-straight-jeans",
        description="Rigid 13oz selvedge denim that breaks in with wear.",
        price=Decimal("89.00"),
        original_price=Decimal("110.00"),
        category=ProductCategory.BOTTOMS,
        sizes=["28", "30", "32", "34", "36"],
        colors=["indigo", "black"],
        image_url="/static/images/straight-jeans.jpg",
        stock=45,
        featured=True,
    ),
    "prod-004": Product(
        id="prod-004",
        name="Quilted Field Jacket",
        slug="quilted-field-jacket",
        description="Water-resistant shell with recycled insulation and four patch pockets.",
        price=Decimal("149.00"),
        category=ProductCategory.OUTERWEAR,
        sizes=["S", "M", "L", "XL"],
        colors=["olive", "navy"],
        image_url="/static/images/field-jacket.jpg",
        stock=25,
    ),
    "prod-005": Product(
        id="prod-005",
        name="Canvas Low-Top Sneaker",
        slug="canvas-low-top-sneaker",
        description="Vulcanized rubber sole with a cotton canvas upper.",
        price=Decimal("65.00"),
        category=ProductCategory.FOOTWEAR,
        sizes=["7", "8", "9", "10", "11", "12"],
        colors=["white", "black"],
        image_url="/static/images/low-top.jpg",
        stock=60,
    ),
    "prod-006": Product(
        id="prod-006",
        name="Leather Card Wallet",
        slug="leather-card-wallet",
        description="Vegetable-tanned leather with three card slots.",
        price=Decimal("45.00"),
        category=ProductCategory.ACCESSORIES,
        colors=["tan", "black"],
        image_url="/static/images/card-wallet.jpg",
        stock=0,
    ),
    "prod-007": Product(
        id="prod-007",
        name="Linen Camp Shirt",
        slug="linen-camp-shirt",
        description="Boxy short-sleeve shirt in washed European linen.",
        price=Decimal("58.00"),
        category=ProductCategory.TOPS,
        sizes=["S", "M", "L"],
        colors=["sand"],
        image_url="/static/images/camp-shirt.jpg",
        stock=30,
        active=False,
    ),
}


class ProductDatabase:
    """In-memory product catalog"""

    def __init__(self, products: Optional[dict[str, Product]] = None):
        self.products = dict(PRODUCTS if products is None else products)

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def get_product_by_slug(self, slug: str) -> Optional[Product]:
        return next((p for p in self.products.values() if p.slug == slug), None)

    def search_products(
        self,
        search: Optional[str] = None,
        category: Optional[ProductCategory] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        featured: Optional[bool] = None,
        active_only: bool = True,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Product], int]:
        """
        Search products with filters.

        Returns:
            Tuple of (matching products, total count)
        """
        results = list(self.products.values())

        if search:
            needle = search.lower()
            results = [
                p for p in results
                if needle in p.name.lower() or needle in p.description.lower()
            ]

        if category:
            results = [p for p in results if p.category == category]

        if min_price is not None:
            results = [p for p in results if p.price >= min_price]
        if max_price is not None:
            results = [p for p in results if p.price <= max_price]

        if featured is not None:
            results = [p for p in results if p.featured == featured]

        if active_only:
            results = [p for p in results if p.active]

        total = len(results)
        return results[offset : offset + limit], total

    def upsert(self, product: Product) -> Product:
        """Insert or replace a product"""
        self.products[product.id] = product
        return product

    def reset(self) -> None:
        """Restore the seed catalog"""
        self.products = dict(PRODUCTS)


# Singleton instance
product_db = ProductDatabase()
