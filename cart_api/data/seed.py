# cart_api/data/seed.py
from decimal import Decimal

from sqlalchemy.orm import Session

from cart_api.data.models.product import ProductModel
from cart_api.repos.product_repo import ProductRepo
from cart_api.utils.settings import SEED_CATALOG
from cart_api.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_PRODUCTS = [
    (1, "Men's Blue Jacket", "Water resistant jacket, size M", "89.90", 12, "jackets"),
    (2, "Women's Black Jacket", "Wool blend coat, size S", "119.00", 8, "jackets"),
    (3, "Classic White Shirt", "Cotton shirt, size L", "34.50", 25, "shirts"),
    (4, "Light Blue Shirt", "Linen shirt, size M", "39.00", 18, "shirts"),
    (5, "Slim Fit Jeans", "Dark denim, size 32", "59.99", 30, "trousers"),
    (6, "Cargo Trousers", "Khaki cotton, size 34", "49.90", 14, "trousers"),
    (7, "Red Scarf", "Knitted scarf", "19.99", 40, "accessories"),
    (8, "Winter Boots", "Leather boots, size 42", "129.00", 10, "footwear"),
    (9, "Running Sneakers", "Mesh sneakers, size 41", "74.00", 22, "footwear"),
    (10, "Wool Socks Pack", "Three pairs, one size", "12.50", 60, "accessories"),
]


def seed_catalog(db: Session, force: bool = False) -> int:
    # tylko gdy katalog pusty
    if not (SEED_CATALOG or force):
        return 0
    if ProductRepo(db).count() > 0:
        return 0

    for pid, name, description, price, stock, category in DEMO_PRODUCTS:
        db.add(
            ProductModel(
                id=pid,
                name=name,
                description=description,
                price=Decimal(price),
                stock=stock,
                category=category,
            )
        )
    db.commit()

    logger.info(f"Seeded {len(DEMO_PRODUCTS)} demo products")
    return len(DEMO_PRODUCTS)
