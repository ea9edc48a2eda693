# cart_api/repos/product_repo.py
from sqlalchemy import select, or_, func
from sqlalchemy.orm import Session

from cart_api.data.models.product import ProductModel


class ProductRepo:
    """Odczyt katalogu, bez cache - kazde wywolanie to nowe zapytanie."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, product_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.id == product_id)
        ).scalar_one_or_none()

    def search(self, term: str | None, limit: int, offset: int = 0) -> list[ProductModel]:
        stmt = select(ProductModel)

        if term:
            like = f"%{term}%"
            stmt = stmt.where(
                or_(ProductModel.name.ilike(like), ProductModel.category.ilike(like))
            )

        stmt = stmt.order_by(ProductModel.id).limit(limit).offset(offset)
        return list(self.db.execute(stmt).scalars().all())

    def count(self) -> int:
        return self.db.execute(select(func.count(ProductModel.id))).scalar_one()
