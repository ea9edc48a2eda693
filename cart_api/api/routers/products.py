# cart_api/api/routers/products.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cart_api.data.database import get_db
from cart_api.domain.errors import NotFoundError
from cart_api.domain.schemas import ProductOut, ProductListOut, ProductSummaryOut, INT32_MAX
from cart_api.repos.product_repo import ProductRepo
from cart_api.utils.settings import CATALOG_PAGE_SIZE, CATALOG_MAX_PAGE_SIZE

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=ProductOut | ProductListOut)
def get_products(
    search: str = Query("", description="Fraza: nazwa albo kategoria"),
    id: int | None = Query(None, gt=0, le=INT32_MAX, description="Szczegoly jednego produktu"),
    limit: int = Query(CATALOG_PAGE_SIZE, ge=1, le=CATALOG_MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    repo = ProductRepo(db)

    if id is not None:
        product = repo.get_by_id(id)
        if not product:
            raise NotFoundError(f"Product {id} not found", product_id=id)
        return ProductOut.model_validate(product)

    products = repo.search(search.strip(), limit=limit, offset=offset)
    return ProductListOut(products=[ProductSummaryOut.model_validate(p) for p in products])
