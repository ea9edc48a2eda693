# cart_api/api/routers/health.py
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cart_api.data.database import get_db
from cart_api.domain.errors import TransientError

router = APIRouter(tags=["health"])


@router.get("/")
def root():
    return {
        "message": "Cart API for the shopping agent is running",
        "endpoints": [
            "GET /products?search={term}&id={id}",
            "POST /cart",
            "GET /cart?id={cart_id}",
            "POST /cart/items",
            "PATCH /cart/items",
            "DELETE /cart/items?cart_id={cart_id}&product_id={product_id}",
            "POST /cart/close",
            "GET /manifest",
        ],
    }


@router.get("/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise TransientError("Database not reachable", cause=str(e)) from e
    return {"status": "ok", "database": "ok"}
