#cart_api/api/routers/carts.py
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from cart_api.data.database import get_db
from cart_api.domain.schemas import (
    CreateCartIn,
    CreateCartOut,
    ItemIn,
    ItemQuantityIn,
    CloseCartIn,
    ItemAddedOut,
    ItemQuantityOut,
    ItemRemovedOut,
    CartOut,
    ClosedCartOut,
    INT32_MAX,
)
from cart_api.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db=db)


@router.post("", response_model=CreateCartOut)
def create_cart(
    response: Response,
    payload: CreateCartIn | None = None,
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    result = svc.resume_or_create_cart(payload.user_phone if payload else None)

    if result["resumed"]:
        result["message"] = "Active cart resumed"
    else:
        response.status_code = status.HTTP_201_CREATED
        result["message"] = "New cart created"
    return result


@router.get("", response_model=CartOut)
def get_cart(
    id: str = Query(..., min_length=1, description="ID koszyka"),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return svc.get_cart(id)


@router.post("/items", response_model=ItemAddedOut)
def add_item(payload: ItemIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    return svc.add_item(
        cart_id=payload.cart_id,
        product_id=payload.product_id,
        quantity=payload.quantity,
        expected_name=payload.expected_name,
    )


@router.patch("/items", response_model=ItemQuantityOut, response_model_exclude_none=True)
def set_item_quantity(payload: ItemQuantityIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    return svc.set_item_quantity(
        cart_id=payload.cart_id,
        product_id=payload.product_id,
        quantity=payload.quantity,
        expected_name=payload.expected_name,
    )


@router.delete("/items", response_model=ItemRemovedOut)
def remove_item(
    cart_id: str = Query(..., min_length=1),
    product_id: int = Query(..., gt=0, le=INT32_MAX),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    return svc.remove_item(cart_id, product_id)


@router.post("/close", response_model=ClosedCartOut)
def close_cart(
    cart_id: str | None = Query(None),
    payload: CloseCartIn | None = None,
    db: Session = Depends(get_db),
):
    # cart_id z query, a jak go nie ma to z body
    body = payload or CloseCartIn()
    svc = get_service(db)
    result = svc.close_cart(cart_id=cart_id or body.cart_id, identity=body.user_phone)
    result["message"] = "Purchase completed"
    return result
