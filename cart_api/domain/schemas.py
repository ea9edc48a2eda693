# cart_api/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, PlainSerializer
from typing import Annotated, List
from decimal import Decimal

# zakres kolumny INTEGER w bazie
INT32_MAX = 2**31 - 1

# kwoty jako liczby JSON z dwoma miejscami po przecinku
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(round(v, 2)), return_type=float),
]


class CreateCartIn(BaseModel):
    """Schema dla tworzenia / wznawiania koszyka."""

    # pusty telefon = koszyk anonimowy, normalizuje serwis
    user_phone: str | None = Field(
        None, max_length=64, description="Telefon klienta (opcjonalny)"
    )


class CreateCartOut(BaseModel):
    cart_id: str
    status: str
    resumed: bool
    message: str


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    cart_id: str = Field(..., min_length=1, description="ID koszyka")
    product_id: int = Field(..., gt=0, le=INT32_MAX, description="ID produktu (musi być > 0)")
    quantity: int = Field(1, ge=-INT32_MAX, le=INT32_MAX, description="Ilość do dodania (domyślnie 1)")
    expected_name: str | None = Field(None, description="Nazwa oczekiwana przez agenta")


class ItemQuantityIn(BaseModel):
    """Schema dla ustawienia dokładnej ilości produktu."""

    cart_id: str = Field(..., min_length=1, description="ID koszyka")
    product_id: int = Field(..., gt=0, le=INT32_MAX, description="ID produktu (musi być > 0)")
    quantity: int = Field(..., ge=-INT32_MAX, le=INT32_MAX, description="Nowa ilość, <= 0 usuwa pozycję")
    expected_name: str | None = Field(None, description="Nazwa oczekiwana przez agenta")


class CloseCartIn(BaseModel):
    cart_id: str | None = None
    user_phone: str | None = None


class ItemAddedOut(BaseModel):
    status: str = "ok"
    cart_id: str
    product_id: int
    product_name: str
    quantity: int
    total: Money


class ItemQuantityOut(BaseModel):
    status: str = "ok"
    cart_id: str
    product_id: int
    deleted: bool = False
    quantity: int | None = None


class ItemRemovedOut(BaseModel):
    status: str = "ok"
    cart_id: str
    product_id: int
    removed: bool


class CartLineOut(BaseModel):
    """Pozycja koszyka (response)."""

    product_id: int
    name: str
    price: Money
    quantity: int
    subtotal: Money

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    cart_id: str
    items: List[CartLineOut]
    total: Money
    currency: str


class ClosedCartOut(BaseModel):
    cart_id: str
    status: str
    message: str
    items: List[CartLineOut]
    total: Money


class ProductSummaryOut(BaseModel):
    id: int
    name: str
    price: Money

    model_config = ConfigDict(from_attributes=True)


class ProductOut(ProductSummaryOut):
    description: str | None = None
    stock: int
    category: str | None = None


class ProductListOut(BaseModel):
    products: List[ProductSummaryOut]
