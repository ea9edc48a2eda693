# cart_api/repos/cart_repo.py
from decimal import Decimal
from enum import Enum
from typing import NamedTuple

from sqlalchemy import select, update, delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from cart_api.data.models.cart import CartModel, ACTIVE, CLOSED
from cart_api.data.models.cart_item import CartItemModel
from cart_api.data.models.product import ProductModel
from cart_api.domain.schemas import INT32_MAX


class CartLine(NamedTuple):
    product_id: int
    name: str
    price: Decimal
    quantity: int
    subtotal: Decimal


class ItemChange(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class CartRepo:
    """
    Wiersze koszykow i pozycji.
    Repo tylko flushuje, commit/rollback robi serwis (jedna transakcja na operacje).
    """

    def __init__(self, db: Session, max_quantity: int = INT32_MAX):
        self.db = db
        self.max_quantity = max_quantity

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        try:
            return _INSERTS[dialect]
        except KeyError:
            raise NotImplementedError(
                f"Upsert not supported for dialect {dialect}, use postgresql or sqlite"
            ) from None

    def _item_key(self, cart_id: str, product_id: int):
        return (
            CartItemModel.cart_id == cart_id,
            CartItemModel.product_id == product_id,
        )

    # carts

    def get_cart(self, cart_id: str, for_update: bool = False) -> CartModel | None:
        # populate_existing: status mogl zmienic sie przez bulk update w tej sesji
        stmt = (
            select(CartModel)
            .where(CartModel.id == cart_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            # blokada wiersza koszyka, mutacja i zamkniecie ida po kolei
            stmt = stmt.with_for_update()
        return self.db.execute(stmt).scalar_one_or_none()

    def find_active_cart_by_identity(self, identity: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .where(CartModel.identity == identity, CartModel.status == ACTIVE)
            .order_by(CartModel.created_at.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        ).scalars().first()

    def create_cart(self, identity: str | None = None) -> CartModel:
        cart = CartModel(identity=identity, status=ACTIVE)
        self.db.add(cart)
        # flush od razu, zeby konflikt na unikalnym indeksie wyszedl tutaj
        self.db.flush()
        return cart

    def close_cart(self, cart_id: str) -> None:
        self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id)
            .values(status=CLOSED)
            .execution_options(synchronize_session=False)
        )

    # items

    def get_items(self, cart_id: str) -> list[CartLine]:
        rows = self.db.execute(
            select(
                CartItemModel.product_id,
                ProductModel.name,
                ProductModel.price,
                CartItemModel.quantity,
            )
            .join(ProductModel, ProductModel.id == CartItemModel.product_id)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.product_id)
        ).all()

        return [
            CartLine(
                product_id=r.product_id,
                name=r.name,
                price=Decimal(r.price),
                quantity=r.quantity,
                subtotal=Decimal(r.price) * r.quantity,
            )
            for r in rows
        ]

    def upsert_increment(self, cart_id: str, product_id: int, delta: int) -> int | None:
        """
        quantity += delta jednym poleceniem (INSERT ... ON CONFLICT DO UPDATE).
        Ujemna delta tylko zmniejsza istniejacy wiersz; jesli zejdzie do <= 0,
        wiersz jest usuwany. Zwraca ilosc po zapisie (0 = brak wiersza),
        None gdy suma przekroczylaby max_quantity (wiersz bez zmian).
        """
        if delta > 0:
            ins = self._insert()
            stmt = ins(CartItemModel).values(
                cart_id=cart_id, product_id=product_id, quantity=delta
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[CartItemModel.cart_id, CartItemModel.product_id],
                set_={"quantity": CartItemModel.quantity + stmt.excluded.quantity},
                where=CartItemModel.quantity <= self.max_quantity - stmt.excluded.quantity,
            ).returning(CartItemModel.quantity)
            return self.db.execute(stmt).scalar_one_or_none()

        dropped = self.db.execute(
            delete(CartItemModel)
            .where(*self._item_key(cart_id, product_id), CartItemModel.quantity + delta <= 0)
            .execution_options(synchronize_session=False)
        )
        if dropped.rowcount:
            return 0

        quantity = self.db.execute(
            update(CartItemModel)
            .where(*self._item_key(cart_id, product_id))
            .values(quantity=CartItemModel.quantity + delta)
            .returning(CartItemModel.quantity)
            .execution_options(synchronize_session=False)
        ).scalar_one_or_none()
        return quantity or 0

    def set_exact_quantity(self, cart_id: str, product_id: int, quantity: int) -> ItemChange:
        if quantity <= 0:
            self.remove_item(cart_id, product_id)
            return ItemChange.DELETED

        updated = self.db.execute(
            update(CartItemModel)
            .where(*self._item_key(cart_id, product_id))
            .values(quantity=quantity)
            .execution_options(synchronize_session=False)
        )
        if updated.rowcount:
            return ItemChange.UPDATED

        # wiersz mogl pojawic sie w miedzyczasie, wtedy i tak nadpisujemy
        ins = self._insert()
        stmt = ins(CartItemModel).values(
            cart_id=cart_id, product_id=product_id, quantity=quantity
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[CartItemModel.cart_id, CartItemModel.product_id],
            set_={"quantity": stmt.excluded.quantity},
        )
        self.db.execute(stmt)
        return ItemChange.CREATED

    def remove_item(self, cart_id: str, product_id: int) -> bool:
        res = self.db.execute(
            delete(CartItemModel)
            .where(*self._item_key(cart_id, product_id))
            .execution_options(synchronize_session=False)
        )
        return res.rowcount > 0

    # transakcja

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
