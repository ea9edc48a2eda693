from decimal import Decimal
from functools import wraps
from typing import Dict, Any, Iterable

from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cart_api.data.models.cart import CartModel, CLOSED
from cart_api.data.models.product import ProductModel
from cart_api.domain.errors import (
    CartError,
    CartClosedError,
    IdentityMismatchError,
    InvalidInputError,
    MissingReferenceError,
    NotFoundError,
    TransientError,
)
from cart_api.domain.matching import match_product_name
from cart_api.domain.schemas import INT32_MAX
from cart_api.repos.cart_repo import CartRepo, CartLine, ItemChange
from cart_api.repos.product_repo import ProductRepo
from cart_api.utils.retry import db_retry
from cart_api.utils.settings import CURRENCY
from cart_api.utils.logging import get_logger

logger = get_logger(__name__)


def _rollback_before_retry(retry_state):
    retry_state.args[0].repo.rollback()


def unit_of_work(fn):
    """
    Jedna operacja serwisu = jedna transakcja.
    OperationalError jest ponawiany (tenacity), bledy domeny przechodza dalej,
    kazdy inny blad bazy zamieniamy na TransientError. Zawsze rollback przy bledzie.
    """
    retrying = db_retry(rollback=_rollback_before_retry)(fn)

    @wraps(fn)
    def wrapper(self, *args, **kwargs):
        try:
            return retrying(self, *args, **kwargs)
        except CartError:
            self.repo.rollback()
            raise
        except DataError as e:
            # wartosc poza zakresem kolumny, ponawianie nic nie da
            self.repo.rollback()
            logger.info(f"Odrzucone dane w {fn.__name__}: {e}")
            raise InvalidInputError(
                "Value out of range for storage", cause=f"{e.__class__.__name__}: {e}"
            ) from e
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Blad bazy w {fn.__name__}: {e}")
            raise TransientError(
                "Storage unavailable, safe to retry later",
                cause=f"{e.__class__.__name__}: {e}",
            ) from e

    return wrapper


def _total(items: Iterable[CartLine]) -> Decimal:
    return sum((i.subtotal for i in items), Decimal("0.00"))


def _lines(items: Iterable[CartLine]) -> list[Dict[str, Any]]:
    return [i._asdict() for i in items]


class CartService:
    """
    Use case'y koszyka dla agenta konwersacyjnego.
    commands (create, add, set, remove, close) modyfikuja stan,
    query (get) tylko odczyt i nigdy nie zwraca bledu dla nieznanego koszyka.
    """

    def __init__(self, db: Session, product_repo: ProductRepo | None = None):
        self.repo = CartRepo(db)
        self.products = product_repo or ProductRepo(db)

    # walidacje

    @staticmethod
    def _check_refs(cart_id: str, product_id: int | None = None) -> None:
        if not isinstance(cart_id, str) or not cart_id.strip():
            raise InvalidInputError("cart_id is required")
        if product_id is not None:
            if (
                isinstance(product_id, bool)
                or not isinstance(product_id, int)
                or not 0 < product_id <= INT32_MAX
            ):
                raise InvalidInputError(f"product_id must be an integer between 1 and {INT32_MAX}")

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidInputError("quantity must be an integer")
        if abs(quantity) > INT32_MAX:
            raise InvalidInputError(f"quantity must be between -{INT32_MAX} and {INT32_MAX}")

    def _open_cart(self, cart_id: str) -> CartModel:
        cart = self.repo.get_cart(cart_id, for_update=True)

        if not cart:
            raise NotFoundError(f"Cart {cart_id} not found", cart_id=cart_id)

        if cart.status == CLOSED:
            raise CartClosedError(f"Cart {cart_id} is closed", cart_id=cart_id)

        return cart

    def _product(self, product_id: int, expected_name: str | None) -> ProductModel:
        product = self.products.get_by_id(product_id)

        if not product:
            raise NotFoundError(f"Product {product_id} not found", product_id=product_id)

        if expected_name:
            result = match_product_name(product.name, expected_name)
            if not result.accepted:
                logger.warning(
                    f"ID mismatch: produkt {product_id} to '{product.name}', "
                    f"agent oczekiwal '{expected_name}'"
                )
                raise IdentityMismatchError(product_id, product.name, expected_name)

        return product

    #query - odczyt
    @unit_of_work
    def get_cart(self, cart_id: str) -> Dict[str, Any]:
        self._check_refs(cart_id)

        items = self.repo.get_items(cart_id)
        return {
            "cart_id": cart_id,
            "items": _lines(items),
            "total": _total(items),
            "currency": CURRENCY,
        }

    #commands
    @unit_of_work
    def resume_or_create_cart(self, identity: str | None = None) -> Dict[str, Any]:
        identity = identity.strip() if identity else None
        identity = identity or None

        if identity:
            existing = self.repo.find_active_cart_by_identity(identity)
            if existing:
                logger.info(f"Klient {identity} ma juz aktywny koszyk {existing.id}")
                return {"cart_id": existing.id, "status": existing.status, "resumed": True}

        try:
            created = self.repo.create_cart(identity)
            self.repo.commit()
        except IntegrityError:
            # rownolegly request wygral wyscig na unikalnym indeksie (identity, active)
            self.repo.rollback()
            winner = self.repo.find_active_cart_by_identity(identity) if identity else None
            if not winner:
                raise
            logger.info(f"Wyscig przy tworzeniu koszyka dla {identity}, wznawiam {winner.id}")
            return {"cart_id": winner.id, "status": winner.status, "resumed": True}

        logger.info(f"Utworzono nowy koszyk {created.id} (identity={identity})")
        return {"cart_id": created.id, "status": created.status, "resumed": False}

    @unit_of_work
    def add_item(
        self,
        cart_id: str,
        product_id: int,
        quantity: int = 1,
        expected_name: str | None = None,
    ) -> Dict[str, Any]:
        self._check_refs(cart_id, product_id)
        self._check_quantity(quantity)

        self._open_cart(cart_id)
        product = self._product(product_id, expected_name)

        stored = self.repo.upsert_increment(cart_id, product_id, quantity)
        if stored is None:
            raise InvalidInputError(
                f"Quantity of product {product_id} would exceed {INT32_MAX}",
                cart_id=cart_id,
                product_id=product_id,
            )
        items = self.repo.get_items(cart_id)
        total = _total(items)
        self.repo.commit()

        logger.info(
            f"Produkt {product_id} ({product.name}) +{quantity} w koszyku {cart_id}, "
            f"ilosc {stored}, total {total}"
        )
        return {
            "cart_id": cart_id,
            "product_id": product_id,
            "product_name": product.name,
            "quantity": stored,
            "total": total,
        }

    @unit_of_work
    def set_item_quantity(
        self,
        cart_id: str,
        product_id: int,
        quantity: int,
        expected_name: str | None = None,
    ) -> Dict[str, Any]:
        self._check_refs(cart_id, product_id)
        self._check_quantity(quantity)

        self._open_cart(cart_id)
        self._product(product_id, expected_name)

        change = self.repo.set_exact_quantity(cart_id, product_id, quantity)
        self.repo.commit()

        logger.info(f"Produkt {product_id} w koszyku {cart_id}: {change.value} (ilosc {quantity})")

        if change == ItemChange.DELETED:
            return {"cart_id": cart_id, "product_id": product_id, "deleted": True}
        return {"cart_id": cart_id, "product_id": product_id, "quantity": quantity}

    @unit_of_work
    def remove_item(self, cart_id: str, product_id: int) -> Dict[str, Any]:
        self._check_refs(cart_id, product_id)

        cart = self.repo.get_cart(cart_id, for_update=True)
        if cart and cart.status == CLOSED:
            raise CartClosedError(f"Cart {cart_id} is closed", cart_id=cart_id)

        removed = self.repo.remove_item(cart_id, product_id)
        self.repo.commit()

        logger.info(f"Usuwanie produktu {product_id} z koszyka {cart_id}: removed={removed}")
        return {"cart_id": cart_id, "product_id": product_id, "removed": removed}

    @unit_of_work
    def close_cart(self, cart_id: str | None = None, identity: str | None = None) -> Dict[str, Any]:
        cart = None

        if cart_id:
            cart = self.repo.get_cart(cart_id, for_update=True)
        elif identity:
            active = self.repo.find_active_cart_by_identity(identity.strip())
            if active:
                cart = self.repo.get_cart(active.id, for_update=True)

        if not cart:
            raise MissingReferenceError(
                "No cart to close: pass a valid cart_id or the user_phone of an active cart",
                cart_id=cart_id,
            )

        # snapshot przed zamknieciem, w tej samej transakcji
        items = self.repo.get_items(cart.id)
        total = _total(items)

        if cart.status != CLOSED:
            self.repo.close_cart(cart.id)
            self.repo.commit()
            logger.info(f"Koszyk {cart.id} zamkniety, {len(items)} pozycji, total {total}")
        else:
            logger.info(f"Koszyk {cart.id} byl juz zamkniety")

        return {
            "cart_id": cart.id,
            "status": CLOSED,
            "items": _lines(items),
            "total": total,
        }
