# cart_api/domain/errors.py
from typing import Any, Dict


class CartError(Exception):
    """
    Bazowy blad domeny koszyka.
    kind jest stabilnym tagiem dla klienta (agenta), detail jest dla czlowieka.
    """

    kind = "cart_error"
    status_code = 400

    def __init__(self, detail: str, **extra: Any):
        super().__init__(detail)
        self.detail = detail
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "detail": self.detail, **self.extra}


class InvalidInputError(CartError):
    kind = "invalid_input"
    status_code = 400


class NotFoundError(CartError):
    kind = "not_found"
    status_code = 404


class IdentityMismatchError(CartError):
    kind = "identity_mismatch"
    status_code = 409

    def __init__(self, product_id: int, product_name: str, expected_name: str):
        super().__init__(
            f"Product ID {product_id} is '{product_name}', not '{expected_name}'. "
            f"Search for the correct ID.",
            product_id=product_id,
            product_name=product_name,
            expected_name=expected_name,
        )


class CartClosedError(CartError):
    kind = "cart_closed"
    status_code = 409


class MissingReferenceError(CartError):
    kind = "missing_reference"
    status_code = 400


class TransientError(CartError):
    kind = "transient"
    status_code = 503
