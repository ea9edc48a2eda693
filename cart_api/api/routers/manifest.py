# cart_api/api/routers/manifest.py
from fastapi import APIRouter

router = APIRouter(tags=["manifest"])


def _params(properties: dict, required: list[str] | None = None) -> dict:
    schema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


TOOLS = [
    {
        "name": "search_products",
        "description": "Search products by name or category (e.g. 'trousers', 'blue shirt'). "
        "Returns a short list with ID, name and price.",
        "method": "GET",
        "path": "/products",
        "parameters": _params({
            "search": {"type": "string", "description": "Search term"},
            "limit": {"type": "integer", "description": "Max results"},
            "offset": {"type": "integer", "description": "Results to skip"},
        }),
    },
    {
        "name": "get_product_details",
        "description": "Get detailed information about one product.",
        "method": "GET",
        "path": "/products",
        "parameters": _params(
            {"id": {"type": "integer", "description": "Product ID"}},
            ["id"],
        ),
    },
    {
        "name": "create_cart",
        "description": "Create a new cart, or resume the customer's active cart when a phone is given.",
        "method": "POST",
        "path": "/cart",
        "parameters": _params({
            "user_phone": {"type": "string", "description": "Customer phone (optional)"},
        }),
    },
    {
        "name": "close_cart",
        "description": "Close the cart, finish the purchase and return the summary. "
        "Use only when the customer confirms.",
        "method": "POST",
        "path": "/cart/close",
        "parameters": _params({
            "cart_id": {"type": "string", "description": "Cart ID to close"},
            "user_phone": {"type": "string", "description": "Customer phone, used when cart_id is unknown"},
        }),
    },
    {
        "name": "add_to_cart",
        "description": "Add a product to the cart, or increase its quantity.",
        "method": "POST",
        "path": "/cart/items",
        "parameters": _params(
            {
                "cart_id": {"type": "string", "description": "Cart ID"},
                "product_id": {"type": "integer", "description": "Product ID to add"},
                "quantity": {"type": "integer", "description": "Quantity (default 1)"},
                "expected_name": {
                    "type": "string",
                    "description": "Product name you expect (e.g. 'Jacket'). ALWAYS send it to catch wrong IDs.",
                },
            },
            ["cart_id", "product_id"],
        ),
    },
    {
        "name": "update_cart_item",
        "description": "Set the exact quantity of a product in the cart. 0 removes it.",
        "method": "PATCH",
        "path": "/cart/items",
        "parameters": _params(
            {
                "cart_id": {"type": "string", "description": "Cart ID"},
                "product_id": {"type": "integer", "description": "Product ID"},
                "quantity": {"type": "integer", "description": "New exact quantity (e.g. 3)"},
                "expected_name": {"type": "string", "description": "Expected product name (ID check)."},
            },
            ["cart_id", "product_id", "quantity"],
        ),
    },
    {
        "name": "get_cart",
        "description": "Get the current cart content and total.",
        "method": "GET",
        "path": "/cart",
        "parameters": _params(
            {"id": {"type": "string", "description": "Cart ID"}},
            ["id"],
        ),
    },
    {
        "name": "remove_from_cart",
        "description": "Remove a product from the cart.",
        "method": "DELETE",
        "path": "/cart/items",
        "parameters": _params(
            {
                "cart_id": {"type": "string", "description": "Cart ID"},
                "product_id": {"type": "integer", "description": "Product ID to remove"},
            },
            ["cart_id", "product_id"],
        ),
    },
]


@router.get("/manifest")
def manifest():
    return {"tools": TOOLS}
