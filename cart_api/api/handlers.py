# cart_api/api/handlers.py
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cart_api.domain.errors import CartError
from cart_api.utils.logging import get_logger

logger = get_logger(__name__)


async def cart_error_handler(request: Request, exc: CartError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.kind}: {exc.detail}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.kind}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = [
        {"field": ".".join(str(p) for p in e.get("loc", ())[1:]), "message": e.get("msg")}
        for e in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "kind": "invalid_input",
                "detail": "Missing data or wrong types",
                "problems": problems,
            }
        },
    )


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
    )
    return response


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CartError, cart_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
