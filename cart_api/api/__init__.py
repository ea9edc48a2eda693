# cart_api/api/__init__.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cart_api.api.handlers import log_requests, register_exception_handlers
from cart_api.api.routers import carts, health, manifest, products
from cart_api.utils.settings import CORS_ORIGINS
from cart_api.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def bootstrap(app: FastAPI):
    from cart_api.data.database import SessionLocal, init_db
    from cart_api.data.seed import seed_catalog

    init_db()
    logger.info("Database tables ready")

    db = SessionLocal()
    try:
        seed_catalog(db)
    finally:
        db.close()
    yield


def create_app(init_storage: bool = True) -> FastAPI:
    app = FastAPI(
        title="Cart API",
        version="1.0.0",
        lifespan=bootstrap if init_storage else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["Content-Length"],
        max_age=600,
    )
    app.middleware("http")(log_requests)
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(manifest.router)
    app.include_router(products.router)
    app.include_router(carts.router)

    return app
