# storefront/main.py
from fastapi import FastAPI
import uvicorn

from storefront.api.errors import register_exception_handlers
from storefront.api.routers import carts, coupons, health, notifications, orders, payments, taxes, users
from storefront.data.database import Base, engine
from storefront.data import models  # noqa: F401  registers every table on Base.metadata
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def init_db() -> None:
    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=engine)


def create_app() -> FastAPI:
    init_db()

    app = FastAPI(
        title="Storefront Checkout Service",
        version="1.0.0",
    )
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(carts.router)
    app.include_router(coupons.router)
    app.include_router(taxes.router)
    app.include_router(orders.router)
    app.include_router(payments.router)
    app.include_router(notifications.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
