import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from storefront.config import settings
from storefront.database import create_db_and_tables
from storefront.exceptions import register_exception_handlers
from storefront.routes import (
    admin_products,
    auth,
    cart,
    checkout,
    health,
    orders,
    products,
    webhooks,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="Storefront API", lifespan=lifespan)
register_exception_handlers(app)

app.include_router(products.router, tags=["Shop"])
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(cart.router, prefix="/cart", tags=["Cart"])
app.include_router(checkout.router, prefix="/checkout", tags=["Checkout"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(admin_products.router, prefix="/admin", tags=["Admin Products"])
app.include_router(webhooks.router, prefix="/webhooks", tags=["Webhooks"])
app.include_router(health.router, prefix="/health", tags=["Health"])

os.makedirs(settings.upload_dir, exist_ok=True)
app.mount("/images", StaticFiles(directory=settings.upload_dir), name="images")
