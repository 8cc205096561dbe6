"""
QKart - Application Entry Point
================================
FastAPI app initialization, logging, error mapping, and router registration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import settings
from config.database import Base, engine
from common.exceptions import QKartError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("qkart.app")


# ==========================================
# Import ALL models so Base can see them
# ==========================================
from modules.user.models import User  # noqa: F401,E402
from modules.catalog.models import Product  # noqa: F401,E402
from modules.cart.models import Cart, CartItem  # noqa: F401,E402

# ==========================================
# Import routers
# ==========================================
from modules.auth.routes import router as auth_router  # noqa: E402
from modules.cart.routes import router as cart_router  # noqa: E402


@asynccontextmanager
async def lifespan(app):
    # Auto-create any missing tables (safe for existing tables)
    Base.metadata.create_all(bind=engine)
    logger.info("QKart started")
    yield
    logger.info("QKart stopped")


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title="QKart",
    description="Cart & checkout backend",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)


# ==========================================
# Exception handler: business errors → JSON
# ==========================================
@app.exception_handler(QKartError)
async def qkart_exception_handler(request: Request, exc: QKartError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(auth_router)
app.include_router(cart_router)
