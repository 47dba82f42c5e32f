"""
Storefront Application

Cart, pricing and checkout API for the storefront. Carts are keyed by the
signed-in user or by an anonymous session; checkout turns a cart into an
order in one step.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .core.config import settings
from .core.errors import StorefrontError
from .routes import admin_router, cart_router, orders_router, products_router
from .security.identity import IdentityMiddleware, token_directory
from .services.catalog_client import catalog_gateway

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"{settings.app_name} starting up...")
    logger.info(f"Catalog: {settings.catalog_base_url or 'local seed catalog'}")
    logger.info(f"Storage timeout: {settings.storage_timeout_seconds}s")
    yield
    logger.info(f"{settings.app_name} shutting down...")
    await catalog_gateway.close()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Storefront cart, pricing and checkout API",
    version=__version__,
    lifespan=lifespan,
)

# Identity middleware
app.add_middleware(IdentityMiddleware, directory=token_directory, config=settings)

# CORS middleware (outermost)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.code}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(orders_router)
app.include_router(admin_router)


@app.get("/")
async def home():
    """Service index"""
    return {
        "message": f"{settings.app_name} API",
        "docs": "/docs",
        "endpoints": {
            "products": "/api/products",
            "cart": "/api/cart",
            "orders": "/api/orders",
            "admin": "/api/admin/orders",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "storefront"}


def run() -> None:
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
