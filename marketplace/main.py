from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace.core.config import Settings, get_settings
from marketplace.core.container import Marketplace, connect
from marketplace.core.errors import (
    MarketplaceError,
    ProductNotFound,
    RemoteFailure,
    Unauthenticated,
    ValidationFailure,
)

# Routers
from marketplace.routers.auth import router as auth_router
from marketplace.routers.cart import router as cart_router
from marketplace.routers.notifications import router as notifications_router
from marketplace.routers.products import router as products_router
from marketplace.routers.wishlist import router as wishlist_router

logger = logging.getLogger("uvicorn")

ERROR_STATUS: dict[type[MarketplaceError], int] = {
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    ValidationFailure: status.HTTP_400_BAD_REQUEST,
    ProductNotFound: status.HTTP_404_NOT_FOUND,
    RemoteFailure: status.HTTP_502_BAD_GATEWAY,
}


async def handle_marketplace_error(request: Request, exc: MarketplaceError):
    code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    return JSONResponse(status_code=code, content={"detail": exc.message})


def create_app(
    settings: Settings | None = None,
    marketplace: Marketplace | None = None,
) -> FastAPI:
    """
    Build the storefront API.

    Args:
        settings: defaults to get_settings().
        marketplace: pre-built components (tests); when omitted the
            lifespan connects to the Supabase project from settings.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Startup:
          - Connect to Supabase and wire the storefront components.
          - Publish the persisted session so cart/wishlist start loading.

        Shutdown:
          - Drop the auth-state subscription.
        """
        logger.info("🔄 Startup: Connecting to Supabase...")
        try:
            app.state.marketplace = marketplace or await connect(settings)
            await app.state.marketplace.start()
            logger.info("✅ Startup: Supabase client ready, session restored.")
        except Exception as e:
            logger.error(f"❌ Startup: Supabase connection FAILED: {e}")
            raise
        yield
        await app.state.marketplace.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(MarketplaceError, handle_marketplace_error)

    # Versioned API prefix, e.g. /api/v1
    app.include_router(auth_router, prefix=settings.API_V1_STR)
    app.include_router(products_router, prefix=settings.API_V1_STR)
    app.include_router(cart_router, prefix=settings.API_V1_STR)
    app.include_router(wishlist_router, prefix=settings.API_V1_STR)
    app.include_router(notifications_router, prefix=settings.API_V1_STR)

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "mini-marketplace"}

    return app
