"""
FastAPI Application Entry Point

Tomato food ordering backend.

Endpoints:
    - POST /api/user/register, /api/user/login
    - POST /api/order/place, /api/order/razorpay/order,
      /api/order/razorpay/verify, /api/order/user-orders (auth)
    - POST /api/cart/add, /api/cart/remove, /api/cart/get (auth)
    - GET /images/*: uploaded food images
    - GET /health: System health check

Run:
    uvicorn tomato.main:create_app --factory --port 4000
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text

from tomato.core.config import Settings, get_settings, setup_logging
from tomato.core.context import AppContext
from tomato.core.exceptions import register_exception_handlers
from tomato.database import init_db
from tomato.dependencies import get_context
from tomato.routers import cart, order, user
from tomato.schemas import HealthResponse

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; loaded from the environment when omitted
        context: Pre-built context (tests inject their own gateway here)

    Raises:
        pydantic.ValidationError: DATABASE_URL or JWT_SECRET missing
    """
    if context is None:
        settings = settings or get_settings()
        context = AppContext.from_settings(settings)
    settings = context.settings

    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application startup and shutdown events.
        """
        logger.info(f"Starting {settings.app_name} {settings.app_version} ({settings.env_mode.value})")

        await init_db(context.engine)
        logger.info("Database initialized")

        gateway = context.payment_gateway
        if gateway.available:
            logger.info(f"Payment Service: {gateway.provider_name}")
        else:
            logger.warning("Payment Service: unavailable, /api/order/razorpay/* will answer 503")

        yield  # Application runs

        logger.info("Shutting down...")
        await context.close()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.frontend_origins_list,
        allow_origin_regex=settings.frontend_origin_regex,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "token"],
    )

    register_exception_handlers(app, debug=settings.debug)

    uploads = Path(settings.uploads_dir)
    uploads.mkdir(parents=True, exist_ok=True)
    app.mount("/images", StaticFiles(directory=uploads), name="images")

    app.include_router(user.router)
    app.include_router(cart.router)
    app.include_router(order.router)

    @app.get("/", response_class=PlainTextResponse, tags=["Root"])
    async def root() -> str:
        return "API WORKING"

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(ctx: AppContext = Depends(get_context)) -> HealthResponse:
        """Verify the database and report the payment capability."""
        db_status = "healthy"
        try:
            async with ctx.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            db_status = "unhealthy"
            logger.error(f"Database health check failed: {e}")

        gateway = ctx.payment_gateway
        return HealthResponse(
            status="operational" if db_status == "healthy" else "degraded",
            database=db_status,
            payment_service=gateway.provider_name,
            timestamp=datetime.now(),
        )

    return app


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "tomato.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
    )
