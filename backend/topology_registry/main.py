"""FastAPI application factory and configuration."""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from topology_registry.api import health, instances, records
from topology_registry.api.errors import register_exception_handlers
from topology_registry.config import settings
from topology_registry.context import RegistryContext, build_context

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logging.getLogger("sqlalchemy").setLevel(logging.ERROR)
logging.getLogger("uvicorn.access").setLevel(logging.ERROR)  # Suppress HTTP access logs
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("kubernetes").setLevel(logging.WARNING)
logging.getLogger("topology_registry").setLevel(settings.LOG_LEVEL.upper())

logger = logging.getLogger(__name__)


def create_app(context: Optional[RegistryContext] = None) -> FastAPI:
    """Create and configure FastAPI application.

    ``context`` replaces the clients built from settings, e.g. in tests.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ctx = context or build_context(settings)
        app.state.context = ctx
        # Buckets must exist before any request is served.
        await ctx.store.init_buckets()
        logger.info("Record store buckets initialized")
        yield
        await ctx.close()

    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Application, service and instance registry with deployment",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    # Middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Routes
    app.include_router(health.router)
    app.include_router(records.applications)
    app.include_router(records.services)
    app.include_router(instances.router)
    app.include_router(records.manifests)

    return app


if __name__ == "__main__":
    import uvicorn
    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=3000)
