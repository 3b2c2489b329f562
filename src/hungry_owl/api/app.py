"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hungry_owl.api.inventory import router as inventory_router
from hungry_owl.api.recipes import router as recipes_router
from hungry_owl.api.shopping import router as shopping_router
from hungry_owl.api.users import router as users_router
from hungry_owl.app_logging import configure_logging
from hungry_owl.config import parse_allowed_origins
from hungry_owl.containers import AppContainer
from hungry_owl.domain.errors import (
    InvalidQuantityError,
    InventoryConflictError,
    NotFoundError,
    RecipeGenerationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Hungry Owl", lifespan=lifespan)
    app.state.container = container

    origins = parse_allowed_origins(container.settings.allowed_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(users_router)
    app.include_router(inventory_router)
    app.include_router(recipes_router)
    app.include_router(shopping_router)

    @app.exception_handler(NotFoundError)
    async def not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(InvalidQuantityError)
    async def invalid_quantity(
        _request: Request, exc: InvalidQuantityError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(InventoryConflictError)
    async def inventory_conflict(
        _request: Request, exc: InventoryConflictError
    ) -> JSONResponse:
        logger.warning("Inventory write conflict: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(RecipeGenerationError)
    async def recipe_failed(
        _request: Request, exc: RecipeGenerationError
    ) -> JSONResponse:
        logger.warning("Recipe generation failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
