"""
FastAPI Application - Nutrition Service
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from nutrition_service.api import operational, products
from nutrition_service.core.config import Config, config as default_config
from nutrition_service.core.errors import (
    ErrorResponse,
    error_response_handler,
    http_exception_handler,
)
from nutrition_service.core.logger import logger
from nutrition_service.dependencies.context import ServiceContext
from nutrition_service.middleware import CorrelationIdMiddleware


def create_app(context: Optional[ServiceContext] = None, config: Config = default_config) -> FastAPI:
    """
    Build the application. With an explicit `context` no connections are
    opened at startup; otherwise one is built from `config` in the lifespan.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_context = getattr(app.state, "context", None) is None
        if owns_context:
            logger.info("Starting Nutrition Service...")
            app.state.context = await ServiceContext.create(config)
            logger.info(
                "Nutrition Service started successfully",
                metadata={
                    "service_name": config.service_name,
                    "version": config.service_version,
                    "environment": config.environment,
                    "port": config.port,
                },
            )

        yield

        if owns_context:
            logger.info("Shutting down Nutrition Service...")
            await app.state.context.close()
            app.state.context = None

    app = FastAPI(
        title="Nutrition Service",
        description="Product nutrition data with image storage and nutrient lookup",
        version=config.service_version,
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(CorrelationIdMiddleware, header=config.correlation_id_header)

    app.add_exception_handler(ErrorResponse, error_response_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "Request validation error",
            metadata={"event": "validation_error", "errors": exc.errors()},
        )
        return JSONResponse(
            status_code=422,
            content={"error": "Validation error", "details": exc.errors()},
        )

    app.include_router(operational.router, tags=["operational"])
    app.include_router(products.router, prefix="/products", tags=["products"])
    return app
