#!/usr/bin/env python3

"""
Main application entry point for the Histline timeline search service.

Architecture: FastAPI application whose lifespan builds the search pipeline
(database, HTTP client, LLM client, providers) and the dataset lookup once
and shares them through app.state.
"""

import asyncio
import sys

if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

import errno
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from histline.api.http import router as http_router
from histline.config import settings
from histline.dependencies.search import (
    build_dataset_source,
    build_timeline_search_service,
    build_timeline_store,
)
from histline.services.dataset_search import DatasetSearchService
from histline.services.llm_service import create_llm_client
from histline.services.timeline_search import TimelineSearchService
from histline.utils.http_client import create_provider_http_client
from histline.utils.logger import setup_logger

logger = setup_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup...")
    if getattr(app.state, "timeline_search_service", None) is not None:
        logger.info("Using pre-configured timeline search service.")
        yield
        return

    uses_database = settings.timeline_store_backend == "database"
    http_client = None
    llm_client = None
    try:
        if uses_database:
            from histline.db import check_db_connection, init_db

            logger.info("Initializing database...")
            await init_db()
            await check_db_connection()
            logger.info("Database connectivity confirmed.")

        http_client = create_provider_http_client()
        llm_client = create_llm_client()
        if llm_client is None:
            logger.warning("No LLM client available; timelines will have no events.")

        app.state.timeline_search_service = build_timeline_search_service(
            http_client=http_client,
            llm_client=llm_client,
            store=build_timeline_store(),
        )
        app.state.dataset_search_service = DatasetSearchService(build_dataset_source())
    except Exception as e:
        logger.critical(f"Startup error: {e}")
        raise SystemExit(f"Startup failed: {e}") from e

    logger.info("Histline API startup successful.")
    yield

    logger.info("Histline API shutdown...")
    await http_client.aclose()
    if llm_client is not None:
        await llm_client.close()
    if uses_database:
        from histline.db import close_db

        await close_db()
    logger.info("Shutdown complete.")


def create_app(
    search_service: TimelineSearchService | None = None,
    dataset_service: DatasetSearchService | None = None,
) -> FastAPI:
    app = FastAPI(title="Histline API", lifespan=lifespan)
    app.state.timeline_search_service = search_service
    app.state.dataset_search_service = dataset_service

    @app.exception_handler(OSError)
    async def oserror_exception_handler(request: Request, exc: OSError):
        logger.error(f"OSError caught: {exc}, errno: {exc.errno}")
        if exc.errno in [errno.ETIMEDOUT, errno.ECONNREFUSED]:
            logger.error(
                f"Returning 503 due to DB connection issue: {settings.db_unavailable_hint}"
            )
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"detail": settings.db_unavailable_hint},
            )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": f"An unexpected OS error occurred: {exc}"},
        )

    app.include_router(http_router)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    return app


app = create_app()


def main():
    port = int(settings.server_port)
    host = settings.server_host

    logger.info(f"Starting Histline API server on {host}:{port}")

    try:
        uvicorn.run(
            "main:app", host=host, port=port, workers=settings.server_workers
        )
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
