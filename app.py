#!/usr/bin/env python3
"""
Main entry point for the short link service.

Concurrency: requests are served with async I/O (FastAPI + asyncpg pool +
redis.asyncio). Click counting runs as background tasks and never delays a
redirect.

Usage:
    python app.py

Environment variables:
    DATABASE_URL - postgresql://... or memory:// (default)
    DATABASE_CREATE_TABLES - Set to 'true' to create the links table on startup
    REDIS_URL - Redis connection URL (optional)
    BASE_URL / SHORT_DOMAIN - Base URL for short links
    ADMIN_API_KEY - Require X-API-Key on admin endpoints
    PORT - Port to listen on
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from shortlinks.bootstrap import (
    create_admin,
    create_cache,
    create_domain_checker,
    create_resolver,
    create_store,
)
from shortlinks.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build components on startup, release them on shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting short link service...")

    store = create_store(config, logger=logger)
    await store.initialize()

    cache = await create_cache(config, logger=logger)
    if cache is None:
        logger.info("Lookup cache disabled")

    app.state.store = store
    app.state.cache = cache
    app.state.resolver = create_resolver(config, store, cache, logger=logger)
    app.state.admin = create_admin(store, cache, logger=logger)

    checker = create_domain_checker(config, logger=logger)
    app.state.domain_checker = checker
    if checker is not None:
        checker.start()

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down short link service...")

    if checker is not None:
        await checker.stop()
    await app.state.resolver.drain()
    await app.state.admin.close()

    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Short Link Service")
    logger.info(f"Configuration: {config.safe_dump()}")

    app = create_app(config=config, lifespan=lifespan)
    app.state.logger = logger

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=False,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
