from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from core.config import settings
from model.database import create_db_and_tables, engine
from service.gateway import GenerationGateway
from service.image_store import LocalImageStore, SqlKeyValueStorage


@asynccontextmanager
async def lifespan(app: FastAPI):
    # === 시작 ===
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION}")

    create_db_and_tables()
    logger.info(f"Storage ready ({settings.DATABASE_URL}, key={settings.STORAGE_KEY})")

    app.state.image_store = LocalImageStore(SqlKeyValueStorage(engine), settings.STORAGE_KEY)
    app.state.gateway = GenerationGateway.from_settings(settings)

    if app.state.gateway.configured:
        logger.info(
            f"OpenAI ready (image={settings.IMAGE_MODEL}, text={settings.TEXT_MODEL}, "
            f"retries={settings.RETRY_MAX_ATTEMPTS}, delay={settings.RETRY_DELAY_MS}ms)"
        )
    else:
        logger.warning("OPENAI_API_KEY not set, generation endpoints will return 401")

    yield

    # === 종료 ===
    if app.state.gateway.client is not None:
        await app.state.gateway.client.close()
    logger.info("Shutting down")
