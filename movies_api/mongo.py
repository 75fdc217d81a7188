from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection

from movies_api.config import Settings
from movies_api.logging import logger


MOVIES_COLLECTION = "movies"


async def connect_to_mongo(settings: Settings) -> AsyncIOMotorClient:
    """
    Создаёт клиента и сразу делает ping: Motor подключается лениво,
    а недоступная база должна ронять процесс на старте, а не на первом запросе.
    """
    client = AsyncIOMotorClient(
        settings.mongo_url,
        serverSelectionTimeoutMS=settings.mongo_timeout_ms,
    )
    try:
        await client.admin.command("ping")
    except Exception:
        client.close()
        raise
    logger.info("MongoDB connected: {}/{}", settings.mongo_url, settings.mongo_db)
    return client


def close_mongo(client: AsyncIOMotorClient | None) -> None:
    if client is not None:
        client.close()
        logger.info("MongoDB connection closed")


def get_movies_collection(request: Request) -> AsyncIOMotorCollection:
    return request.app.state.movies
