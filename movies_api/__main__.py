import uvicorn

from movies_api.config import settings
from movies_api.logging import logger, setup_console


def main():
    setup_console(settings.log_level)
    logger.info("Server is running on http://{}:{}", settings.host, settings.port)
    uvicorn.run("movies_api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
