from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from movies_api.config import Settings, settings as default_settings
from movies_api.endpoints import movies
from movies_api.logging import access_logger, add_request_log, logger, remove_request_log
from movies_api.mongo import MOVIES_COLLECTION, close_mongo, connect_to_mongo
from movies_api.schemas import violations


GREETING = "Welcome to the Movies Management API!"


def create_app(
    settings: Settings = default_settings,
    database: AsyncIOMotorDatabase | None = None,
) -> FastAPI:
    """
    database можно передать готовым (тесты); иначе подключаемся по settings.mongo_url.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log_sink = add_request_log(settings.log_file)
        client = None
        try:
            db = database
            if db is None:
                try:
                    client = await connect_to_mongo(settings)
                except PyMongoError as e:
                    logger.error("MongoDB connection error: {}", e)
                    raise SystemExit(1) from e
                db = client[settings.mongo_db]
            app.state.movies = db[MOVIES_COLLECTION]
            yield
        finally:
            close_mongo(client)
            await logger.complete()
            remove_request_log(log_sink)

    app = FastAPI(
        title="Movies Management API",
        version="1.0.0",
        description="A simple API to manage movies",
        servers=[{"url": f"http://localhost:{settings.port}"}],
        docs_url="/api-docs",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.include_router(movies.router)

    @app.get("/", response_class=PlainTextResponse, tags=["meta"])
    async def home():
        return GREETING

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"errors": violations(exc.errors())})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # роут не найден (или метод не тот) -> единый 404
        if exc.status_code in (404, 405) and exc.detail in ("Not Found", "Method Not Allowed"):
            return JSONResponse(
                status_code=404,
                content={"error": "Not Found", "message": f"Cannot {request.method} {request.url.path}"},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.middleware("http")
    async def error_middleware(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.opt(exception=e).error("{} {} failed: {}", request.method, request.url.path, e)
            return JSONResponse(status_code=500, content={"error": "Server Error", "message": str(e)})

    # добавлен последним -> выполняется первым
    @app.middleware("http")
    async def request_log_middleware(request: Request, call_next):
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
        access_logger.info("{} {}", request.method, path)
        return await call_next(request)

    return app


app = create_app()
