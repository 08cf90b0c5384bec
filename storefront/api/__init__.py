# storefront/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
import redis
from redis.exceptions import RedisError

from storefront.api.routers import auth, carts, orders, payments, health
from storefront.data.database import Base, create_db_engine, create_session_factory
from storefront.utils.settings import DATABASE_URL, REDIS_URL, JWT_SECRET
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def init_db(engine: Engine) -> None:
    # models have to be imported before create_all
    import storefront.data.models  # noqa: F401

    logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    logger.info("Database tables ready")


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        details = [
            {"field": ".".join(str(p) for p in err["loc"] if p != "body"), "message": err["msg"]}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"error": "Invalid or missing fields", "details": details})

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        logger.error(f"{request.method} {request.url.path} database error: {exc}")
        return JSONResponse(status_code=500, content={"error": "Server error", "details": str(exc)})

    @app.exception_handler(RedisError)
    async def redis_error(request: Request, exc: RedisError):
        logger.error(f"{request.method} {request.url.path} redis error: {exc}")
        return JSONResponse(status_code=500, content={"error": "Server error", "details": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} unhandled error: {exc}")
        return JSONResponse(status_code=500, content={"error": "Server error"})


def create_app(
    engine: Engine | None = None,
    redis_client: redis.Redis | None = None,
    payment_intents=None,
) -> FastAPI:
    """
    Builds the app and its collaborators. Everything a handler needs is put
    on ``app.state`` and reaches it through dependencies, so tests can hand
    in their own engine, redis client and payment API.
    """
    if not JWT_SECRET:
        raise RuntimeError("JWT_SECRET is not set")

    engine = engine or create_db_engine(DATABASE_URL)
    init_db(engine)

    app = FastAPI(
        title="Storefront",
        version="1.0.0",
    )

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.redis = redis_client or redis.Redis.from_url(REDIS_URL, decode_responses=True)
    app.state.payment_intents = payment_intents

    _register_error_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router, prefix="/api")
    app.include_router(carts.router, prefix="/api")
    app.include_router(orders.router, prefix="/api")
    app.include_router(payments.router, prefix="/api")

    return app
