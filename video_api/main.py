import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pymongo.errors import PyMongoError

from video_api.core.config import settings
from video_api.core.logger import setup_json_logging, shutdown_logging
from video_api.core.middleware import RequestContextMiddleware
from video_api.core.sentry import init_sentry
from video_api.db.mongo import close_client, get_mongo_db
from video_api.services.repositories.users_repo import UsersRepo

from video_api.api.v1.videos import router as videos_router
from video_api.api.v1.users import router as users_router
from video_api.api.v1.debug import include_debug_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # logging first so startup problems are captured too
    setup_json_logging(service=settings.app_name)
    init_sentry(settings.sentry_dsn, environment=settings.env)

    db = await get_mongo_db()
    try:
        await UsersRepo(db).ensure_indexes()
    except PyMongoError as e:
        logger.warning("ensure_indexes_failed", extra={"err": str(e)})

    try:
        yield
    finally:
        await close_client()
        shutdown_logging()


app = FastAPI(title="Video Service", lifespan=lifespan)

app.add_middleware(RequestContextMiddleware)

# the access middleware already logs every request
logging.getLogger("uvicorn.access").setLevel("WARNING")

include_debug_routes(app)


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(videos_router)
app.include_router(users_router)
