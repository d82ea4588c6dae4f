import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import models
from .config import settings
from .errors import DuplicateEntryError, duplicate_entry_handler
from .logging_config import setup_logging
from .routers import albums, artists, auth, songs, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 最初の起動時にDBとテーブルを作成
    models.create_db_and_tables()
    logger.info("Database ready (%s)", models.engine.url.render_as_string(hide_password=True))
    yield


def create_app() -> FastAPI:
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        description="アーティスト・アルバム・楽曲を管理する音楽カタログAPI",
        lifespan=lifespan,
    )

    app.add_exception_handler(DuplicateEntryError, duplicate_entry_handler)

    app.include_router(artists.router, prefix="/api")
    app.include_router(albums.router, prefix="/api")
    app.include_router(songs.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")
    app.include_router(users.router, prefix="/api")

    @app.get("/")
    def root():
        return {"message": settings.project_name}

    return app


app = create_app()
