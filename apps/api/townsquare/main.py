import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from townsquare.api.v1.router import api_router
from townsquare.core.config import settings
from townsquare.db import base as _db_models  # noqa: F401
from townsquare.db.session import SessionLocal
from townsquare.services.bootstrap_service import BootstrapService

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.seed_demo_data:
        with SessionLocal() as db:
            BootstrapService(db).seed_demo_data()
    logger.info("api started", extra={"app_env": settings.app_env})
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(api_router, prefix="/api")
