import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from examiner.core.config import get_settings
from examiner.core.database import engine, async_session_maker, Base
from examiner.api.v1 import router as api_router
from examiner.services.analysis_service import AnalysisService
# Import all models to register them with Base
from examiner import models  # noqa: F401

settings = get_settings()

_log_level = os.getenv("LOG_LEVEL", "DEBUG" if settings.debug else "INFO").upper()
logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("openai").setLevel(logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables on startup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    # Runs left behind by a previous process would otherwise hold their documents forever
    async with async_session_maker() as db:
        await AnalysisService(db).recover_interrupted_analyses()
    yield


app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    description="AI-assisted examination of theses and research proposals",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
)

app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": "1.0.0"}
