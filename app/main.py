import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import get_settings
from app.db.database import engine, Base
from app.api import users, events, hydration, recommend, staff

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
    yield


app = FastAPI(
    title="Hydration Platform API",
    description="Personalized hydration gap tracking and kit recommendations",
    version="0.1.0",
    lifespan=lifespan
)

app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(events.router, prefix="/events", tags=["events"])
app.include_router(hydration.router, prefix="/hydration", tags=["hydration"])
app.include_router(recommend.router, prefix="/recommend", tags=["recommend"])
app.include_router(staff.router, prefix="/staff", tags=["staff"])


@app.get("/")
async def root():
    return {"message": "Hydration Platform API", "docs": "/docs"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
