"""
TorBox Resolver
Main FastAPI Application
"""
import contextlib
from fastapi import FastAPI
from loguru import logger
import sys

from torbox_resolver import __version__
from torbox_resolver.config import settings
from torbox_resolver.database import init_db
from torbox_resolver.routers import health, torbox
from torbox_resolver.core.scheduler import scheduler
from torbox_resolver.services.downloaders import torbox_service

# Configure logging
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level=settings.log_level.upper()
)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info("Starting TorBox Resolver...")
    
    await init_db()
    
    scheduler.start()
    logger.info("Scheduler started")
    
    yield
    
    logger.info("Shutting down TorBox Resolver...")
    scheduler.shutdown()
    await torbox_service.close()


app = FastAPI(
    title="TorBox Resolver",
    description="TorBox availability checks and direct stream links",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(torbox.router, prefix="/api", tags=["TorBox"])
