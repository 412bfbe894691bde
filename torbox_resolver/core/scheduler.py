"""
Background Scheduler
Periodic maintenance of the availability cache
"""
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from torbox_resolver.config import settings
from torbox_resolver.services.cache import availability_cache


scheduler = AsyncIOScheduler()


async def purge_expired_availability():
    """Drop availability entries whose TTL has passed"""
    try:
        removed = await availability_cache.purge_expired()
        if removed:
            logger.info(f"Purged {removed} expired availability entries")
    except Exception as e:
        logger.error(f"Availability purge failed: {e}")


def setup_scheduler():
    """Configure scheduled jobs"""
    scheduler.add_job(
        purge_expired_availability,
        IntervalTrigger(seconds=settings.availability_cleanup_interval),
        id="purge_availability",
        name="Purge Expired Availability",
        replace_existing=True,
        max_instances=1,
    )
    
    logger.info("Scheduler configured with jobs")


# Setup on import
setup_scheduler()
