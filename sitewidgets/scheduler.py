import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from sitewidgets.database import AsyncSessionLocal
from sitewidgets.services.file_service import purge_temporary_files

scheduler = AsyncIOScheduler()

logger = logging.getLogger(__name__)

PURGE_JOB_ID = "purge_temporary_files"


async def purge_stale_uploads() -> int:
    async with AsyncSessionLocal() as db:
        purged = await purge_temporary_files(db)
    if purged:
        logger.info(f"[Scheduler] Purged {purged} unpromoted uploads")
    return purged


def schedule_file_purge(interval_minutes: int = 60):
    scheduler.add_job(
        purge_stale_uploads,
        trigger=IntervalTrigger(minutes=interval_minutes),
        id=PURGE_JOB_ID,
        replace_existing=True,
    )
    logger.info(f"[Scheduler] Temporary file purge scheduled every {interval_minutes} minutes")
