"""
Tests for the background purge job
"""

from datetime import timedelta

from sitewidgets.scheduler import PURGE_JOB_ID, schedule_file_purge, scheduler


def test_purge_job_registered():
    schedule_file_purge(interval_minutes=15)
    try:
        job = scheduler.get_job(PURGE_JOB_ID)
        assert job is not None
        assert job.trigger.interval == timedelta(minutes=15)
    finally:
        scheduler.remove_job(PURGE_JOB_ID)
