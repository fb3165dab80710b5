"""Scheduler package — cron jobs, the job registry, and the APScheduler backend."""

from cronbake.scheduler.backend import create_scheduler
from cronbake.scheduler.baker import Baker
from cronbake.scheduler.job import CronJob, Status

__all__ = ["Baker", "CronJob", "Status", "create_scheduler"]
