import asyncio
import logging
from typing import Callable, Coroutine, List

logger = logging.getLogger(__name__)


def _job_name(job_func) -> str:
    return getattr(job_func, "__name__", repr(job_func))


class Scheduler:
    """
    Manages the scheduling and execution of periodic async tasks using asyncio.

    Each job runs immediately, then sleeps for its interval after every run, so
    slow runs push the next one back instead of piling up.
    """

    def __init__(self):
        self.tasks: List[asyncio.Task] = []
        logger.info("AsyncScheduler initialized.")

    async def _run_periodically(self, interval_seconds: float, job_func: Callable[[], Coroutine]):
        """Internal loop to run a job periodically."""
        try:
            while True:
                try:
                    await job_func()
                except Exception as e:
                    logger.error(f"Error in scheduled job '{_job_name(job_func)}': {e}", exc_info=True)

                await asyncio.sleep(interval_seconds)
        except asyncio.CancelledError:
            logger.info(f"Job '{_job_name(job_func)}' cancelled.")
            raise

    def add_job(self, job_func: Callable[[], Coroutine], interval_seconds: float) -> asyncio.Task:
        """
        Adds a new async job to the schedule. Must be called from a running event loop.
        """
        if interval_seconds <= 0:
            raise ValueError(f"Interval must be positive, got {interval_seconds}.")

        task = asyncio.create_task(self._run_periodically(interval_seconds, job_func))
        self.tasks.append(task)
        logger.info(f"Scheduled job '{_job_name(job_func)}' to run every {interval_seconds:g} second(s).")
        return task

    async def stop(self):
        """Cancels all scheduled tasks, interrupting any run in progress."""
        logger.info("Stopping scheduler...")
        for task in self.tasks:
            task.cancel()
        if self.tasks:
            await asyncio.gather(*self.tasks, return_exceptions=True)
        self.tasks.clear()
