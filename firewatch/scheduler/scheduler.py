"""Async interval scheduler using asyncio.

Drives the periodic work of the bot:
- Timer-triggered alert polling
- Channel command polling
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Coroutine

from ..core.utils import get_logger, utc_now

logger = get_logger(__name__)


@dataclass
class Job:
    """Scheduled job definition.

    The next run starts interval_seconds after the previous one finished,
    so runs of the same job never overlap.

    Attributes:
        name: Job identifier.
        func: Async function to execute.
        interval_seconds: Seconds between the end of one run and the next.
        run_immediately: Run once on scheduler start.
    """

    name: str
    func: Callable[[], Coroutine[Any, Any, Any]]
    interval_seconds: float
    run_immediately: bool = False

    # Runtime state
    _task: asyncio.Task | None = field(default=None, repr=False)
    _consecutive_failures: int = field(default=0, repr=False)


class Scheduler:
    """Async interval scheduler.

    Failed runs are logged; the job simply runs again at its next interval.

    Usage:
        scheduler = Scheduler()

        scheduler.add_job(
            name="poll_alerts",
            func=poll_alerts,
            interval_seconds=60,
        )

        await scheduler.start()

        # Later...
        await scheduler.stop()
    """

    def __init__(self):
        self._jobs: dict[str, Job] = {}
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def add_job(
        self,
        name: str,
        func: Callable[[], Coroutine[Any, Any, Any]],
        interval_seconds: float,
        run_immediately: bool = False,
    ) -> Job:
        """Add a job to the scheduler.

        Args:
            name: Unique job name.
            func: Async function to execute.
            interval_seconds: Seconds between executions.
            run_immediately: Run once on start.

        Returns:
            The created Job.
        """
        if name in self._jobs:
            raise ValueError(f"Job '{name}' already exists")

        job = Job(
            name=name,
            func=func,
            interval_seconds=interval_seconds,
            run_immediately=run_immediately,
        )

        self._jobs[name] = job
        logger.info("job_added", job=name, interval_seconds=interval_seconds)

        return job

    async def _execute_job(self, job: Job) -> bool:
        """Execute a single job run.

        Args:
            job: Job to execute.

        Returns:
            True if successful.
        """
        started_at = utc_now()

        try:
            logger.debug("job_started", job=job.name)
            await job.func()

        except asyncio.CancelledError:
            logger.info("job_cancelled", job=job.name)
            raise

        except Exception as e:
            job._consecutive_failures += 1
            logger.error(
                "job_failed",
                job=job.name,
                error=str(e),
                consecutive_failures=job._consecutive_failures,
            )
            return False

        job._consecutive_failures = 0
        duration = (utc_now() - started_at).total_seconds()
        logger.debug("job_completed", job=job.name, duration=round(duration, 3))
        return True

    async def _job_loop(self, job: Job) -> None:
        """Main loop for a single job.

        Args:
            job: Job to run in loop.
        """
        if job.run_immediately:
            await self._execute_job(job)

        while self._running:
            try:
                await asyncio.sleep(job.interval_seconds)

                if not self._running:
                    continue

                await self._execute_job(job)

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("job_loop_error", job=job.name, error=str(e))

    async def start(self) -> None:
        """Start the scheduler.

        Runs every job in its own task.
        """
        if self._running:
            logger.warning("scheduler_already_running")
            return

        self._running = True
        logger.info("scheduler_starting", jobs=len(self._jobs))

        for job in self._jobs.values():
            job._task = asyncio.create_task(self._job_loop(job), name=f"job:{job.name}")

    async def stop(self, timeout: float = 10.0) -> None:
        """Stop the scheduler.

        Args:
            timeout: Max seconds to wait for jobs to finish.
        """
        if not self._running:
            return

        self._running = False
        logger.info("scheduler_stopping")

        tasks = [
            job._task for job in self._jobs.values()
            if job._task and not job._task.done()
        ]

        for task in tasks:
            task.cancel()

        if tasks:
            await asyncio.wait(tasks, timeout=timeout)

        logger.info("scheduler_stopped")
