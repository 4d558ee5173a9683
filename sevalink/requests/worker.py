"""Fire-and-forget background persistence with bounded retries."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_MAX_RETRIES = 3
_BACKOFF_CAP_SECONDS = 30


@dataclass
class Job:
    label: str
    action: Callable[[], object]


class BackgroundWorker:
    """Runs submitted jobs on a queue after the caller has moved on.

    Each job is retried with exponential backoff; a job that still fails is
    logged and reported to ``on_failure``. Nothing is ever raised back to the
    submitter.
    """

    def __init__(
        self,
        max_retries: int = _MAX_RETRIES,
        backoff_base: float = 1.0,
        on_failure: Callable[[str, Exception], None] | None = None,
    ) -> None:
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._on_failure = on_failure
        self._queue: asyncio.Queue[Job | None] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if not self.running:
            self._task = asyncio.create_task(self._run())

    def submit(self, label: str, action: Callable[[], object]) -> None:
        self._queue.put_nowait(Job(label=label, action=action))
        self.start()

    async def drain(self) -> None:
        """Wait until every queued job has finished (successfully or not)."""
        await self._queue.join()

    async def stop(self) -> None:
        if not self.running:
            return
        await self._queue.put(None)
        if self._task is not None:
            await self._task
        self._task = None

    async def _run(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                if job is None:
                    return
                await self._execute(job)
            finally:
                self._queue.task_done()

    async def _execute(self, job: Job) -> None:
        for attempt in range(self._max_retries + 1):
            try:
                await asyncio.to_thread(job.action)
                return
            except Exception as exc:
                if attempt < self._max_retries:
                    delay = min(self._backoff_base * 2 ** attempt, _BACKOFF_CAP_SECONDS)
                    logger.warning(
                        "Background job %s failed (attempt %d), retrying in %.1fs: %s",
                        job.label, attempt + 1, delay, exc,
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.error("Background job %s failed permanently: %s", job.label, exc)
                if self._on_failure is not None:
                    self._on_failure(job.label, exc)
