"""Periodic usage upload.

Builds a report from the usage table and uploads it once per interval, plus
one final time when the application shuts down.

Created: 2026-10-14
"""

from __future__ import annotations

import asyncio
import logging

from pocketusage.usage.anonymize import anonymized_user
from pocketusage.usage.models import ReportDocument
from pocketusage.usage.protocol import SiteResolver
from pocketusage.usage.report import build_report
from pocketusage.usage.service import UsageService
from pocketusage.usage.uploader import ReportUploader

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://usage.imagej.net/stats.php"
DEFAULT_INTERVAL = 60 * 60  # one hour, in seconds


class UsageUploadService:
    """Uploads anonymized usage statistics on a fixed schedule.

    Usage::

        service = UsageUploadService(get_usage_service(), resolver)
        service.start()
        ...
        await service.shutdown()  # final flush
    """

    def __init__(
        self,
        usage_service: UsageService,
        resolver: SiteResolver,
        *,
        server_url: str = DEFAULT_SERVER_URL,
        interval: float = DEFAULT_INTERVAL,
        uploader: ReportUploader | None = None,
    ) -> None:
        self._usage_service = usage_service
        self._resolver = resolver
        self._server_url = server_url
        self._interval = interval
        self._uploader = uploader or ReportUploader()
        self._task: asyncio.Task | None = None
        # One build-and-upload cycle at a time (timer vs. shutdown flush)
        self._lock = asyncio.Lock()

    @property
    def server_url(self) -> str:
        """Where anonymized usage statistics are sent."""
        return self._server_url

    def anonymized_user(self) -> str:
        """Unique but anonymous identifier for the current user and machine."""
        return anonymized_user()

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    def build(self) -> ReportDocument:
        """Build a report from the current usage table."""
        stats = self._usage_service.get_stats()
        return build_report(list(stats.values()), self._resolver)

    def preview(self) -> ReportDocument:
        """The document the next upload would send, without sending it."""
        return self._uploader.prepare(self.build(), self.anonymized_user())

    async def upload_usage_statistics(self) -> bool:
        """Build the current report and upload it."""
        async with self._lock:
            document = self.build()
            return await self._uploader.upload(
                document, self.anonymized_user(), self._server_url
            )

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start uploading once per interval (first upload after one interval)."""
        if self.is_running():
            return
        self._task = asyncio.create_task(self._run(), name="usage-upload")
        logger.info("Usage upload scheduled every %.0f seconds", self._interval)

    async def stop(self) -> None:
        """Cancel the periodic upload.  Safe to call more than once."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Usage upload stopped")

    async def shutdown(self) -> None:
        """Stop the schedule and upload one last time."""
        await self.stop()
        await self.upload_usage_statistics()

    async def _run(self) -> None:
        # Fixed rate: a slow upload does not push later cycles back
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        while True:
            deadline += self._interval
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            try:
                await self.upload_usage_statistics()
            except Exception:
                logger.exception("Usage upload cycle failed")
