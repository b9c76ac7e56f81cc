"""Anonymous usage statistics.

Counts how often commands, scripts and legacy plugins run, groups the counts
by the update site that ships them, and periodically uploads an anonymized
summary.  Nothing is collected unless the user opts in
(``Settings.usage_collected``).

Created: 2026-10-12
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pocketusage.usage.protocol import SiteResolver
from pocketusage.usage.scheduler import UsageUploadService
from pocketusage.usage.service import UsageService

if TYPE_CHECKING:
    from pocketusage.config import Settings

__version__ = "0.1.0"

__all__ = ["get_usage_service", "get_usage_upload_service", "install"]

logger = logging.getLogger(__name__)

_usage_service: UsageService | None = None
_upload_service: UsageUploadService | None = None


def get_usage_service() -> UsageService:
    """Get the global usage counter table."""
    global _usage_service
    if _usage_service is None:
        _usage_service = UsageService()

        from pocketusage.lifecycle import register

        def _reset():
            global _usage_service
            _usage_service = None

        register("usage_service", reset=_reset)
    return _usage_service


def get_usage_upload_service(
    resolver: SiteResolver | None = None,
    settings: Settings | None = None,
) -> UsageUploadService:
    """Get the global upload service.

    The first call must pass the site resolver.  The service is registered
    with :mod:`pocketusage.lifecycle` so the last report is flushed on
    ``shutdown_all()``.
    """
    global _upload_service
    if _upload_service is None:
        if resolver is None:
            raise ValueError("A site resolver is required to create the upload service")
        if settings is None:
            from pocketusage.config import get_settings

            settings = get_settings()

        from pocketusage.usage.uploader import ReportUploader

        _upload_service = UsageUploadService(
            get_usage_service(),
            resolver,
            server_url=settings.usage_server_url,
            interval=settings.upload_interval,
            uploader=ReportUploader(timeout=settings.upload_timeout),
        )

        from pocketusage.lifecycle import register

        def _reset():
            global _upload_service
            _upload_service = None

        register("usage_upload_service", shutdown=_upload_service.shutdown, reset=_reset)
    return _upload_service


def install(bus, resolver: SiteResolver, settings: Settings | None = None) -> bool:  # noqa: ANN001 (MessageBus)
    """Hook usage collection into a running application.

    Must be called from inside the running event loop.  Does nothing when
    the user has not opted in.

    Returns:
        True if collection was enabled.
    """
    if settings is None:
        from pocketusage.config import get_settings

        settings = get_settings()
    if not settings.usage_collected:
        logger.info("Usage statistics collection is disabled")
        return False

    bus.subscribe_system(get_usage_service().handle_event)
    get_usage_upload_service(resolver, settings).start()
    return True
