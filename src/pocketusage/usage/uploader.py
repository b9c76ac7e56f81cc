"""Usage report upload.

POSTs a :class:`ReportDocument` as JSON to the collection server.  Failures
are logged and swallowed: reporting must never break the host application.
Counts are not marked as sent, so a failed cycle is simply covered by the
next one.

Created: 2026-10-14
"""

from __future__ import annotations

import json
import locale
import logging
import platform
import time
from collections.abc import Callable

import httpx

from pocketusage.usage.models import ReportDocument

logger = logging.getLogger(__name__)


def _locale_parts() -> tuple[str | None, str | None]:
    lang, _ = locale.getlocale()
    if not lang:
        return None, None
    language, _, country = lang.partition("_")
    return language or None, country or None


# Environment details included in every uploaded report.  Keys are
# sanitized to use "_" before they are added to the document.
ENVIRONMENT_PROPERTIES: dict[str, Callable[[], str | None]] = {
    "user.country": lambda: _locale_parts()[1],
    "user.language": lambda: _locale_parts()[0],
    "user.timezone": lambda: time.tzname[0],
    "os.arch": platform.machine,
    "os.name": platform.system,
    "os.version": platform.release,
    "python.implementation": platform.python_implementation,
    "python.version": platform.python_version,
    "python.compiler": platform.python_compiler,
}


def environment_metadata() -> dict[str, str]:
    """Collect the available environment properties (sanitized keys)."""
    result: dict[str, str] = {}
    for key, getter in ENVIRONMENT_PROPERTIES.items():
        try:
            value = getter()
        except Exception:
            logger.debug("Cannot determine %s", key, exc_info=True)
            continue
        if value:
            result[key.replace(".", "_")] = value
    return result


class ReportUploader:
    """Sends usage reports to a collection server."""

    def __init__(self, timeout: float | None = None) -> None:
        """
        Args:
            timeout: Request timeout in seconds. None keeps the httpx default.
        """
        self._timeout = timeout

    def prepare(self, document: ReportDocument, user: str) -> ReportDocument:
        """Attach the anonymized user and environment metadata to ``document``."""
        document.user = user
        for key, value in environment_metadata().items():
            setattr(document, key, value)
        return document

    async def upload(self, document: ReportDocument, user: str, url: str) -> bool:
        """Upload ``document`` on behalf of ``user``.

        Returns:
            True if the server accepted the report, False if there was
            nothing to send or the upload failed.
        """
        if not document.has_stats():
            logger.debug("No usage statistics to upload")
            return False

        self.prepare(document, user)
        try:
            raw = await self._post(document, url)
        except (httpx.HTTPError, httpx.InvalidURL, OSError):
            logger.error("Cannot upload usage statistics", exc_info=True)
            return False

        self._handle_response(raw)
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _post(self, document: ReportDocument, url: str) -> str:
        data = document.to_json().encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "charset": "UTF-8",
            "Content-Length": str(len(data)),
        }
        client_kwargs = {} if self._timeout is None else {"timeout": self._timeout}
        async with httpx.AsyncClient(**client_kwargs) as client:
            response = await client.post(url, content=data, headers=headers)
            response.raise_for_status()
            return response.text

    def _handle_response(self, raw: str) -> None:
        try:
            response = json.loads(raw)
            message = response["message"]
            if not isinstance(message, str):
                raise TypeError(f"message is {type(message).__name__}")
        except (ValueError, KeyError, TypeError):
            logger.error("Invalid response: %s", raw, exc_info=True)
            return
        logger.info("Uploaded usage statistics with response: %s", message)
