"""Report builder.

Groups usage records by the update site that ships them.  Records are only
reported when they can be attributed to an *official* site; everything else
is dropped before anything leaves the machine.

Created: 2026-10-13
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pocketusage.usage.models import (
    ReportDocument,
    SiteGroup,
    StatEntry,
    UpdateSite,
    UsageRecord,
)
from pocketusage.usage.protocol import SiteResolver
from pocketusage.usage.sites import location_to_path

logger = logging.getLogger(__name__)


class ReportBuilder:
    """Accumulates usage records into a :class:`ReportDocument`."""

    def __init__(self, resolver: SiteResolver) -> None:
        self._resolver = resolver
        self._document = ReportDocument()
        # site URL → group, so equal sites from separate lookups merge
        self._sites: dict[str, SiteGroup] = {}

    @property
    def document(self) -> ReportDocument:
        return self._document

    def append(self, record: UsageRecord) -> None:
        """Add ``record`` under its update site, if it has an official one."""
        path = self._get_path(record)
        if path is None:
            return
        site = self._resolver.get_update_site(path)
        if site is None:
            return  # no associated update site
        if not site.official:
            return  # not a known update site
        group = self._site_group(site)
        group.stats.append(StatEntry.from_record(record))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get_path(self, record: UsageRecord) -> Path | None:
        if record.location is None:
            return None
        try:
            return location_to_path(record.location)
        except ValueError:
            logger.warning(
                "No file for id '%s' with location: %s",
                record.identifier,
                record.location,
                exc_info=True,
            )
            return None

    def _site_group(self, site: UpdateSite) -> SiteGroup:
        group = self._sites.get(site.url)
        if group is None:
            group = SiteGroup(name=site.name, url=site.url)
            self._document.sites.append(group)
            self._sites[site.url] = group
        return group


def build_report(records: Iterable[UsageRecord], resolver: SiteResolver) -> ReportDocument:
    """Build a fresh report from ``records``."""
    builder = ReportBuilder(resolver)
    for record in records:
        builder.append(record)
    return builder.document
