"""Capabilities an observed object must expose to be counted, and the site
lookup contract consumed by the report builder.

Created: 2026-10-12
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from pocketusage.usage.models import UpdateSite


@runtime_checkable
class Identifiable(Protocol):
    """Something with a stable, globally unique identifier."""

    identifier: str


@runtime_checkable
class Locatable(Protocol):
    """Something that knows where it was loaded from (a URL, may be None)."""

    location: str | None


class SiteResolver(Protocol):
    """Maps a local file to the update site that ships it."""

    def get_update_site(self, path: Path) -> UpdateSite | None: ...
