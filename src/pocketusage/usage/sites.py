"""Location handling and update-site lookup.

Created: 2026-10-13
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from pocketusage.usage.models import UpdateSite

logger = logging.getLogger(__name__)


def location_to_path(location: str) -> Path:
    """Convert a ``file:`` or ``jar:file:...!/entry`` URL to a local path.

    For JAR URLs the path of the archive itself is returned.

    Raises:
        ValueError: If the location is not a local file URL.
    """
    url = location
    if url.startswith("jar:"):
        url = url[len("jar:") :]
        bang = url.find("!/")
        if bang < 0:
            raise ValueError(f"Invalid JAR URL: {location}")
        url = url[:bang]

    parsed = urlparse(url)
    if parsed.scheme != "file":
        raise ValueError(f"Not a file URL: {location}")
    if parsed.netloc not in ("", "localhost"):
        raise ValueError(f"Remote file URL: {location}")
    if not parsed.path:
        raise ValueError(f"Empty file URL: {location}")
    return Path(unquote(parsed.path))


class PrefixSiteResolver:
    """Resolve update sites by installation directory.

    Each site is registered with the directory its files live under; the
    longest matching directory wins.

    Usage::

        resolver = PrefixSiteResolver()
        resolver.add_site(Path("/opt/app/plugins"), UpdateSite(name="ImageJ", url=..., official=True))
    """

    def __init__(self) -> None:
        self._sites: dict[Path, UpdateSite] = {}

    def add_site(self, root: Path, site: UpdateSite) -> None:
        self._sites[Path(root)] = site

    def get_update_site(self, path: Path) -> UpdateSite | None:
        best: tuple[int, UpdateSite] | None = None
        for root, site in self._sites.items():
            if path == root or root in path.parents:
                depth = len(root.parts)
                if best is None or depth > best[0]:
                    best = (depth, site)
        if best is None:
            logger.debug("No update site for %s", path)
            return None
        return best[1]
