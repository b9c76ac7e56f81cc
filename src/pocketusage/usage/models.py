"""Pydantic models for usage statistics and upload reports.

Created: 2026-10-12
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UsageRecord(BaseModel):
    """Invocation count for a single tracked operation."""

    identifier: str = Field(frozen=True)  # e.g. "command:foo.Bar", "legacy:old.Plugin?arg"
    name: str | None = None
    label: str | None = None
    description: str | None = None
    version: str | None = None
    location: str | None = None  # resource URL used to resolve the owning site
    count: int = Field(default=0, ge=0)

    def increment(self) -> None:
        self.count += 1


class UpdateSite(BaseModel):
    """A distribution site as reported by the site resolver."""

    name: str
    url: str
    official: bool = False


class StatEntry(BaseModel):
    """One usage record as it appears in an uploaded report."""

    id: str
    name: str | None = None
    label: str | None = None
    description: str | None = None
    version: str | None = None
    count: int = 0

    @classmethod
    def from_record(cls, record: UsageRecord) -> StatEntry:
        return cls(
            id=record.identifier,
            name=record.name,
            label=record.label,
            description=record.description,
            version=record.version,
            count=record.count,
        )


class SiteGroup(BaseModel):
    """All reported statistics attributed to one update site."""

    name: str
    url: str
    stats: list[StatEntry] = Field(default_factory=list)


class ReportDocument(BaseModel):
    """Root of the usage report.

    ``user`` and the environment metadata fields are only attached at upload
    time; extra keys are allowed so the metadata lands flat at the top level.
    """

    model_config = ConfigDict(extra="allow")

    sites: list[SiteGroup] = Field(default_factory=list)
    user: str | None = None

    def has_stats(self) -> bool:
        """Whether any site carries at least one statistic."""
        return any(site.stats for site in self.sites)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with absent optional fields omitted."""
        return self.model_dump(exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)
