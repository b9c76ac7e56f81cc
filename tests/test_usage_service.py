"""Tests for pocketusage.usage.service (the usage counter table).

Created: 2026-10-16
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import pytest
from pydantic import ValidationError

from pocketusage import get_usage_service
from pocketusage.usage.service import OPERATION_EXECUTED, UsageService

# ---------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------


@dataclass
class FakeModuleInfo:
    """Minimal stand-in for an executed command: identifiable and locatable."""

    identifier: str
    location: str | None = "file:/opt/app/plugins/example.jar"
    name: str | None = None
    label: str | None = None
    description: str | None = None
    version: str | None = None


@dataclass
class OnlyIdentifiable:
    identifier: str


@dataclass
class OnlyLocatable:
    location: str


@dataclass
class FakeSystemEvent:
    """Minimal stand-in for bus.events.SystemEvent."""

    event_type: str
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


@pytest.fixture()
def service() -> UsageService:
    return UsageService()


# ---------------------------------------------------------------
# Counter table
# ---------------------------------------------------------------


class TestCounterTable:
    def test_increment_counts_each_call(self, service: UsageService):
        info = FakeModuleInfo("command:foo.Bar")
        for _ in range(7):
            service.increment(info)

        stats = service.get_stats()
        assert list(stats) == ["command:foo.Bar"]
        assert stats["command:foo.Bar"].count == 7

    def test_get_usage_creates_once(self, service: UsageService):
        info = FakeModuleInfo("command:foo.Bar")
        first = service.get_usage(info)
        second = service.get_usage(FakeModuleInfo("command:foo.Bar", location="file:/elsewhere"))

        assert first is second
        assert first.count == 0
        assert first.location == "file:/opt/app/plugins/example.jar"
        assert len(service.get_stats()) == 1

    def test_identifier_is_immutable(self, service: UsageService):
        record = service.get_usage(FakeModuleInfo("command:foo.Bar"))
        with pytest.raises(ValidationError):
            record.identifier = "command:other"
        assert record.identifier == "command:foo.Bar"
        assert list(service.get_stats()) == ["command:foo.Bar"]

    def test_captures_descriptive_fields(self, service: UsageService):
        info = FakeModuleInfo(
            "legacy:old.Plugin?arg",
            name="old.Plugin",
            label="Old Plugin",
            description="Does old things",
            version="1.2.3",
        )
        record = service.get_usage(info)
        assert record.name == "old.Plugin"
        assert record.label == "Old Plugin"
        assert record.description == "Does old things"
        assert record.version == "1.2.3"

    def test_missing_location_is_still_tracked(self, service: UsageService):
        service.increment(FakeModuleInfo("script:foo.js", location=None))
        assert service.get_stats()["script:foo.js"].location is None
        assert service.get_stats()["script:foo.js"].count == 1

    @pytest.mark.parametrize(
        "obj",
        [OnlyIdentifiable("command:x"), OnlyLocatable("file:/x"), "command:x", None, object()],
    )
    def test_untrackable_objects_are_ignored(self, service: UsageService, obj):
        assert service.get_usage(obj) is None
        service.increment(obj)
        assert service.get_stats() == {}

    def test_clear_then_increment_starts_at_one(self, service: UsageService):
        info = FakeModuleInfo("command:foo.Bar")
        for _ in range(5):
            service.increment(info)
        service.clear_stats()
        service.increment(info)
        assert service.get_stats()["command:foo.Bar"].count == 1

    def test_snapshot_survives_clear(self, service: UsageService):
        info = FakeModuleInfo("command:foo.Bar")
        service.increment(info)
        service.increment(info)
        snapshot = service.get_stats()

        service.clear_stats()
        service.increment(info)

        assert snapshot["command:foo.Bar"].count == 2
        assert service.get_stats() is not snapshot
        assert service.get_stats()["command:foo.Bar"].count == 1

    def test_get_stats_is_live(self, service: UsageService):
        stats = service.get_stats()
        service.increment(FakeModuleInfo("command:a"))
        assert "command:a" in stats


# ---------------------------------------------------------------
# Bus subscriber
# ---------------------------------------------------------------


class TestHandleEvent:
    @pytest.mark.asyncio
    async def test_counts_operation_executed(self, service: UsageService):
        info = FakeModuleInfo("command:foo.Bar")
        for _ in range(3):
            await service.handle_event(
                FakeSystemEvent(event_type=OPERATION_EXECUTED, data={"operation": info})
            )
        assert service.get_stats()["command:foo.Bar"].count == 3

    @pytest.mark.asyncio
    async def test_ignores_other_events(self, service: UsageService):
        info = FakeModuleInfo("command:foo.Bar")
        await service.handle_event(FakeSystemEvent(event_type="tool_start", data={"operation": info}))
        await service.handle_event(FakeSystemEvent(event_type=OPERATION_EXECUTED, data={}))
        assert service.get_stats() == {}


def test_usage_service_singleton():
    assert get_usage_service() is get_usage_service()
