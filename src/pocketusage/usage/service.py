"""Usage counter table.

Counts how often each identifiable operation runs.  Subscribes to the
MessageBus SystemEvent stream via :meth:`UsageService.handle_event`.

Writes are not locked: every mutation is expected to happen on the event
loop thread that delivers bus events.  Readers that need a stable view take
``get_stats()`` and keep the reference; ``clear_stats()`` never touches it.

Created: 2026-10-12
"""

from __future__ import annotations

import logging
from typing import Any

from pocketusage.usage.models import UsageRecord
from pocketusage.usage.protocol import Identifiable, Locatable

logger = logging.getLogger(__name__)

# Bus event emitted by the host after an operation finishes executing.
OPERATION_EXECUTED = "operation_executed"

_DESCRIPTIVE_FIELDS = ("name", "label", "description", "version")


class UsageService:
    """Table of usage statistics keyed by operation identifier.

    Usage::

        service = UsageService()
        bus.subscribe_system(service.handle_event)
    """

    def __init__(self) -> None:
        self._stats: dict[str, UsageRecord] = {}

    # ------------------------------------------------------------------
    # Bus subscriber callback
    # ------------------------------------------------------------------

    async def handle_event(self, event) -> None:  # noqa: ANN001 (SystemEvent)
        """Count ``operation_executed`` events; everything else is ignored.

        The executed entity is expected in ``event.data["operation"]``.
        """
        if event.event_type != OPERATION_EXECUTED:
            return
        data = event.data or {}
        self.increment(data.get("operation"))

    # ------------------------------------------------------------------
    # Counter table
    # ------------------------------------------------------------------

    def get_stats(self) -> dict[str, UsageRecord]:
        """Return the live table (not a copy)."""
        return self._stats

    def clear_stats(self) -> None:
        """Discard all statistics.

        Installs a new table instead of clearing the current one, so any
        reference previously returned by :meth:`get_stats` keeps its contents.
        """
        self._stats = {}

    def get_usage(self, obj: Any) -> UsageRecord | None:
        """Get or create the record for ``obj``.

        Returns None when ``obj`` lacks an identifier or a location.
        """
        if not (isinstance(obj, Identifiable) and isinstance(obj, Locatable)):
            return None
        if obj.identifier is None:
            return None
        identifier = str(obj.identifier)
        record = self._stats.get(identifier)
        if record is None:
            record = _new_record(identifier, obj)
            self._stats[identifier] = record
            logger.debug("Tracking usage of %s", identifier)
        return record

    def increment(self, obj: Any) -> None:
        """Record one invocation of ``obj`` (no-op if it is not trackable)."""
        record = self.get_usage(obj)
        if record is None:
            return
        record.increment()


def _new_record(identifier: str, obj: Any) -> UsageRecord:
    fields = {}
    for key in _DESCRIPTIVE_FIELDS:
        value = getattr(obj, key, None)
        if value is not None:
            fields[key] = str(value)
    location = obj.location
    return UsageRecord(
        identifier=identifier,
        location=str(location) if location is not None else None,
        **fields,
    )
