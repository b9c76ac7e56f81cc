"""Shutdown and reset hooks for pocketusage singletons.

The host application calls ``shutdown_all()`` once during teardown; this is
the point where the upload service flushes its final report.  Test suites
call ``reset_all()`` so the ``get_*()`` helpers build fresh instances.

Created: 2026-10-15
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# name → (shutdown_callback_or_None, reset_callback_or_None)
_registry: dict[str, tuple[Callable | None, Callable | None]] = {}


def register(
    name: str,
    *,
    shutdown: Callable[[], Any] | None = None,
    reset: Callable[[], Any] | None = None,
) -> None:
    """Register lifecycle callbacks under ``name`` (replacing any previous ones).

    Args:
        name: Unique identifier, e.g. ``"usage_upload_service"``.
        shutdown: Async or sync callable run on application teardown.
        reset: Sync callable that drops the singleton (for tests).
    """
    _registry[name] = (shutdown, reset)


def registered() -> list[str]:
    """Names currently registered, in registration order."""
    return list(_registry)


async def shutdown_all() -> None:
    """Run every shutdown callback, awaiting coroutines.

    A failing callback is logged and does not stop the others.
    """
    for name, (shutdown_cb, _) in list(_registry.items()):
        if shutdown_cb is None:
            continue
        try:
            result = shutdown_cb()
            if asyncio.iscoroutine(result):
                await result
            logger.debug("Shut down %s", name)
        except Exception:
            logger.warning("Error shutting down %s", name, exc_info=True)


def reset_all() -> None:
    """Run every reset callback, then empty the registry."""
    for name, (_, reset_cb) in list(_registry.items()):
        if reset_cb is None:
            continue
        try:
            reset_cb()
        except Exception:
            logger.warning("Error resetting %s", name, exc_info=True)
    _registry.clear()
