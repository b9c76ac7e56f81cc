"""Anonymous user identifier.

The identifier is a hash of the user name plus the first MAC address, so the
same person on the same machine always maps to the same token, which lets the
collector answer questions like "what share of users ran command X this
year?" without ever receiving the name or address.

Knowing someone's user name and MAC address is enough to recompute their
token.  There is no salt: adding one would change every existing token.

Created: 2026-10-13
"""

from __future__ import annotations

import base64
import hashlib
import logging
import os
import uuid

logger = logging.getLogger(__name__)


def user_name() -> str:
    """Best-effort login name of the current user."""
    try:
        return os.getlogin()
    except OSError:
        # Headless / CI environments may not have a login name
        return os.environ.get("USER", os.environ.get("USERNAME", ""))


def mac_address() -> bytes:
    """Return the first known MAC address as 6 bytes, or ``b""`` if none."""
    try:
        node = uuid.getnode()
    except OSError:
        logger.error("Cannot enumerate network interfaces", exc_info=True)
        return b""
    # getnode() falls back to a random number with the multicast bit set
    if (node >> 40) & 0x01:
        logger.debug("No hardware address found")
        return b""
    return node.to_bytes(6, "big")


def anonymize(name: str, address: bytes) -> str:
    """SHA-1 of ``name`` + ``address``, URL-safe base64 without padding."""
    digest = hashlib.sha1(name.encode("utf-8") + address).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def anonymized_user() -> str:
    """Unique but anonymous identifier for the current user and machine."""
    return anonymize(user_name(), mac_address())
