"""Shared-secret authorization for admin-only salary operations."""
from __future__ import annotations

import hashlib
import hmac

from fastapi import Depends, Header, HTTPException, status

from .config import Settings, get_settings
from .log import get_logger

LOGGER = get_logger(__name__)

ADMIN_HEADER = "X-Admin-Key"


def admin_key_matches(configured: str | None, presented: str | None) -> bool:
    """Return ``True`` only for an exact, full-length match of both keys."""

    if not configured or presented is None:
        return False
    return hmac.compare_digest(configured.encode("utf-8"), presented.encode("utf-8"))


def hash_ip(ip_address: str, secret: str) -> str:
    """Salted, truncated SHA-256 of a client address; the raw address is never stored."""

    digest = hashlib.sha256(f"{ip_address}{secret}".encode("utf-8")).hexdigest()
    return digest[:16]


def require_admin(
    x_admin_key: str | None = Header(default=None, alias=ADMIN_HEADER),
    settings: Settings = Depends(get_settings),
) -> None:
    """FastAPI dependency guarding every admin route."""

    if not settings.admin.enabled:
        LOGGER.warning("Admin request rejected: ADMIN_KEY is not configured")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin operations are disabled",
        )
    if not admin_key_matches(settings.admin.key, x_admin_key):
        LOGGER.info("Admin request rejected: key mismatch")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


__all__ = [
    "ADMIN_HEADER",
    "admin_key_matches",
    "hash_ip",
    "require_admin",
]
