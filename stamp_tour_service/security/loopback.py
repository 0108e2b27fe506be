"""Loopback-only access control for operator endpoints."""

from __future__ import annotations

import ipaddress
import logging
from typing import Optional

from fastapi import Request

from ..tour.errors import Unauthorized

logger = logging.getLogger(__name__)


def is_loopback_host(host: Optional[str]) -> bool:
    """Return True only for a literal loopback IP address."""

    if not host:
        return False
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def require_loopback(request: Request) -> str:
    """FastAPI dependency rejecting every caller that is not on a loopback address."""

    host = request.client.host if request.client else None
    if not is_loopback_host(host):
        logger.warning("Unauthorized access to the admin endpoint", extra={"client_host": host})
        raise Unauthorized("Admin access is restricted to loopback callers")
    return host


__all__ = ["is_loopback_host", "require_loopback"]
