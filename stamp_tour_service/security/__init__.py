"""Security utilities for the stamp tour service."""

from .loopback import is_loopback_host, require_loopback

__all__ = ["is_loopback_host", "require_loopback"]
