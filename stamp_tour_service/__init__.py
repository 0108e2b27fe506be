"""Stamp tour service package."""

__all__ = [
    "api",
    "cli",
    "config",
    "content",
    "logging_utils",
    "main",
    "monitoring",
    "security",
    "tour",
]

__version__ = "0.1.2"
