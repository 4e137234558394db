"""
Database models for the alias service.

URL holds the alias mapping and the hit counter; UsageEvent is the
per-redirect audit log the statistics are computed from.
"""

from .url import URL, Active, Deleted, UrlLifecycle
from .usage import UsageEvent

__all__ = ["URL", "Active", "Deleted", "UrlLifecycle", "UsageEvent"]
