# core/cache.py
"""
Per-tenant dashboard memoisation.

Keys carry a per-tenant version number; every write bumps the version so
stale entries are simply never read again.
"""
import logging

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)


class DashboardCache:
    """Versioned cache for one tenant's dashboard payloads."""

    @staticmethod
    def _version_key(tenant_id):
        return f"academy:{tenant_id}:dashboard_version"

    @staticmethod
    def _timeout():
        return getattr(settings, 'ACADEMY_DASHBOARD_CACHE_TIMEOUT', 300)

    @staticmethod
    def version(tenant_id) -> int:
        return cache.get_or_set(DashboardCache._version_key(tenant_id), 1, None) or 1

    @staticmethod
    def key(tenant_id, name, *parts) -> str:
        suffix = ':'.join(str(p) for p in parts)
        return f"academy:{tenant_id}:v{DashboardCache.version(tenant_id)}:{name}:{suffix}"

    @staticmethod
    def get(tenant_id, name, *parts):
        return cache.get(DashboardCache.key(tenant_id, name, *parts))

    @staticmethod
    def set(tenant_id, name, value, *parts):
        cache.set(DashboardCache.key(tenant_id, name, *parts), value, DashboardCache._timeout())

    @staticmethod
    def invalidate(tenant_id):
        """Drop every cached dashboard payload of a tenant."""
        key = DashboardCache._version_key(tenant_id)
        try:
            cache.incr(key)
        except ValueError:
            # Missing key: the next read starts a fresh version
            cache.set(key, 2, None)
        logger.debug(f"Dashboard cache invalidated for tenant {tenant_id}")
