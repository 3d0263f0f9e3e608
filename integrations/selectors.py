"""
Cached read access to integrations for delivery code.

Results are cached under the integration prefix of each environment and
evicted by CacheInvalidator.clear_cache whenever an integration changes.
"""

from typing import Any, Dict, List, Optional

from django.conf import settings

from core.cache import CacheKeyPrefix, namespaced_cache
from .models import Integration


def _load_active_integrations(environment_id, channel: Optional[str]) -> List[Dict[str, Any]]:
    queryset = Integration.objects.filter(environment_id=environment_id, active=True)
    if channel:
        queryset = queryset.filter(channel=channel)

    return [
        {
            'id': str(row['id']),
            'channel': row['channel'],
            'provider_id': row['provider_id'],
            'identifier': row['identifier'],
            'credentials': row['credentials'],
        }
        for row in queryset.order_by('channel', 'created_at').values(
            'id', 'channel', 'provider_id', 'identifier', 'credentials'
        )
    ]


def get_active_integrations(environment_id, channel: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Active integrations of an environment, optionally for one channel.

    Credentials are returned as stored (secure values encrypted).
    """
    return namespaced_cache.get_or_compute(
        CacheKeyPrefix.INTEGRATION,
        f"active:{channel or 'all'}",
        lambda: _load_active_integrations(environment_id, channel),
        environment_id=str(environment_id),
        timeout=getattr(settings, 'INTEGRATION_CACHE_TIMEOUT', 600),
    )
