"""
Integration Store

Django ORM access to Integration records. Every mutation is a single
targeted UPDATE statement, so concurrent writers of unrelated fields are
never clobbered by a full-row save.
"""

import logging
from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError
from django.utils import timezone

from .models import Integration

logger = logging.getLogger(__name__)


class IntegrationStore:
    """Data access for integrations, scoped by environment where required."""

    def __init__(self, model=Integration):
        self.model = model

    def find_by_id(self, integration_id) -> Optional[Integration]:
        try:
            return self.model.objects.filter(pk=integration_id).first()
        except (ValueError, ValidationError):
            return None

    def find_one(self, integration_id, environment_id) -> Optional[Integration]:
        """Fetch an integration by id within an environment."""
        try:
            return self.model.objects.filter(
                pk=integration_id,
                environment_id=environment_id,
            ).first()
        except (ValueError, ValidationError):
            return None

    def update(self, integration_id, environment_id, fields: Dict[str, Any]) -> int:
        """
        Apply a partial update to one integration.

        Args:
            integration_id: Target integration
            environment_id: Environment the integration must belong to
            fields: Column values to set

        Returns:
            Number of rows updated (0 or 1)
        """
        return self.model.objects.filter(
            pk=integration_id,
            environment_id=environment_id,
        ).update(**fields, updated_at=timezone.now())

    def deactivate_channel(
        self,
        environment_id,
        organization_id,
        channel: str,
        exclude_integration_id,
    ) -> int:
        """Set active=False on every other active integration of a channel."""
        return self.model.objects.filter(
            environment_id=environment_id,
            organization_id=organization_id,
            channel=channel,
            active=True,
        ).exclude(
            pk=exclude_integration_id,
        ).update(active=False, updated_at=timezone.now())
