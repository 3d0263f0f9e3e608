"""
Integrations Models - Channel Provider Integration Management

This module implements:
- Integration: A configured connection to a third-party provider for one
  delivery channel (email, SMS, chat, push, in-app), scoped to an
  organization environment.
"""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from .encryption import decrypt_credentials


class ChannelType(models.TextChoices):
    IN_APP = 'in_app', _('In-App')
    EMAIL = 'email', _('Email')
    SMS = 'sms', _('SMS')
    CHAT = 'chat', _('Chat')
    PUSH = 'push', _('Push')


# Channels allowed to keep several integrations active in one environment
MULTI_ACTIVE_CHANNELS = frozenset({ChannelType.CHAT, ChannelType.PUSH})


def allows_multiple_active(channel) -> bool:
    """Return True if the channel is exempt from the single-active rule."""
    return channel in MULTI_ACTIVE_CHANNELS


class Integration(models.Model):
    """
    Provider configuration for a delivery channel.

    Outside the exempt channels, at most one integration per environment
    and channel is active at a time.
    """

    ChannelType = ChannelType

    # Identity
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Scoping (immutable after creation)
    environment_id = models.UUIDField(
        db_index=True,
        editable=False,
        help_text=_('Environment this integration belongs to')
    )
    organization_id = models.UUIDField(
        db_index=True,
        editable=False,
        help_text=_('Organization owning the environment')
    )

    # Integration details
    channel = models.CharField(
        max_length=20,
        choices=ChannelType.choices,
        help_text=_('Delivery channel served by the provider')
    )
    provider_id = models.CharField(
        max_length=50,
        help_text=_('Provider implementation, e.g. sendgrid or twilio')
    )
    name = models.CharField(max_length=255, blank=True)
    identifier = models.CharField(max_length=100, blank=True)

    # Status
    active = models.BooleanField(default=False)

    # Secure values are stored encrypted, see integrations.encryption
    credentials = models.JSONField(default=dict, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Integration')
        verbose_name_plural = _('Integrations')
        ordering = ['-created_at']
        indexes = [
            models.Index(
                fields=['environment_id', 'channel', 'active'],
                name='integ_env_channel_active_idx'
            ),
        ]

    def __str__(self):
        return f"{self.name or self.provider_id} ({self.get_channel_display()})"

    @property
    def allows_multiple_active(self) -> bool:
        return allows_multiple_active(self.channel)

    def get_decrypted_credentials(self) -> dict:
        """Return credentials with secure values decrypted."""
        return decrypt_credentials(self.credentials or {})
