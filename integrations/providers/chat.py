"""
Chat Channel Providers

Chat providers deliver through incoming webhooks, so the check validates
the webhook address without posting a message.
"""

import logging
from typing import Tuple
from urllib.parse import urlparse

from .base import BaseChannelProvider, ConfigurationError

logger = logging.getLogger(__name__)


class WebhookChatProvider(BaseChannelProvider):
    """Base class for webhook-based chat providers."""

    channel = 'chat'
    required_credentials = ('webhook_url',)

    # Hosts that issue incoming webhooks for the provider
    webhook_hosts: Tuple[str, ...] = ()
    webhook_path_prefix: str = '/'

    def check_credentials(self) -> Tuple[bool, str]:
        self.validate_credentials()

        parsed = urlparse(self.credentials['webhook_url'])
        if parsed.scheme != 'https':
            raise ConfigurationError(f"{self.display_name} webhook URL must use https")
        if parsed.hostname not in self.webhook_hosts:
            return False, f"Not a {self.display_name} webhook URL: {parsed.hostname}"
        if not parsed.path.startswith(self.webhook_path_prefix):
            return False, f"Not a {self.display_name} incoming webhook path"
        return True, f"{self.display_name} webhook URL is valid"


class SlackProvider(WebhookChatProvider):
    provider_id = 'slack'
    display_name = 'Slack'
    webhook_hosts = ('hooks.slack.com',)
    webhook_path_prefix = '/services/'


class DiscordProvider(WebhookChatProvider):
    provider_id = 'discord'
    display_name = 'Discord'
    webhook_hosts = ('discord.com', 'discordapp.com')
    webhook_path_prefix = '/api/webhooks/'
