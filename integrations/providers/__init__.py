# Channel Providers Package
# Contains provider implementations used to verify integration credentials

from .base import (
    BaseChannelProvider,
    ProviderError,
    AuthenticationError,
    RateLimitError,
    ConfigurationError,
)
from .chat import DiscordProvider, SlackProvider
from .email import MailgunProvider, SendGridProvider, SMTPProvider
from .push import FCMProvider
from .sms import TwilioProvider

PROVIDERS = {
    provider.provider_id: provider
    for provider in (
        SendGridProvider,
        MailgunProvider,
        SMTPProvider,
        TwilioProvider,
        SlackProvider,
        DiscordProvider,
        FCMProvider,
    )
}


def get_provider_class(provider_id: str):
    """Get provider class for a given provider id."""
    return PROVIDERS.get(provider_id)


__all__ = [
    'BaseChannelProvider',
    'ProviderError',
    'AuthenticationError',
    'RateLimitError',
    'ConfigurationError',
    'PROVIDERS',
    'get_provider_class',
]
