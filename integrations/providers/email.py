"""
Email Channel Providers

Implements credential checks for:
- SendGrid (API key scopes)
- Mailgun (domain lookup)
- SMTP (Generic, login handshake)
"""

import logging
import smtplib
from typing import Dict, Optional, Tuple

from .base import (
    BaseChannelProvider,
    AuthenticationError,
    ConfigurationError,
)

logger = logging.getLogger(__name__)


class SendGridProvider(BaseChannelProvider):
    """
    SendGrid email provider.
    A key is usable when it is granted the mail.send scope.
    """

    provider_id = 'sendgrid'
    display_name = 'SendGrid'
    channel = 'email'
    required_credentials = ('api_key',)

    api_base_url = 'https://api.sendgrid.com/v3'

    def check_credentials(self) -> Tuple[bool, str]:
        self.validate_credentials()

        response = self.make_request('GET', 'scopes')
        if response.status_code != 200:
            return False, f"SendGrid check failed: {response.status_code}"

        scopes = response.json().get('scopes', [])
        if 'mail.send' not in scopes:
            return False, "SendGrid API key is missing the mail.send scope"
        return True, "Successfully connected to SendGrid"


class MailgunProvider(BaseChannelProvider):
    """
    Mailgun email provider.
    Uses basic auth with the 'api' user and checks the sending domain.
    """

    provider_id = 'mailgun'
    display_name = 'Mailgun'
    channel = 'email'
    required_credentials = ('api_key', 'domain')

    US_BASE_URL = 'https://api.mailgun.net/v3'
    EU_BASE_URL = 'https://api.eu.mailgun.net/v3'

    @property
    def api_base_url(self) -> str:
        if self.credentials.get('base_url'):
            return self.credentials['base_url'].rstrip('/')
        if self.credentials.get('region', '').lower() == 'eu':
            return self.EU_BASE_URL
        return self.US_BASE_URL

    def get_headers(self) -> Dict[str, str]:
        return {}

    def get_auth(self) -> Optional[Tuple[str, str]]:
        return ('api', self.credentials.get('api_key', ''))

    def check_credentials(self) -> Tuple[bool, str]:
        self.validate_credentials()

        domain = self.credentials['domain']
        response = self.make_request('GET', f'domains/{domain}')
        if response.status_code == 404:
            return False, f"Mailgun domain {domain} not found"
        if response.status_code != 200:
            return False, f"Mailgun check failed: {response.status_code}"
        return True, "Successfully connected to Mailgun"


class SMTPProvider(BaseChannelProvider):
    """
    Generic SMTP provider.
    Opens a connection and authenticates without sending a message.
    """

    provider_id = 'smtp'
    display_name = 'SMTP'
    channel = 'email'
    required_credentials = ('host',)

    def check_credentials(self) -> Tuple[bool, str]:
        self.validate_credentials()

        host = self.credentials['host']
        try:
            port = int(self.credentials.get('port') or 587)
        except (TypeError, ValueError):
            raise ConfigurationError(f"Invalid SMTP port: {self.credentials.get('port')}")

        use_ssl = bool(self.credentials.get('secure')) and port == 465
        smtp_class = smtplib.SMTP_SSL if use_ssl else smtplib.SMTP

        with smtp_class(host, port, timeout=self.request_timeout) as server:
            if not use_ssl and self.credentials.get('secure', True):
                server.starttls()
            user = self.credentials.get('user')
            if user:
                try:
                    server.login(user, self.credentials.get('password', ''))
                except smtplib.SMTPAuthenticationError as e:
                    raise AuthenticationError(f"SMTP authentication failed: {e.smtp_code}") from e
        return True, f"Successfully connected to {host}:{port}"
