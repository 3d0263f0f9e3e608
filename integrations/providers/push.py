"""
Push Channel Providers

Implements credential checks for:
- Firebase Cloud Messaging (service account structure)
"""

import json
import logging
from typing import Tuple

from .base import BaseChannelProvider, ConfigurationError

logger = logging.getLogger(__name__)


class FCMProvider(BaseChannelProvider):
    """
    Firebase Cloud Messaging provider.
    The credential is a Google service account, as JSON text or mapping.
    """

    provider_id = 'fcm'
    display_name = 'Firebase Cloud Messaging'
    channel = 'push'
    required_credentials = ('service_account',)
    structured_credentials = ('service_account',)

    SERVICE_ACCOUNT_FIELDS = ('project_id', 'private_key', 'client_email')

    def load_service_account(self) -> dict:
        service_account = self.credentials['service_account']
        if isinstance(service_account, str):
            try:
                service_account = json.loads(service_account)
            except ValueError as e:
                raise ConfigurationError(f"Service account is not valid JSON: {e}") from e
        if not isinstance(service_account, dict):
            raise ConfigurationError("Service account must be a JSON object")
        return service_account

    def check_credentials(self) -> Tuple[bool, str]:
        self.validate_credentials()

        service_account = self.load_service_account()
        missing = [f for f in self.SERVICE_ACCOUNT_FIELDS if not service_account.get(f)]
        if missing:
            return False, f"Service account is missing: {', '.join(missing)}"
        if service_account.get('type', 'service_account') != 'service_account':
            return False, "Credential is not a service account"
        return True, f"Service account for {service_account['project_id']} is valid"
