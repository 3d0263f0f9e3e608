"""
SMS Channel Providers

Implements credential checks for:
- Twilio (account lookup)
"""

import logging
from typing import Dict, Optional, Tuple

from .base import BaseChannelProvider

logger = logging.getLogger(__name__)


class TwilioProvider(BaseChannelProvider):
    """
    Twilio SMS provider.
    Fetches the account resource with the account SID and auth token.
    """

    provider_id = 'twilio'
    display_name = 'Twilio'
    channel = 'sms'
    required_credentials = ('account_sid', 'auth_token')

    api_base_url = 'https://api.twilio.com/2010-04-01'

    def get_headers(self) -> Dict[str, str]:
        return {}

    def get_auth(self) -> Optional[Tuple[str, str]]:
        return (self.credentials.get('account_sid', ''), self.credentials.get('auth_token', ''))

    def check_credentials(self) -> Tuple[bool, str]:
        self.validate_credentials()

        account_sid = self.credentials['account_sid']
        response = self.make_request('GET', f'Accounts/{account_sid}.json')
        if response.status_code != 200:
            return False, f"Twilio check failed: {response.status_code}"

        status = response.json().get('status')
        if status != 'active':
            return False, f"Twilio account is {status}"
        return True, "Successfully connected to Twilio"
