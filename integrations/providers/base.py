"""
Base Channel Provider

Abstract base class for delivery channel providers. Implements the shared
HTTP session, authenticated requests and error mapping used when checking
provider credentials.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional, Tuple

import requests
from django.conf import settings

from ..exceptions import IntegrationError

logger = logging.getLogger(__name__)


class ProviderError(IntegrationError):
    """Base exception for provider errors."""

    code = 'PROVIDER_ERROR'


class AuthenticationError(ProviderError):
    """Raised when the provider rejects the credentials."""

    code = 'AUTHENTICATION_FAILED'


class RateLimitError(ProviderError):
    """Raised when rate limit is exceeded."""

    code = 'RATE_LIMITED'

    def __init__(self, message, retry_after=None):
        super().__init__(message)
        self.retry_after = retry_after


class ConfigurationError(ProviderError):
    """Raised when credentials are incomplete or malformed."""

    code = 'CONFIGURATION_ERROR'


DEFAULT_RETRY_AFTER = 60


def parse_retry_after(value) -> int:
    """
    Seconds to wait from a Retry-After header.
    Accepts delta-seconds or an HTTP-date; anything else gives the default.
    """
    if value is None:
        return DEFAULT_RETRY_AFTER
    value = str(value).strip()
    if value.isdigit():
        return int(value)
    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER
    if retry_at is None:
        return DEFAULT_RETRY_AFTER
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    return max(0, int((retry_at - datetime.now(timezone.utc)).total_seconds()))


class BaseChannelProvider(ABC):
    """
    Abstract base class for all channel providers.

    Subclasses must implement:
    - provider_id: Unique provider identifier
    - channel: Delivery channel the provider serves
    - check_credentials(): Verify credentials are usable
    """

    # Provider identification - override in subclasses
    provider_id: str = ''
    display_name: str = ''
    channel: str = ''

    # Credential keys that must be present and non-empty
    required_credentials: Tuple[str, ...] = ()

    # Required keys that may hold a mapping instead of a string
    structured_credentials: Tuple[str, ...] = ()

    # API configuration
    api_base_url: str = ''

    def __init__(self, credentials: Optional[Dict[str, Any]] = None):
        """
        Initialize provider with plain-text credentials.

        Args:
            credentials: Credential mapping as supplied by the caller
        """
        self.credentials = credentials or {}
        self._session = None

    @property
    def request_timeout(self) -> int:
        return getattr(settings, 'PROVIDER_REQUEST_TIMEOUT', 30)

    @property
    def session(self) -> requests.Session:
        """Get or create requests session with default configuration."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({
                'User-Agent': f'NotifyHub/{getattr(settings, "VERSION", "1.0")}',
                'Accept': 'application/json',
            })
        return self._session

    def validate_credentials(self) -> None:
        """Raise ConfigurationError when a required credential is missing or malformed."""
        if not isinstance(self.credentials, dict):
            raise ConfigurationError("Credentials must be a mapping")

        missing = [key for key in self.required_credentials if not self.credentials.get(key)]
        if missing:
            raise ConfigurationError(
                f"{self.display_name or self.provider_id} is missing credentials: {', '.join(missing)}"
            )

        malformed = [
            key for key in self.required_credentials
            if key not in self.structured_credentials and not isinstance(self.credentials[key], str)
        ]
        if malformed:
            raise ConfigurationError(
                f"{self.display_name or self.provider_id} credentials must be strings: {', '.join(malformed)}"
            )

    def get_headers(self) -> Dict[str, str]:
        """
        Get HTTP headers for API requests.
        Override to customize headers.
        """
        headers = {}
        if self.credentials.get('api_key'):
            headers['Authorization'] = f"Bearer {self.credentials['api_key']}"
        return headers

    def get_auth(self) -> Optional[Tuple[str, str]]:
        """HTTP basic auth tuple, if the provider uses one."""
        return None

    def make_request(
        self,
        method: str,
        endpoint: str,
        params: Dict = None,
        headers: Dict = None,
    ) -> requests.Response:
        """
        Make authenticated API request with error handling.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            params: URL query parameters
            headers: Additional headers

        Returns:
            Response object
        """
        url = f"{self.api_base_url}/{endpoint.lstrip('/')}"

        request_headers = self.get_headers()
        if headers:
            request_headers.update(headers)

        response = self.session.request(
            method=method,
            url=url,
            params=params,
            headers=request_headers,
            auth=self.get_auth(),
            timeout=self.request_timeout
        )

        # Handle rate limiting
        if response.status_code == 429:
            raise RateLimitError(
                "Rate limit exceeded",
                retry_after=parse_retry_after(response.headers.get('Retry-After'))
            )

        # Handle authentication errors
        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"{self.display_name} rejected the credentials ({response.status_code})"
            )

        return response

    @abstractmethod
    def check_credentials(self) -> Tuple[bool, str]:
        """
        Verify the credentials against the provider.

        Returns:
            Tuple of (success, message)
        """
        pass
