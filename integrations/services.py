"""
Integration Services for Channel Provider Integrations.

Provides the update workflow for channel integrations:
- UpdateIntegrationService: Applies partial updates in a fixed order
  (existence check, cache invalidation, optional credential check,
  partial write, sibling deactivation, re-fetch)
- DeactivateSimilarChannelIntegrations: Keeps a single active integration
  per environment and channel
- CredentialVerifier: Checks credentials against the provider

Usage:
    service = get_update_integration_service()
    result = service.execute(UpdateIntegrationCommand(
        integration_id=integration_id,
        environment_id=environment_id,
        organization_id=organization_id,
        active=True,
    ))
    if not result.success:
        ...
"""

import logging
import smtplib
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import requests
from django.db import DatabaseError
from redis.exceptions import RedisError

from core.cache import CacheInvalidator, CacheKeyPrefix, cache_invalidator
from .encryption import encrypt_credentials
from .exceptions import (
    IntegrationError,
    IntegrationNotFound,
    CredentialValidationFailed,
    InvalidUpdateRequest,
    DependencyFailure,
)
from .models import ChannelType, Integration, allows_multiple_active
from .providers import ProviderError, get_provider_class
from .store import IntegrationStore

logger = logging.getLogger(__name__)


# Infrastructure faults reported as DependencyFailure
DEPENDENCY_ERRORS = (
    DatabaseError,
    RedisError,
    requests.RequestException,
    smtplib.SMTPException,
    OSError,
)


class _Unset:
    """Marker for request fields the caller did not send."""

    def __repr__(self):
        return 'UNSET'

    def __bool__(self):
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class UpdateIntegrationCommand:
    """Partial update of one integration. Omitted fields are left untouched."""
    integration_id: Any
    environment_id: Any
    organization_id: Any
    active: Any = UNSET
    credentials: Any = field(default=UNSET, repr=False)
    check: bool = False

    @property
    def has_active(self) -> bool:
        return self.active is not UNSET and self.active is not None

    @property
    def has_credentials(self) -> bool:
        return self.credentials is not UNSET and self.credentials is not None


@dataclass
class UpdateIntegrationResult:
    """Result of an integration update."""
    success: bool
    integration: Optional[Integration] = None
    error: Optional[IntegrationError] = None

    @classmethod
    def ok(cls, integration: Integration) -> 'UpdateIntegrationResult':
        return cls(success=True, integration=integration)

    @classmethod
    def failure(cls, error: IntegrationError) -> 'UpdateIntegrationResult':
        return cls(success=False, error=error)

    def unwrap(self) -> Integration:
        """Return the integration or raise the error."""
        if self.error is not None:
            raise self.error
        return self.integration


@dataclass
class VerificationResult:
    """Result of a provider credential check."""
    success: bool
    message: str = ''
    code: Optional[str] = None
    cause: Optional[Exception] = None


# =============================================================================
# CREDENTIAL VERIFICATION
# =============================================================================

class CredentialVerifier:
    """
    Checks credentials with the provider registered for an integration.

    Provider errors (rejected credentials, rate limits, incomplete
    configuration) produce a failed VerificationResult. Transport errors
    are not caught.
    """

    # Channels served in-house, nothing to verify
    UNVERIFIED_CHANNELS = frozenset({ChannelType.IN_APP})

    def __init__(self, provider_lookup: Callable = get_provider_class):
        self.provider_lookup = provider_lookup

    def verify(self, provider_id: str, channel: str, credentials: Dict[str, Any]) -> VerificationResult:
        if channel in self.UNVERIFIED_CHANNELS:
            return VerificationResult(success=True, message='No verification required')

        provider_class = self.provider_lookup(provider_id)
        if provider_class is None or provider_class.channel != channel:
            return VerificationResult(
                success=False,
                message=f"Provider {provider_id} is not supported for the {channel} channel",
                code='UNSUPPORTED_PROVIDER',
            )

        provider = provider_class(credentials)
        try:
            success, message = provider.check_credentials()
        except ProviderError as e:
            logger.warning(f"Credential check for {provider_id} failed: {e}")
            return VerificationResult(success=False, message=e.message, code=e.code, cause=e)

        if not success:
            logger.info(f"Credential check for {provider_id} rejected: {message}")
            return VerificationResult(success=False, message=message, code='CHECK_FAILED')

        return VerificationResult(success=True, message=message)


# =============================================================================
# CASCADE DEACTIVATION
# =============================================================================

class DeactivateSimilarChannelIntegrations:
    """
    Deactivates every other active integration of a channel in an environment.

    Pure data mutation: cache invalidation is left to the caller. Running it
    twice without an activation in between changes nothing the second time.
    """

    def __init__(self, store: Optional[IntegrationStore] = None):
        self.store = store or IntegrationStore()

    def execute(
        self,
        environment_id,
        organization_id,
        channel: str,
        exclude_integration_id,
    ) -> int:
        """
        Args:
            environment_id: Environment to enforce the rule in
            organization_id: Organization owning the environment
            channel: Channel whose siblings are deactivated
            exclude_integration_id: Integration that stays active

        Returns:
            Number of integrations deactivated
        """
        count = self.store.deactivate_channel(
            environment_id=environment_id,
            organization_id=organization_id,
            channel=channel,
            exclude_integration_id=exclude_integration_id,
        )
        if count:
            logger.info(
                f"Deactivated {count} {channel} integration(s) in environment "
                f"{environment_id}, keeping {exclude_integration_id}"
            )
        return count


# =============================================================================
# UPDATE WORKFLOW
# =============================================================================

class UpdateIntegrationService:
    """
    Applies a partial update to one integration.

    Collaborators are passed in explicitly; see get_update_integration_service
    for the default wiring.
    """

    def __init__(
        self,
        store: IntegrationStore,
        cache_invalidator: CacheInvalidator,
        verifier: CredentialVerifier,
        deactivator: DeactivateSimilarChannelIntegrations,
        encrypt: Callable[[Dict[str, Any]], Dict[str, Any]] = encrypt_credentials,
    ):
        self.store = store
        self.cache_invalidator = cache_invalidator
        self.verifier = verifier
        self.deactivator = deactivator
        self.encrypt = encrypt

    def execute(self, command: UpdateIntegrationCommand) -> UpdateIntegrationResult:
        logger.debug(f"Executing update integration command: {command!r}")

        try:
            return self._execute(command)
        except DEPENDENCY_ERRORS as e:
            logger.error(f"Update of integration {command.integration_id} failed on a dependency: {e}")
            return UpdateIntegrationResult.failure(
                DependencyFailure(f"Dependency failure while updating integration: {e}", cause=e)
            )

    def _execute(self, command: UpdateIntegrationCommand) -> UpdateIntegrationResult:
        existing = self.store.find_one(command.integration_id, command.environment_id)
        if existing is None:
            logger.warning(
                f"Integration {command.integration_id} not found in environment {command.environment_id}"
            )
            return UpdateIntegrationResult.failure(
                IntegrationNotFound(f"Entity with id {command.integration_id} not found")
            )

        # Runs before any validation so a failed attempt leaves a cold cache
        self.cache_invalidator.clear_cache(
            [CacheKeyPrefix.INTEGRATION],
            environment_id=str(command.environment_id),
        )

        if command.check:
            credentials = command.credentials if command.has_credentials else {}
            verification = self.verifier.verify(existing.provider_id, existing.channel, credentials)
            if not verification.success:
                return UpdateIntegrationResult.failure(
                    CredentialValidationFailed(verification.message, cause=verification)
                )

        update_payload = {}

        if command.has_active:
            if not isinstance(command.active, bool):
                return UpdateIntegrationResult.failure(
                    InvalidUpdateRequest(f"active must be a boolean, got {command.active!r}")
                )
            update_payload['active'] = command.active

        if command.has_credentials:
            update_payload['credentials'] = self.encrypt(command.credentials)

        if not update_payload:
            return UpdateIntegrationResult.failure(InvalidUpdateRequest('No properties found for update'))

        updated = self.store.update(command.integration_id, command.environment_id, update_payload)
        if not updated:
            # Deleted after the existence check; no cascade for a row that is gone
            logger.warning(f"Integration {command.integration_id} vanished before update")
            return UpdateIntegrationResult.failure(
                IntegrationNotFound(f"Entity with id {command.integration_id} not found")
            )
        logger.info(
            f"Updated integration {command.integration_id} fields: {', '.join(sorted(update_payload))}"
        )

        if command.active is True and not allows_multiple_active(existing.channel):
            self.deactivator.execute(
                environment_id=command.environment_id,
                organization_id=command.organization_id,
                channel=existing.channel,
                exclude_integration_id=command.integration_id,
            )

        integration = self.store.find_one(command.integration_id, command.environment_id)
        if integration is None:
            # Deleted between the write and the re-fetch
            return UpdateIntegrationResult.failure(
                IntegrationNotFound(f"Entity with id {command.integration_id} not found")
            )
        return UpdateIntegrationResult.ok(integration)


def get_update_integration_service() -> UpdateIntegrationService:
    """Build the update workflow wired to the ORM store and default cache."""
    store = IntegrationStore()
    return UpdateIntegrationService(
        store=store,
        cache_invalidator=cache_invalidator,
        verifier=CredentialVerifier(),
        deactivator=DeactivateSimilarChannelIntegrations(store),
    )
