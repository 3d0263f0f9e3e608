"""
Integration error taxonomy.

Business outcomes of the update workflow (not found, failed credential
check, empty update) are returned to callers inside an
UpdateIntegrationResult; infrastructure faults are wrapped in
DependencyFailure. Provider clients raise the provider-level subclasses
defined in integrations.providers.base.
"""

from typing import Any, Optional


class IntegrationError(Exception):
    """Base exception for integration errors."""

    code = 'INTEGRATION_ERROR'

    def __init__(self, message: str = '', cause: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def to_dict(self):
        return {'code': self.code, 'message': self.message}


class IntegrationNotFound(IntegrationError):
    """Target integration does not exist in the requested environment."""

    code = 'NOT_FOUND'


class CredentialValidationFailed(IntegrationError):
    """Provider rejected the credentials during re-verification."""

    code = 'VALIDATION_FAILED'


class InvalidUpdateRequest(IntegrationError):
    """The request carries no field to update."""

    code = 'INVALID_REQUEST'


class DependencyFailure(IntegrationError):
    """Store, cache or provider call failed at the infrastructure level."""

    code = 'DEPENDENCY_FAILURE'
