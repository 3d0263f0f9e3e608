"""
NotifyHub Test Configuration - pytest fixtures and factories

This module provides:
- factory_boy factories for integrations
- Shared fixtures for environment scoping and cache isolation

RUNNING TESTS:
# Run all tests
pytest -v

# Run by module
pytest integrations/tests/test_update_integration.py -v
"""

import uuid

import pytest
from django.core.cache import cache

import factory
from factory.django import DjangoModelFactory

from integrations.encryption import encrypt_credentials
from integrations.models import ChannelType


# ============================================================================
# INTEGRATION FACTORIES
# ============================================================================

class IntegrationFactory(DjangoModelFactory):
    """Factory for Integration model."""

    class Meta:
        model = 'integrations.Integration'

    environment_id = factory.LazyFunction(uuid.uuid4)
    organization_id = factory.LazyFunction(uuid.uuid4)
    channel = ChannelType.EMAIL
    provider_id = 'sendgrid'
    name = factory.Sequence(lambda n: f'Integration {n}')
    identifier = factory.Sequence(lambda n: f'integration-{n}')
    active = False
    credentials = factory.LazyFunction(
        lambda: encrypt_credentials({'api_key': 'SG.test-key', 'from': 'no-reply@example.com'})
    )


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def clear_cache():
    """Isolate tests sharing the local memory cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def environment_id():
    return uuid.uuid4()


@pytest.fixture
def organization_id():
    return uuid.uuid4()


@pytest.fixture
def integration_factory(db, environment_id, organization_id):
    """Factory fixture creating integrations in the shared environment."""
    def _create(**kwargs):
        kwargs.setdefault('environment_id', environment_id)
        kwargs.setdefault('organization_id', organization_id)
        return IntegrationFactory(**kwargs)
    return _create
