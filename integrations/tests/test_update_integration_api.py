"""
Integration Update API Tests

Tests the PUT/PATCH endpoint mapping to the update workflow.
"""

import uuid
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from integrations.models import ChannelType, Integration
from integrations.services import VerificationResult


@pytest.fixture
def api_client():
    return APIClient()


def update_url(integration, environment_id=None):
    return reverse('integrations:integration-update', kwargs={
        'organization_id': integration.organization_id,
        'environment_id': environment_id or integration.environment_id,
        'integration_id': integration.id,
    })


@pytest.mark.django_db
class TestIntegrationUpdateAPI:
    """Test IntegrationUpdateView."""

    def test_activate_returns_updated_integration(self, api_client, integration_factory):
        integration = integration_factory(active=False)
        sibling = integration_factory(active=True, provider_id='mailgun')

        response = api_client.put(update_url(integration), {'active': True}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['data']['id'] == str(integration.id)
        assert response.data['data']['active'] is True
        sibling.refresh_from_db()
        assert sibling.active is False

    def test_credentials_are_masked_in_response(self, api_client, integration_factory):
        integration = integration_factory()

        response = api_client.patch(
            update_url(integration),
            {'credentials': {'api_key': 'SG.fresh', 'from': 'ops@example.com'}},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['credentials'] == {'api_key': '********', 'from': 'ops@example.com'}
        stored = Integration.objects.get(pk=integration.pk)
        assert stored.get_decrypted_credentials()['api_key'] == 'SG.fresh'

    def test_empty_payload_is_bad_request(self, api_client, integration_factory):
        integration = integration_factory()

        response = api_client.put(update_url(integration), {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error_code'] == 'INVALID_REQUEST'

    def test_form_body_without_active_leaves_it_alone(self, api_client, integration_factory):
        integration = integration_factory(active=True)

        response = api_client.patch(update_url(integration), {'check': 'false'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error_code'] == 'INVALID_REQUEST'
        integration.refresh_from_db()
        assert integration.active is True

    def test_form_body_can_deactivate(self, api_client, integration_factory):
        integration = integration_factory(active=True)

        response = api_client.patch(update_url(integration), {'active': 'false'})

        assert response.status_code == status.HTTP_200_OK
        integration.refresh_from_db()
        assert integration.active is False

    def test_unknown_environment_is_not_found(self, api_client, integration_factory):
        integration = integration_factory()

        response = api_client.put(
            update_url(integration, environment_id=uuid.uuid4()), {'active': True}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['error_code'] == 'NOT_FOUND'

    def test_invalid_payload_type(self, api_client, integration_factory):
        integration = integration_factory()

        response = api_client.put(update_url(integration), {'credentials': 'plain'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error_code'] == 'VALIDATION_ERROR'
        assert 'credentials' in response.data['errors']

    @patch('integrations.services.CredentialVerifier.verify')
    def test_failed_check_is_bad_request(self, mock_verify, api_client, integration_factory):
        mock_verify.return_value = VerificationResult(success=False, message='Invalid API key')
        integration = integration_factory(channel=ChannelType.EMAIL, active=False)

        response = api_client.put(
            update_url(integration),
            {'active': True, 'credentials': {'api_key': 'bad'}, 'check': True},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error_code'] == 'VALIDATION_FAILED'
        assert response.data['message'] == 'Invalid API key'
        integration.refresh_from_db()
        assert integration.active is False

    @patch('integrations.store.IntegrationStore.update')
    def test_database_failure_is_service_unavailable(self, mock_update, api_client, integration_factory):
        mock_update.side_effect = DatabaseError('read-only transaction')
        integration = integration_factory()

        response = api_client.put(update_url(integration), {'active': True}, format='json')

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['error_code'] == 'DEPENDENCY_FAILURE'
