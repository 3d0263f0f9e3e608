"""
Integrations API Views

REST endpoint for updating a channel integration. The view only maps HTTP
to the update workflow; ordering and invariants live in
integrations.services.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import (
    IntegrationNotFound,
    CredentialValidationFailed,
    InvalidUpdateRequest,
    DependencyFailure,
)
from .serializers import IntegrationSerializer, UpdateIntegrationSerializer
from .services import get_update_integration_service

logger = logging.getLogger(__name__)


ERROR_STATUS = {
    IntegrationNotFound: status.HTTP_404_NOT_FOUND,
    CredentialValidationFailed: status.HTTP_400_BAD_REQUEST,
    InvalidUpdateRequest: status.HTTP_400_BAD_REQUEST,
    DependencyFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def error_response(error):
    return Response(
        {
            'success': False,
            'message': error.message,
            'error_code': error.code,
        },
        status=ERROR_STATUS.get(type(error), status.HTTP_400_BAD_REQUEST),
    )


class IntegrationUpdateView(APIView):
    """
    Update an integration of an environment.

    PUT/PATCH /api/v1/organizations/{organization_id}/environments/{environment_id}/integrations/{integration_id}/
    """

    def put(self, request, organization_id, environment_id, integration_id):
        serializer = UpdateIntegrationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {
                    'success': False,
                    'message': 'Validation failed',
                    'error_code': 'VALIDATION_ERROR',
                    'errors': serializer.errors,
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        command = serializer.to_command(integration_id, environment_id, organization_id)
        result = get_update_integration_service().execute(command)

        if not result.success:
            return error_response(result.error)

        return Response(
            {
                'success': True,
                'data': IntegrationSerializer(result.integration).data,
                'message': 'Integration updated successfully',
            },
            status=status.HTTP_200_OK,
        )

    patch = put
