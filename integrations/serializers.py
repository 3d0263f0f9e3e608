"""
Integrations API Serializers

Request and response serializers for the integration update endpoint.
"""

from rest_framework import serializers

from .encryption import mask_credentials
from .models import Integration
from .services import UNSET, UpdateIntegrationCommand


class IntegrationSerializer(serializers.ModelSerializer):
    """
    Read serializer for integrations.
    Secure credential values are masked.
    """
    credentials = serializers.SerializerMethodField()

    class Meta:
        model = Integration
        fields = [
            'id',
            'environment_id',
            'organization_id',
            'channel',
            'provider_id',
            'name',
            'identifier',
            'active',
            'credentials',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_credentials(self, obj):
        return mask_credentials(obj.get_decrypted_credentials())


class UpdateIntegrationSerializer(serializers.Serializer):
    """
    Payload for a partial integration update.
    Fields left out of the payload are not touched.
    """
    active = serializers.BooleanField(required=False)
    credentials = serializers.DictField(required=False, allow_null=True)
    check = serializers.BooleanField(required=False, default=False)

    def __init__(self, *args, **kwargs):
        # Form bodies turn an omitted boolean into False unless the serializer is partial
        kwargs.setdefault('partial', True)
        super().__init__(*args, **kwargs)

    def to_command(self, integration_id, environment_id, organization_id) -> UpdateIntegrationCommand:
        data = self.validated_data
        return UpdateIntegrationCommand(
            integration_id=integration_id,
            environment_id=environment_id,
            organization_id=organization_id,
            active=data.get('active', UNSET),
            credentials=data.get('credentials', UNSET),
            check=data.get('check', False),
        )
