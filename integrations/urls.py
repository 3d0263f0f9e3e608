"""
URL configuration for integrations app.
"""

from django.urls import path

from .views import IntegrationUpdateView

app_name = 'integrations'

urlpatterns = [
    path(
        'api/v1/organizations/<uuid:organization_id>/environments/<uuid:environment_id>/'
        'integrations/<uuid:integration_id>/',
        IntegrationUpdateView.as_view(),
        name='integration-update'
    ),
]
