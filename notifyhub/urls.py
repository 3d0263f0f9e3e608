"""
URL configuration for the NotifyHub project.
"""

from django.urls import include, path

urlpatterns = [
    path('', include('integrations.urls')),
]
