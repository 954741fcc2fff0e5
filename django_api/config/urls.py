"""
Root URL configuration
"""
from django.urls import include, path

urlpatterns = [
    path('api/', include('django_api.api.urls')),
]
