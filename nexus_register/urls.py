"""
Nexus Register URL Configuration
"""
from django.urls import include, path
from django.views.generic import RedirectView

urlpatterns = [
    path('', RedirectView.as_view(pattern_name='partners:partner_register', permanent=False)),
    path('partners/', include('apps.partners.urls')),

    # API consumida pelo front-end
    path('api/v1/', include('nexus_register.api_urls')),
]
