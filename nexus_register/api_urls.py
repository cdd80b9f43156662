from django.urls import path

from apps.partners.api_views import (
    CepLookupView,
    CnpjLookupView,
    FormatFieldView,
    ValidateDraftView,
)

urlpatterns = [
    path('lookups/cep/<str:key>/', CepLookupView.as_view(), name='api-lookup-cep'),
    path('lookups/cnpj/<str:key>/', CnpjLookupView.as_view(), name='api-lookup-cnpj'),
    path('partners/format/', FormatFieldView.as_view(), name='api-partner-format'),
    path('partners/validate/', ValidateDraftView.as_view(), name='api-partner-validate'),
]
