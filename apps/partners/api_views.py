from rest_framework import status, views
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .choices import LookupOutcome
from .formatters import format_field, only_digits
from .lookups import CepLookupClient, CnpjLookupClient
from .serializers import FormatFieldSerializer, PartnerDraftSerializer
from .state import PartnerDraft, compute_completed, compute_progress
from .validators import is_valid_cep, is_valid_cnpj, validate_draft

OUTCOME_STATUS = {
    LookupOutcome.FOUND: status.HTTP_200_OK,
    LookupOutcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    LookupOutcome.ERROR: status.HTTP_502_BAD_GATEWAY,
}


class BaseLookupView(views.APIView):
    """Consulta externa exposta para o front-end."""
    permission_classes = [AllowAny]
    client_class = None
    invalid_message = ''

    def is_valid_key(self, digits: str) -> bool:
        raise NotImplementedError

    def get(self, request, key, *args, **kwargs):
        digits = only_digits(key)
        if not self.is_valid_key(digits):
            return Response({"error": self.invalid_message}, status=status.HTTP_400_BAD_REQUEST)

        result = self.client_class().fetch(digits)
        return Response(result.as_dict(), status=OUTCOME_STATUS[result.outcome])


class CepLookupView(BaseLookupView):
    """
    GET /api/v1/lookups/cep/<cep>/
    """
    client_class = CepLookupClient
    invalid_message = 'CEP inválido'

    def is_valid_key(self, digits):
        return is_valid_cep(digits)


class CnpjLookupView(BaseLookupView):
    """
    GET /api/v1/lookups/cnpj/<cnpj>/
    """
    client_class = CnpjLookupClient
    invalid_message = 'CNPJ inválido'

    def is_valid_key(self, digits):
        return is_valid_cnpj(digits)


class FormatFieldView(views.APIView):
    """
    POST /api/v1/partners/format/
    Aplica a máscara de um campo: {"field", "value", "personality"}.
    """
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = FormatFieldSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return Response({
            "field": data['field'],
            "value": format_field(data['field'], data['value'], data['personality']),
        })


class ValidateDraftView(views.APIView):
    """
    POST /api/v1/partners/validate/
    Validação completa do rascunho, com progresso de preenchimento.
    """
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = PartnerDraftSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        draft = PartnerDraft.from_mapping(serializer.validated_data)
        errors = validate_draft(draft)
        return Response({
            "valid": not errors,
            "errors": errors,
            "completed": sorted(compute_completed(draft)),
            "progress": compute_progress(draft),
        }, status=status.HTTP_200_OK if not errors else status.HTTP_422_UNPROCESSABLE_ENTITY)
