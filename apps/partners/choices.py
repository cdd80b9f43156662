"""
Partners App - Enumerações e constantes do formulário de cadastro.
"""
from django.db import models


class Personality(models.TextChoices):
    INDIVIDUAL = 'fisica', 'Pessoa Física'
    COMPANY = 'juridica', 'Pessoa Jurídica'


class SubmitPhase(models.TextChoices):
    IDLE = 'IDLE', 'Aguardando'
    VALIDATING = 'VALIDATING', 'Validando'
    SUBMITTING = 'SUBMITTING', 'Enviando'


class LookupKind(models.TextChoices):
    CEP = 'cep', 'CEP'
    CNPJ = 'cnpj', 'CNPJ'


class LookupOutcome(models.TextChoices):
    FOUND = 'found', 'Encontrado'
    NOT_FOUND = 'not_found', 'Não encontrado'
    ERROR = 'error', 'Erro'


# Campos obrigatórios, na ordem do formulário (complemento e observação ficam de fora)
REQUIRED_FIELDS = (
    'legal_name', 'tax_id', 'postal_code', 'state_code', 'city',
    'street', 'number', 'neighborhood', 'email', 'phone',
)

OPTIONAL_FIELDS = ('complement', 'note')

TEXT_FIELDS = REQUIRED_FIELDS + OPTIONAL_FIELDS

FIELD_LABELS = {
    'legal_name': 'Razão Social',
    'tax_id': 'CNPJ/CPF',
    'postal_code': 'CEP',
    'state_code': 'UF',
    'city': 'Município',
    'street': 'Logradouro',
    'number': 'Número',
    'neighborhood': 'Bairro',
    'email': 'Email',
    'phone': 'Telefone',
    'complement': 'Complemento',
    'note': 'Observação',
}

# Campo de origem de cada consulta automática
LOOKUP_SOURCE_FIELDS = {
    LookupKind.CEP: 'postal_code',
    LookupKind.CNPJ: 'tax_id',
}
