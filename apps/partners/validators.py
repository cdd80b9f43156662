"""
Partners App - Validações do cadastro de parceiros

Predicados puros de estrutura (quantidade de dígitos, formato de e-mail),
usados tanto na validação inline (ao sair do campo) quanto na validação
completa antes do envio.

Não há cálculo de dígito verificador: CNPJ e CPF são validados apenas pela
quantidade de dígitos.
"""
from __future__ import annotations

import re
from typing import TYPE_CHECKING, Dict, Optional

from django.core.exceptions import ValidationError

from .choices import REQUIRED_FIELDS, Personality
from .formatters import only_digits

if TYPE_CHECKING:
    from .state import PartnerDraft


EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
STATE_CODE_RE = re.compile(r'^[A-Z]{2}$')

CNPJ_LENGTH = 14
CPF_LENGTH = 11
CEP_LENGTH = 8

REQUIRED_MESSAGES = {
    'legal_name': 'Razão Social é obrigatória',
    'postal_code': 'CEP é obrigatório',
    'state_code': 'UF é obrigatória',
    'city': 'Município é obrigatório',
    'street': 'Logradouro é obrigatório',
    'number': 'Número é obrigatório',
    'neighborhood': 'Bairro é obrigatório',
    'email': 'Email é obrigatório',
    'phone': 'Telefone é obrigatório',
}


def tax_id_label(personality: str) -> str:
    return 'CPF' if personality == Personality.INDIVIDUAL else 'CNPJ'


def is_blank(value) -> bool:
    return not str(value or '').strip()


def is_valid_cnpj(value) -> bool:
    return len(only_digits(value)) == CNPJ_LENGTH


def is_valid_cpf(value) -> bool:
    return len(only_digits(value)) == CPF_LENGTH


def is_valid_tax_id(value, personality: str) -> bool:
    if personality == Personality.INDIVIDUAL:
        return is_valid_cpf(value)
    return is_valid_cnpj(value)


def is_valid_cep(value) -> bool:
    return len(only_digits(value)) == CEP_LENGTH


def is_valid_email(value) -> bool:
    return bool(EMAIL_RE.match(str(value or '')))


def is_valid_phone(value) -> bool:
    return 10 <= len(only_digits(value)) <= 11


def is_valid_state_code(value) -> bool:
    return bool(STATE_CODE_RE.match(str(value or '')))


# -----------------------------------------------------------------------------
# Validadores no estilo Django (levantam ValidationError)
# -----------------------------------------------------------------------------

def validate_tax_id(value: str, personality: str = Personality.COMPANY) -> None:
    """
    Valida CNPJ (14 dígitos) ou CPF (11 dígitos) conforme a personalidade.

    Args:
        value: Documento com ou sem formatação
        personality: Personality.COMPANY ou Personality.INDIVIDUAL

    Raises:
        ValidationError: Se a quantidade de dígitos não confere
    """
    if not is_valid_tax_id(value, personality):
        raise ValidationError(f'{tax_id_label(personality)} inválido', code='invalid_tax_id')


def validate_cep(value: str) -> None:
    if not is_valid_cep(value):
        raise ValidationError('CEP inválido', code='invalid_cep')


def validate_email_shape(value: str) -> None:
    if not is_valid_email(value):
        raise ValidationError('Email inválido', code='invalid_email')


def validate_phone(value: str) -> None:
    if not is_valid_phone(value):
        raise ValidationError('Telefone inválido', code='invalid_phone')


def validate_state_code(value: str) -> None:
    if not is_valid_state_code(value):
        raise ValidationError('UF inválida', code='invalid_state_code')


def required_message(field: str, personality: str) -> str:
    if field == 'tax_id':
        return f'{tax_id_label(personality)} é obrigatório'
    return REQUIRED_MESSAGES[field]


def _pattern_error(field: str, draft: 'PartnerDraft') -> Optional[str]:
    value = getattr(draft, field)
    try:
        if field == 'tax_id':
            validate_tax_id(value, draft.personality)
        elif field == 'postal_code':
            validate_cep(value)
        elif field == 'email':
            validate_email_shape(value)
        elif field == 'phone':
            validate_phone(value)
        elif field == 'state_code':
            validate_state_code(value)
    except ValidationError as e:
        return e.messages[0]
    return None


def validate_field(field: str, draft: 'PartnerDraft') -> Optional[str]:
    """
    Valida um único campo do rascunho.

    Returns:
        Mensagem de erro ou None se o campo está válido
    """
    value = getattr(draft, field, '')
    if is_blank(value):
        if field in REQUIRED_FIELDS:
            return required_message(field, draft.personality)
        return None
    return _pattern_error(field, draft)


def validate_draft(draft: 'PartnerDraft') -> Dict[str, str]:
    """
    Validação completa antes do envio.

    Campos obrigatórios vazios recebem a mensagem de obrigatoriedade; campos
    preenchidos com formato incorreto recebem a mensagem de formato.

    Returns:
        Mapa campo -> mensagem; vazio quando o rascunho é válido
    """
    errors = {}
    for field in REQUIRED_FIELDS:
        message = validate_field(field, draft)
        if message:
            errors[field] = message
    return errors
