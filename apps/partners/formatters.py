"""
Partners App - Máscaras de entrada

Funções puras aplicadas a cada digitação nos campos mascarados. Todas são
totais (nunca levantam exceção) e idempotentes: reaplicar a máscara sobre um
valor já formatado devolve o mesmo valor, pois a primeira etapa é sempre
descartar tudo que não é dígito.
"""
import re
from typing import Sequence

from .choices import Personality


def only_digits(value) -> str:
    """Remove qualquer caractere que não seja dígito."""
    return re.sub(r'[^0-9]', '', str(value or ''))


def _join(parts: Sequence[str], separators: Sequence[str]) -> str:
    # Separador só entra quando existe ao menos um dígito no grupo seguinte
    out = parts[0]
    for sep, part in zip(separators, parts[1:]):
        if not part:
            break
        out += sep + part
    return out


def format_cnpj(value) -> str:
    """
    Formata CNPJ (XX.XXX.XXX/XXXX-XX).

    Aceita entrada parcial: '1234' vira '12.34'.
    """
    cnpj = only_digits(value)[:14]
    parts = [cnpj[:2], cnpj[2:5], cnpj[5:8], cnpj[8:12], cnpj[12:]]
    return _join(parts, ['.', '.', '/', '-'])


def format_cpf(value) -> str:
    """Formata CPF (XXX.XXX.XXX-XX)."""
    cpf = only_digits(value)[:11]
    parts = [cpf[:3], cpf[3:6], cpf[6:9], cpf[9:]]
    return _join(parts, ['.', '.', '-'])


def format_cep(value) -> str:
    """Formata CEP (XXXXX-XXX)."""
    cep = only_digits(value)[:8]
    return _join([cep[:5], cep[5:]], ['-'])


def format_phone(value) -> str:
    """
    Formata telefone fixo ou celular.

    Até 10 dígitos: (XX) XXXX-XXXX
    11 dígitos:     (XX) XXXXX-XXXX
    """
    phone = only_digits(value)[:11]
    if len(phone) <= 2:
        return phone
    split = 7 if len(phone) == 11 else 6
    body = _join([phone[2:split], phone[split:]], ['-'])
    return f'({phone[:2]}) {body}'


def format_state_code(value) -> str:
    """UF: apenas letras, maiúsculas, no máximo 2."""
    return re.sub(r'[^A-Za-z]', '', str(value or '')).upper()[:2]


def format_tax_id(value, personality: str) -> str:
    if personality == Personality.INDIVIDUAL:
        return format_cpf(value)
    return format_cnpj(value)


def format_field(field: str, value, personality: str = Personality.COMPANY) -> str:
    """
    Aplica a máscara correspondente ao campo.

    Campos sem máscara são devolvidos sem alteração.
    """
    if value is None:
        return ''
    if field == 'tax_id':
        return format_tax_id(value, personality)
    if field == 'postal_code':
        return format_cep(value)
    if field == 'phone':
        return format_phone(value)
    if field == 'state_code':
        return format_state_code(value)
    return str(value)
