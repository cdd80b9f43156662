"""
Partners App - Consultas externas de CEP e CNPJ

Clientes somente-leitura para dois cadastros públicos:

    - ViaCEP:    GET https://viacep.com.br/ws/{cep}/json/
    - ReceitaWS: GET https://www.receitaws.com.br/v1/cnpj/{cnpj}

Cada consulta devolve um LookupResult com o desfecho (encontrado, não
encontrado, erro), os campos a sobrescrever no rascunho e a notificação a
exibir. Falhas de rede não são repetidas.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

import requests
from django.conf import settings

from .choices import LookupKind, LookupOutcome, Personality
from .exceptions import LookupNotFound, LookupTransportError
from .formatters import only_digits
from .notifications import (
    CEP_ERROR,
    CEP_FOUND,
    CEP_NOT_FOUND,
    CNPJ_ERROR,
    CNPJ_FOUND,
    CNPJ_NOT_FOUND,
    Notification,
)
from .validators import is_valid_cep, is_valid_cnpj

logger = logging.getLogger(__name__)

DEFAULT_VIACEP_URL = 'https://viacep.com.br/ws/{cep}/json/'
DEFAULT_RECEITAWS_URL = 'https://www.receitaws.com.br/v1/cnpj/{cnpj}'
DEFAULT_TIMEOUT = 10


@dataclass(frozen=True)
class LookupRequest:
    """Consulta disparada por uma edição; sequence identifica a edição de origem."""
    kind: str
    key: str
    sequence: int


@dataclass
class LookupResult:
    kind: str
    outcome: str
    fields: Dict[str, str] = field(default_factory=dict)
    notification: Optional[Notification] = None

    @property
    def found(self) -> bool:
        return self.outcome == LookupOutcome.FOUND

    def as_dict(self) -> dict:
        return {
            'kind': self.kind,
            'outcome': self.outcome,
            'fields': dict(self.fields),
            'notification': self.notification.as_dict() if self.notification else None,
        }


def build_session() -> requests.Session:
    """Sessão HTTP compartilhada pelas consultas (sem retry automático)."""
    session = requests.Session()
    session.headers.update({'Accept': 'application/json'})
    return session


class BaseLookupClient:
    """Fluxo comum: requisição -> parse -> LookupResult."""

    kind: str = ''
    url_setting: str = ''
    default_url: str = ''
    found_notification: Notification
    not_found_notification: Notification
    error_notification: Notification

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None,
                 url_template: Optional[str] = None):
        self.session = session or build_session()
        self.timeout = timeout if timeout is not None else getattr(settings, 'LOOKUP_TIMEOUT', DEFAULT_TIMEOUT)
        self.url_template = url_template or getattr(settings, self.url_setting, self.default_url)

    def build_url(self, key: str) -> str:
        raise NotImplementedError

    def parse(self, payload: dict) -> Dict[str, str]:
        """Extrai os campos do rascunho; levanta LookupNotFound quando não há registro."""
        raise NotImplementedError

    def request(self, key: str) -> dict:
        url = self.build_url(key)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            raise LookupTransportError(f'{self.kind}: {e}') from e
        if not isinstance(payload, dict):
            raise LookupTransportError(f'{self.kind}: resposta inesperada')
        return payload

    def fetch(self, key: str) -> LookupResult:
        digits = only_digits(key)
        logger.info(f"Consultando {self.kind} {digits}")
        try:
            fields = self.parse(self.request(digits))
        except LookupNotFound:
            logger.info(f"{self.kind} {digits} não encontrado")
            return LookupResult(self.kind, LookupOutcome.NOT_FOUND, notification=self.not_found_notification)
        except LookupTransportError as e:
            logger.warning(f"Falha na consulta de {self.kind} {digits}: {e}")
            return LookupResult(self.kind, LookupOutcome.ERROR, notification=self.error_notification)
        return LookupResult(self.kind, LookupOutcome.FOUND, fields=fields, notification=self.found_notification)


class CepLookupClient(BaseLookupClient):
    kind = LookupKind.CEP
    url_setting = 'VIACEP_URL'
    default_url = DEFAULT_VIACEP_URL
    found_notification = CEP_FOUND
    not_found_notification = CEP_NOT_FOUND
    error_notification = CEP_ERROR

    # chave do ViaCEP -> campo do rascunho
    FIELD_MAP = {
        'logradouro': 'street',
        'bairro': 'neighborhood',
        'localidade': 'city',
        'uf': 'state_code',
    }

    def build_url(self, key: str) -> str:
        return self.url_template.format(cep=key)

    def parse(self, payload: dict) -> Dict[str, str]:
        # ViaCEP responde 200 com {"erro": true} (ou "true") para CEP inexistente
        if payload.get('erro'):
            raise LookupNotFound(self.kind)
        return {
            target: str(payload.get(source) or '')
            for source, target in self.FIELD_MAP.items()
            if source in payload
        }


class CnpjLookupClient(BaseLookupClient):
    kind = LookupKind.CNPJ
    url_setting = 'RECEITAWS_URL'
    default_url = DEFAULT_RECEITAWS_URL
    found_notification = CNPJ_FOUND
    not_found_notification = CNPJ_NOT_FOUND
    error_notification = CNPJ_ERROR

    def build_url(self, key: str) -> str:
        return self.url_template.format(cnpj=key)

    def parse(self, payload: dict) -> Dict[str, str]:
        if payload.get('status') != 'OK':
            raise LookupNotFound(payload.get('message') or self.kind)
        return {'legal_name': str(payload.get('nome') or '')}


def should_lookup_cep(field_name: str, draft) -> bool:
    """Consulta de CEP dispara assim que o campo atinge 8 dígitos."""
    return field_name == 'postal_code' and is_valid_cep(draft.postal_code)


def should_lookup_cnpj(field_name: str, draft) -> bool:
    """Consulta de CNPJ só para pessoa jurídica, ao atingir 14 dígitos."""
    return (
        field_name == 'tax_id'
        and draft.personality == Personality.COMPANY
        and is_valid_cnpj(draft.tax_id)
    )
