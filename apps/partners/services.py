"""
Partners App - Serviços do formulário de cadastro de parceiros

Este módulo liga o estado puro (state.py) aos efeitos: consultas externas,
notificações e o envio (simulado) do cadastro.

FLUXO DE EDIÇÃO:
    digitação -> máscara -> atualização do estado -> limpeza do erro do campo
    -> consulta automática (CEP com 8 dígitos, CNPJ com 14 dígitos)
    -> mescla do resultado no rascunho

FLUXO DE ENVIO:
    IDLE -> VALIDATING -> (inválido -> IDLE) | (SUBMITTING -> IDLE)

Classes:
    PartnerFormController: Dono do FormState; aplica edições e resolve consultas
    PartnerRegistrationService: Validação completa e envio simulado
"""
from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Callable, Dict, List, Mapping, Optional

from django.conf import settings

from .choices import LOOKUP_SOURCE_FIELDS, LookupKind, SubmitPhase
from .exceptions import SubmissionError
from .lookups import (
    BaseLookupClient,
    CepLookupClient,
    CnpjLookupClient,
    LookupRequest,
    LookupResult,
    should_lookup_cep,
    should_lookup_cnpj,
)
from .notifications import (
    FORM_INVALID,
    SUBMIT_ERROR,
    SUBMIT_SUCCESS,
    Notification,
    NotificationQueue,
)
from .state import (
    FormState,
    PartnerDraft,
    apply_field,
    compute_completed,
    compute_progress,
    initial_state,
    merge_lookup,
    set_loading,
    switch_personality,
)
from .validators import validate_draft, validate_field

logger = logging.getLogger(__name__)


class PartnerFormController:
    """
    Controlador do formulário de cadastro.

    Mantém o FormState corrente e a fila de notificações. Cada edição devolve
    as consultas que ela disparou; quem chama decide quando executá-las
    (run_lookup) ou entrega o resultado pronto (resolve).

    Consultas não são canceladas, mas cada uma carrega o número de sequência
    da edição que a originou: uma resposta que chega depois de o campo ter
    sido editado novamente é descartada.

    Example:
        >>> controller = PartnerFormController()
        >>> controller.edit_and_lookup('postal_code', '01310100')
        >>> controller.state.draft.city
        'São Paulo'
    """

    def __init__(
        self,
        state: Optional[FormState] = None,
        cep_client: Optional[BaseLookupClient] = None,
        cnpj_client: Optional[BaseLookupClient] = None,
        notifications: Optional[NotificationQueue] = None,
    ):
        self.state = state or initial_state()
        self.notifications = notifications or NotificationQueue()
        self._cep_client = cep_client
        self._cnpj_client = cnpj_client

    @classmethod
    def from_data(cls, data: Mapping, error_fields=(), **kwargs) -> 'PartnerFormController':
        """
        Reconstrói o controlador a partir dos dados postados pelo formulário.

        Args:
            data: dict/QueryDict com os campos do rascunho
            error_fields: Campos que estavam com erro na tela; são revalidados
        """
        draft = PartnerDraft.from_mapping(data)
        errors = {}
        for name in error_fields:
            message = validate_field(name, draft)
            if message:
                errors[name] = message
        state = FormState(
            draft=draft,
            errors=errors,
            completed=compute_completed(draft),
            progress=compute_progress(draft),
        )
        return cls(state=state, **kwargs)

    def _client(self, kind: str) -> BaseLookupClient:
        # Clientes são criados sob demanda para não abrir sessão HTTP sem necessidade
        if kind == LookupKind.CEP:
            if self._cep_client is None:
                self._cep_client = CepLookupClient()
            return self._cep_client
        if self._cnpj_client is None:
            self._cnpj_client = CnpjLookupClient()
        return self._cnpj_client

    def notify(self, notification: Notification) -> None:
        self.notifications.push(notification)

    # -------------------------------------------------------------------------
    # Edição
    # -------------------------------------------------------------------------

    def edit(self, field_name: str, value) -> List[LookupRequest]:
        """Aplica uma digitação e devolve as consultas disparadas por ela."""
        self.state = apply_field(self.state, field_name, value)
        draft = self.state.draft

        triggered = []
        if should_lookup_cep(field_name, draft):
            triggered.append(self._issue(LookupKind.CEP, draft.postal_code))
        if should_lookup_cnpj(field_name, draft):
            triggered.append(self._issue(LookupKind.CNPJ, draft.tax_id))
        return triggered

    def lookup(self, kind: str) -> Optional[LookupResult]:
        """
        Consulta o valor atual do campo de origem, se ele estiver completo.

        Na página, cada consulta é uma requisição própria, separada da
        digitação; aqui ela só acontece se o campo ainda dispara a consulta.
        """
        source = LOOKUP_SOURCE_FIELDS[kind]
        draft = self.state.draft
        check = should_lookup_cep if kind == LookupKind.CEP else should_lookup_cnpj
        if not check(source, draft):
            return None
        return self.run_lookup(self._issue(kind, getattr(draft, source)))

    def edit_and_lookup(self, field_name: str, value) -> List[LookupResult]:
        return [self.run_lookup(request) for request in self.edit(field_name, value)]

    def blur(self, field_name: str, value=None) -> Optional[str]:
        """Validação inline ao sair do campo; `value`, se dado, é aplicado com máscara antes."""
        if value is not None:
            self.state = apply_field(self.state, field_name, value)
        message = validate_field(field_name, self.state.draft)
        errors = {k: v for k, v in self.state.errors.items() if k != field_name}
        if message:
            errors[field_name] = message
        self.state = replace(self.state, errors=errors)
        return message

    def switch_personality(self, personality: str) -> None:
        self.state = switch_personality(self.state, personality)

    # -------------------------------------------------------------------------
    # Consultas
    # -------------------------------------------------------------------------

    def _issue(self, kind: str, key: str) -> LookupRequest:
        self.state = set_loading(self.state, kind, True)
        return LookupRequest(kind=kind, key=key, sequence=self.state.sequence[kind])

    def is_current(self, request: LookupRequest) -> bool:
        return self.state.sequence.get(request.kind) == request.sequence

    def run_lookup(self, request: LookupRequest) -> LookupResult:
        result = self._client(request.kind).fetch(request.key)
        self.resolve(request, result)
        return result

    def resolve(self, request: LookupRequest, result: LookupResult) -> bool:
        """
        Mescla o resultado de uma consulta no estado.

        Returns:
            False se a resposta é de uma edição antiga e foi descartada
        """
        if not self.is_current(request):
            logger.info(
                f"Descartando resposta antiga de {request.kind} "
                f"(seq {request.sequence}, atual {self.state.sequence.get(request.kind)})"
            )
            return False

        state = set_loading(self.state, request.kind, False)
        if result.found:
            state = merge_lookup(state, result.fields)
        self.state = state
        if result.notification:
            self.notify(result.notification)
        return True


class PartnerRegistrationService:
    """
    Envio do cadastro.

    Não há persistência real: o envio aguarda PARTNER_SUBMIT_DELAY segundos
    e chama o colaborador `persist`, que por padrão não faz nada. Um serviço
    de persistência real deve receber o PartnerDraft validado e levantar
    exceção em caso de falha.
    """

    def __init__(
        self,
        persist: Optional[Callable[[PartnerDraft], None]] = None,
        delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.persist = persist or (lambda draft: None)
        self.delay = delay if delay is not None else getattr(settings, 'PARTNER_SUBMIT_DELAY', 2.0)
        self.sleep = sleep

    def validate(self, controller: PartnerFormController) -> Dict[str, str]:
        controller.state = replace(controller.state, phase=SubmitPhase.VALIDATING)
        errors = validate_draft(controller.state.draft)
        controller.state = replace(controller.state, errors=errors)
        return errors

    def submit(self, controller: PartnerFormController) -> bool:
        """
        Valida e envia o rascunho do controlador.

        Returns:
            True se o parceiro foi cadastrado e o formulário reiniciado
        """
        errors = self.validate(controller)
        if errors:
            logger.info(f"Cadastro rejeitado: {sorted(errors)}")
            controller.state = replace(controller.state, phase=SubmitPhase.IDLE)
            controller.notify(FORM_INVALID)
            return False

        controller.state = set_loading(
            replace(controller.state, phase=SubmitPhase.SUBMITTING), 'submit', True
        )
        draft = controller.state.draft
        try:
            self._send(draft)
        except SubmissionError as e:
            logger.error(f"Erro ao cadastrar parceiro: {e}")
            controller.state = set_loading(
                replace(controller.state, phase=SubmitPhase.IDLE), 'submit', False
            )
            controller.notify(SUBMIT_ERROR)
            return False

        logger.info(f"Parceiro cadastrado: {draft.legal_name} ({draft.tax_id})")
        controller.state = initial_state(previous=controller.state)
        controller.notify(SUBMIT_SUCCESS)
        return True

    def _send(self, draft: PartnerDraft) -> None:
        try:
            self.sleep(self.delay)
            self.persist(draft)
        except SubmissionError:
            raise
        except Exception as e:
            raise SubmissionError(str(e)) from e
