"""
Partners App - Estado do formulário de cadastro

O estado é um objeto plano (rascunho + erros + campos preenchidos + progresso)
e todas as funções deste módulo são puras: recebem um FormState e devolvem um
novo, sem efeitos colaterais. Consultas externas e notificações ficam em
services.py.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from typing import Dict, Mapping, Optional, Set

from .choices import (
    LOOKUP_SOURCE_FIELDS,
    REQUIRED_FIELDS,
    TEXT_FIELDS,
    LookupKind,
    Personality,
    SubmitPhase,
)
from .formatters import format_field


@dataclass
class PartnerDraft:
    """Rascunho do parceiro em edição (ainda não persistido)."""
    personality: str = Personality.COMPANY
    legal_name: str = ''
    tax_id: str = ''
    postal_code: str = ''
    state_code: str = ''
    city: str = ''
    street: str = ''
    number: str = ''
    neighborhood: str = ''
    email: str = ''
    phone: str = ''
    complement: str = ''
    note: str = ''

    @classmethod
    def from_mapping(cls, data: Mapping) -> 'PartnerDraft':
        """Monta o rascunho a partir de um dict/QueryDict, ignorando chaves desconhecidas."""
        personality = data.get('personality') or Personality.COMPANY
        if personality not in Personality.values:
            personality = Personality.COMPANY
        values = {name: str(data.get(name) or '') for name in TEXT_FIELDS}
        return cls(personality=personality, **values)

    def as_dict(self) -> Dict[str, str]:
        return {k: str(v) for k, v in asdict(self).items()}


def _zero_counters() -> Dict[str, int]:
    return {kind: 0 for kind in LookupKind.values}


def _idle_loading() -> Dict[str, bool]:
    return {LookupKind.CEP: False, LookupKind.CNPJ: False, 'submit': False}


@dataclass
class FormState:
    draft: PartnerDraft = field(default_factory=PartnerDraft)
    errors: Dict[str, str] = field(default_factory=dict)
    completed: Set[str] = field(default_factory=set)
    progress: float = 0.0
    phase: str = SubmitPhase.IDLE
    loading: Dict[str, bool] = field(default_factory=_idle_loading)
    # Número de sequência por consulta; respostas com número antigo são descartadas
    sequence: Dict[str, int] = field(default_factory=_zero_counters)

    def is_completed(self, name: str) -> bool:
        return name in self.completed


def compute_completed(draft: PartnerDraft) -> Set[str]:
    return {name for name in REQUIRED_FIELDS if getattr(draft, name).strip()}


def compute_progress(draft: PartnerDraft) -> float:
    """Percentual (0-100) de campos obrigatórios preenchidos."""
    return len(compute_completed(draft)) / len(REQUIRED_FIELDS) * 100


def _with_draft(state: FormState, draft: PartnerDraft, **changes) -> FormState:
    return replace(
        state,
        draft=draft,
        completed=compute_completed(draft),
        progress=compute_progress(draft),
        **changes,
    )


def _bump(state: FormState, kind: str) -> Dict[str, int]:
    sequence = dict(state.sequence)
    sequence[kind] = sequence.get(kind, 0) + 1
    return sequence


def initial_state(previous: Optional[FormState] = None) -> FormState:
    """
    Estado inicial do formulário.

    Quando recebe o estado anterior, avança os números de sequência para que
    consultas ainda em andamento sejam descartadas ao chegar.
    """
    state = FormState()
    if previous is not None:
        state.sequence = {kind: count + 1 for kind, count in previous.sequence.items()}
    return state


def apply_field(state: FormState, name: str, value) -> FormState:
    """
    Atualiza um campo do rascunho aplicando a máscara correspondente.

    O erro do campo é limpo. Editar o campo de origem de uma consulta
    invalida a consulta em andamento para aquele campo.
    """
    if name not in TEXT_FIELDS:
        raise KeyError(f'Campo desconhecido: {name}')

    formatted = format_field(name, value, state.draft.personality)
    draft = replace(state.draft, **{name: formatted})

    errors = {k: v for k, v in state.errors.items() if k != name}
    sequence = state.sequence
    loading = state.loading
    for kind, source in LOOKUP_SOURCE_FIELDS.items():
        if source == name:
            sequence = _bump(state, kind)
            loading = {**state.loading, kind: False}
    return _with_draft(state, draft, errors=errors, sequence=sequence, loading=loading)


def switch_personality(state: FormState, personality: str) -> FormState:
    """Troca a personalidade; CNPJ/CPF e razão social são limpos."""
    if personality not in Personality.values:
        raise ValueError(f'Personalidade inválida: {personality}')
    draft = replace(state.draft, personality=personality, tax_id='', legal_name='')
    errors = {k: v for k, v in state.errors.items() if k not in ('tax_id', 'legal_name')}
    return _with_draft(
        state,
        draft,
        errors=errors,
        sequence=_bump(state, LookupKind.CNPJ),
        loading={**state.loading, LookupKind.CNPJ: False},
    )


def merge_lookup(state: FormState, patch: Mapping[str, str]) -> FormState:
    """Sobrescreve no rascunho os campos devolvidos por uma consulta."""
    known = {f.name for f in fields(PartnerDraft)} - {'personality'}
    updates = {
        k: format_field(k, v, state.draft.personality)
        for k, v in patch.items() if k in known
    }
    if not updates:
        return state
    draft = replace(state.draft, **updates)
    errors = {k: v for k, v in state.errors.items() if k not in updates}
    return _with_draft(state, draft, errors=errors)


def set_loading(state: FormState, key: str, value: bool) -> FormState:
    return replace(state, loading={**state.loading, key: value})
