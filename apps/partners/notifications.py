"""
Partners App - Notificações ao usuário

Os handlers não exibem nada: emitem Notification, que a camada de interface
consome (mensagens do Django na página, campo 'notification' na API).
"""
from dataclasses import asdict, dataclass
from typing import Iterable, Iterator, List

from django.contrib import messages
from django.utils.html import format_html


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    destructive: bool = False

    @property
    def level(self) -> int:
        return messages.ERROR if self.destructive else messages.SUCCESS

    def as_dict(self) -> dict:
        return asdict(self)

    def as_html(self) -> str:
        return format_html('<strong class="block font-bold">{}</strong>{}', self.title, self.description)


CEP_FOUND = Notification('CEP consultado com sucesso!', 'Endereço preenchido automaticamente.')
CEP_NOT_FOUND = Notification('CEP não encontrado', 'Verifique o CEP informado.', destructive=True)
CEP_ERROR = Notification('Erro ao consultar CEP', 'Tente novamente mais tarde.', destructive=True)

CNPJ_FOUND = Notification('CNPJ consultado com sucesso!', 'Razão social preenchida automaticamente.')
CNPJ_NOT_FOUND = Notification('CNPJ não encontrado', 'Verifique o CNPJ informado.', destructive=True)
CNPJ_ERROR = Notification('Erro ao consultar CNPJ', 'Tente novamente mais tarde.', destructive=True)

FORM_INVALID = Notification('Formulário inválido', 'Corrija os erros antes de continuar.', destructive=True)
SUBMIT_SUCCESS = Notification('Parceiro cadastrado com sucesso!', 'Os dados foram salvos no sistema.')
SUBMIT_ERROR = Notification('Erro ao cadastrar', 'Tente novamente mais tarde.', destructive=True)


class NotificationQueue:
    """Fila de notificações pendentes de exibição."""

    def __init__(self):
        self._items: List[Notification] = []

    def push(self, notification: Notification) -> None:
        self._items.append(notification)

    def drain(self) -> List[Notification]:
        items, self._items = self._items, []
        return items

    def __iter__(self) -> Iterator[Notification]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)


def flash(request, notifications: Iterable[Notification]) -> None:
    """Repassa as notificações para o framework de mensagens do Django (título e descrição no corpo)."""
    for n in notifications:
        messages.add_message(request, n.level, n.as_html())
