"""
Partners App - Exceções do cadastro de parceiros

Todas são tratadas no ponto em que ocorrem e convertidas em notificações;
nenhuma deve escapar do formulário. Erros de validação usam o
ValidationError do Django.
"""


class PartnerRegistrationError(Exception):
    """Base para erros do fluxo de cadastro."""


class LookupNotFound(PartnerRegistrationError):
    """O cadastro externo não encontrou o CEP/CNPJ informado."""


class LookupTransportError(PartnerRegistrationError):
    """Falha de rede ou resposta ilegível em uma consulta externa."""


class SubmissionError(PartnerRegistrationError):
    """Falha na etapa (simulada) de persistência do parceiro."""
