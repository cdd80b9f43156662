import pytest
from rest_framework.test import APIClient

from apps.partners import lookups
from apps.partners.services import PartnerFormController
from tests.factories import PartnerDraftFactory
from tests.fakes import FakeSession


@pytest.fixture(autouse=True)
def lookup_settings(settings):
    settings.VIACEP_URL = 'https://viacep.com.br/ws/{cep}/json/'
    settings.RECEITAWS_URL = 'https://www.receitaws.com.br/v1/cnpj/{cnpj}'
    settings.LOOKUP_TIMEOUT = 1
    settings.PARTNER_SUBMIT_DELAY = 0
    return settings


@pytest.fixture
def fake_session(monkeypatch):
    """Toda sessão HTTP criada pelas consultas passa a ser a FakeSession."""
    session = FakeSession()
    monkeypatch.setattr(lookups, 'build_session', lambda: session)
    return session


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def draft():
    return PartnerDraftFactory()


@pytest.fixture
def controller(fake_session):
    return PartnerFormController()
