import pytest
from django.core.exceptions import ValidationError

from apps.partners.choices import REQUIRED_FIELDS, Personality
from apps.partners.state import PartnerDraft
from apps.partners.validators import (
    is_valid_cep,
    is_valid_email,
    is_valid_phone,
    is_valid_tax_id,
    validate_draft,
    validate_field,
    validate_tax_id,
)
from tests.factories import IndividualDraftFactory, PartnerDraftFactory


class TestPredicates:
    def test_tax_id_digit_count(self):
        assert is_valid_tax_id('11.222.333/0001-81', Personality.COMPANY)
        assert not is_valid_tax_id('123.456.789-09', Personality.COMPANY)
        assert is_valid_tax_id('123.456.789-09', Personality.INDIVIDUAL)
        assert not is_valid_tax_id('11.222.333/0001-81', Personality.INDIVIDUAL)

    def test_no_checksum(self):
        """Só a quantidade de dígitos é verificada"""
        assert is_valid_tax_id('11111111111111', Personality.COMPANY)

    def test_cep(self):
        assert is_valid_cep('01310-100')
        assert not is_valid_cep('01310-10')

    @pytest.mark.parametrize('value, valid', [
        ('a@b.co', True),
        ('contato@empresa.com.br', True),
        ('not-an-email', False),
        ('a b@c.com', False),
        ('a@b', False),
        ('a@@b.com', False),
        ('', False),
    ])
    def test_email(self, value, valid):
        assert is_valid_email(value) is valid

    def test_phone(self):
        assert is_valid_phone('(11) 3333-4444')
        assert is_valid_phone('(11) 98765-4321')
        assert not is_valid_phone('(11) 3333')

    def test_django_validator_message(self):
        with pytest.raises(ValidationError) as exc:
            validate_tax_id('123', Personality.INDIVIDUAL)
        assert exc.value.messages == ['CPF inválido']


class TestDraftValidation:
    def test_blank_draft_has_ten_errors(self):
        errors = validate_draft(PartnerDraft())
        assert len(errors) == 10
        assert set(errors) == set(REQUIRED_FIELDS)
        assert errors['tax_id'] == 'CNPJ é obrigatório'

    def test_blank_individual_asks_for_cpf(self):
        errors = validate_draft(PartnerDraft(personality=Personality.INDIVIDUAL))
        assert errors['tax_id'] == 'CPF é obrigatório'

    def test_whitespace_counts_as_blank(self):
        errors = validate_draft(PartnerDraftFactory(number='   '))
        assert errors == {'number': 'Número é obrigatório'}

    def test_valid_drafts(self):
        assert validate_draft(PartnerDraftFactory()) == {}
        assert validate_draft(IndividualDraftFactory()) == {}

    def test_optional_fields_ignored(self):
        assert validate_draft(PartnerDraftFactory(complement='', note='')) == {}

    def test_pattern_errors(self):
        draft = PartnerDraftFactory(
            email='not-an-email',
            tax_id='11.222.333',
            postal_code='0131',
            phone='(11) 3',
            state_code='S',
        )
        errors = validate_draft(draft)
        assert errors == {
            'email': 'Email inválido',
            'tax_id': 'CNPJ inválido',
            'postal_code': 'CEP inválido',
            'phone': 'Telefone inválido',
            'state_code': 'UF inválida',
        }

    def test_cnpj_on_individual_is_invalid(self):
        draft = IndividualDraftFactory(tax_id='11.222.333/0001-81')
        assert validate_draft(draft) == {'tax_id': 'CPF inválido'}

    def test_single_field(self):
        draft = PartnerDraftFactory(email='x@y')
        assert validate_field('email', draft) == 'Email inválido'
        assert validate_field('city', draft) is None
        assert validate_field('complement', draft) is None
