from django.contrib.messages import get_messages
from django.contrib.messages.storage.cookie import CookieStorage
from django.urls import reverse

from apps.partners.forms import PartnerForm
from apps.partners.notifications import CEP_NOT_FOUND, flash
from apps.partners.state import FormState
from tests.factories import PartnerDraftFactory

CEP_URL = 'https://viacep.com.br/ws/01310100/json/'
CNPJ_URL = 'https://www.receitaws.com.br/v1/cnpj/11222333000181'
VIACEP_PAYLOAD = {'logradouro': 'Av. Paulista', 'bairro': 'Bela Vista', 'localidade': 'São Paulo', 'uf': 'SP'}


class TestPartnerRegisterView:
    @property
    def url(self):
        return reverse('partners:partner_register')

    def test_get_renders_empty_form(self, client):
        response = client.get(self.url)
        assert response.status_code == 200
        assert b"Cadastro de Parceiro" in response.content
        assert response.context['state'].progress == 0

    def test_root_redirects_to_form(self, client):
        response = client.get('/')
        assert response.status_code == 302
        assert response.url == self.url

    def test_htmx_edit_does_not_swap_the_input(self, client, fake_session):
        response = client.post(
            self.url,
            {'action': 'edit', 'field': 'postal_code', 'postal_code': '01310100'},
            HTTP_HX_REQUEST='true',
        )

        content = response.content.decode()
        assert response.status_code == 200
        assert [t.name for t in response.templates][0] == 'partners/partials/partner_update.html'
        assert response.context['state'].draft.postal_code == '01310-100'
        assert 'id="feedback-postal_code" class="mt-1" hx-swap-oob="true"' in content
        assert 'id="field-postal_code"' not in content
        # a consulta é requisição própria, não parte da digitação
        assert fake_session.calls == []

    def test_htmx_blur_swaps_masked_field(self, client):
        response = client.post(
            self.url,
            {'action': 'blur', 'field': 'phone', 'phone': '1133334444'},
            HTTP_HX_REQUEST='true',
        )

        content = response.content.decode()
        assert response.context['state'].draft.phone == '(11) 3333-4444'
        assert 'id="field-phone"' in content
        assert 'value="(11) 3333-4444"' in content

    def test_edit_on_other_field_keeps_cep_lookup(self, client, fake_session):
        fake_session.add(CEP_URL, VIACEP_PAYLOAD)
        form = {'postal_code': '01310-100', 'number': '12'}

        edit = client.post(self.url, {**form, 'action': 'edit', 'field': 'number'}, HTTP_HX_REQUEST='true')
        lookup = client.post(self.url, {**form, 'action': 'lookup', 'kind': 'cep'}, HTTP_HX_REQUEST='true')

        assert edit.context['state'].draft.street == ''
        draft = lookup.context['state'].draft
        assert (draft.street, draft.city, draft.number) == ('Av. Paulista', 'São Paulo', '12')
        assert len(fake_session.calls) == 1
        content = lookup.content.decode()
        assert 'id="field-street"' in content
        assert 'id="field-number"' not in content
        assert 'CEP consultado com sucesso!' in content

    def test_lookup_with_incomplete_cep_does_nothing(self, client, fake_session):
        response = client.post(self.url, {'action': 'lookup', 'kind': 'cep', 'postal_code': '0131'}, HTTP_HX_REQUEST='true')
        assert response.status_code == 200
        assert fake_session.calls == []
        assert 'id="field-street"' not in response.content.decode()

    def test_cnpj_lookup(self, client, fake_session):
        fake_session.add(CNPJ_URL, {'status': 'OK', 'nome': 'ACME LTDA'})
        response = client.post(self.url, {'action': 'lookup', 'kind': 'cnpj', 'tax_id': '11222333000181'})
        assert response.context['state'].draft.legal_name == 'ACME LTDA'

    def test_lookup_failure_is_reported(self, client, fake_session):
        response = client.post(self.url, {'action': 'lookup', 'kind': 'cep', 'postal_code': '01310100'})
        assert response.status_code == 200
        assert 'Erro ao consultar CEP' in response.content.decode()

    def test_lookups_and_submit_show_in_flight_state(self, client):
        content = client.get(self.url).content.decode()

        assert 'id="partner-form" method="post"' in content
        assert 'hx-sync="this:replace"' in content.split('id="cep-lookup"')[1].split('</div>')[0]
        assert 'consultando CEP...' in content
        assert 'consultando CNPJ...' in content
        assert 'hx-disabled-elt="this"' in content
        # o formulário não serializa as requisições dos campos
        assert 'hx-sync' not in content.split('id="partner-form"')[1].split('>')[0]

    def test_blur_shows_inline_error(self, client):
        response = client.post(self.url, {'action': 'blur', 'field': 'email', 'email': 'x@'})
        assert response.context['state'].errors == {'email': 'Email inválido'}
        assert response.context['form'].errors['email'] == ['Email inválido']

    def test_switch_personality(self, client):
        response = client.post(self.url, {
            'action': 'personality',
            'personality': 'fisica',
            'legal_name': 'ACME',
            'tax_id': '11.222.333/0001-81',
            'city': 'Campinas',
        })
        draft = response.context['state'].draft
        assert (draft.legal_name, draft.tax_id, draft.city) == ('', '', 'Campinas')
        assert b"CPF *" in response.content

    def test_htmx_switch_personality_swaps_name_and_tax_id(self, client):
        response = client.post(
            self.url,
            {'action': 'personality', 'personality': 'fisica', 'tax_id': '11.222.333/0001-81'},
            HTTP_HX_REQUEST='true',
        )
        content = response.content.decode()
        assert 'id="field-tax_id"' in content
        assert 'id="field-legal_name"' in content
        assert 'CPF *' in content

    def test_invalid_submit_rerenders_with_errors(self, client):
        data = PartnerDraftFactory(email='not-an-email').as_dict()
        response = client.post(self.url, {**data, 'action': 'submit'})

        assert response.status_code == 200
        assert response.context['state'].errors == {'email': 'Email inválido'}
        messages = [m.message for m in get_messages(response.wsgi_request)]
        assert 'Formulário inválido' in response.content.decode()
        assert any('Formulário inválido' in m for m in messages)

    def test_valid_submit_redirects_to_clean_form(self, client):
        data = PartnerDraftFactory().as_dict()
        response = client.post(self.url, data, follow=True)

        assert response.redirect_chain == [(self.url, 302)]
        assert response.context['state'].progress == 0
        assert 'Parceiro cadastrado com sucesso!' in response.content.decode()


class TestPartnerForm:
    def test_errors_come_from_state(self):
        state = FormState(errors={'email': 'Email inválido'})

        form = PartnerForm.from_state(state)

        # rascunho vazio, mas só o erro do estado é exibido
        assert dict(form.errors) == {'email': ['Email inválido']}

    def test_unbound_to_state_validates_draft(self):
        form = PartnerForm(data=PartnerDraftFactory(email='x').as_dict())
        assert not form.is_valid()
        assert form.errors['email'] == ['Email inválido']


class TestFlash:
    def test_title_goes_into_message_body(self, rf):
        request = rf.get('/')
        request._messages = CookieStorage(request)

        flash(request, [CEP_NOT_FOUND])

        [message] = list(request._messages)
        assert 'CEP não encontrado' in message.message
        assert 'Verifique o CEP informado.' in message.message
        assert message.extra_tags == ''
        assert message.tags == 'error'
