import json

from django import forms
from django.urls import reverse

from .choices import FIELD_LABELS, REQUIRED_FIELDS, TEXT_FIELDS, Personality
from .state import FormState, PartnerDraft
from .validators import tax_id_label, validate_draft

INPUT_CLASS = 'w-full px-4 py-4 bg-slate-50 border-2 border-transparent rounded-2xl text-sm font-bold focus:bg-white focus:border-indigo-600 transition-all outline-none'
COMPLETED_CLASS = 'border-emerald-500'
ERROR_CLASS = 'border-rose-500 bg-rose-50'


def _input(placeholder='', **attrs):
    return forms.TextInput(attrs={'class': INPUT_CLASS, 'placeholder': placeholder, **attrs})


class PartnerForm(forms.Form):
    """
    Formulário de cadastro de parceiro.

    Os campos são opcionais no nível do Django: obrigatoriedade e formato são
    verificados por validate_draft, para que página, API e serviço usem a
    mesma regra.
    """
    personality = forms.ChoiceField(
        label="Personalidade",
        choices=Personality.choices,
        initial=Personality.COMPANY,
        widget=forms.RadioSelect(attrs={'class': 'w-5 h-5 text-indigo-600'}),
    )
    legal_name = forms.CharField(required=False, widget=_input('Nome ou razão social'))
    tax_id = forms.CharField(required=False, widget=_input('00.000.000/0000-00', inputmode='numeric'))
    postal_code = forms.CharField(required=False, widget=_input('00000-000', inputmode='numeric'))
    state_code = forms.CharField(required=False, widget=_input('SP', maxlength=2))
    city = forms.CharField(required=False, widget=_input('Nome da cidade'))
    street = forms.CharField(required=False, widget=_input('Nome da rua/avenida'))
    number = forms.CharField(required=False, widget=_input('Número'))
    neighborhood = forms.CharField(required=False, widget=_input('Nome do bairro'))
    email = forms.CharField(required=False, widget=_input('email@exemplo.com', type='email'))
    phone = forms.CharField(required=False, widget=_input('(00) 0000-0000', inputmode='tel'))
    complement = forms.CharField(required=False, widget=_input('Apto, sala, bloco...'))
    note = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'class': INPUT_CLASS, 'rows': 3, 'placeholder': 'Informações adicionais'}),
    )

    def __init__(self, *args, state: FormState = None, **kwargs):
        self.state = state
        super().__init__(*args, **kwargs)
        for name, label in FIELD_LABELS.items():
            self.fields[name].label = f'{label} *' if name in REQUIRED_FIELDS else label

        personality = self._personality()
        self.fields['tax_id'].label = f'{tax_id_label(personality)} *'
        if personality == Personality.INDIVIDUAL:
            self.fields['tax_id'].widget.attrs['placeholder'] = '000.000.000-00'

        self._bind_htmx()

        if state is not None:
            for name in REQUIRED_FIELDS:
                if name in state.errors:
                    self._append_class(name, ERROR_CLASS)
                elif state.is_completed(name):
                    self._append_class(name, COMPLETED_CLASS)

    @classmethod
    def from_state(cls, state: FormState) -> 'PartnerForm':
        """Form vinculado ao rascunho; os erros exibidos são os do estado."""
        return cls(data=state.draft.as_dict(), state=state)

    def _bind_htmx(self):
        # Digitação e saída do campo voltam ao servidor sem trocar o input;
        # a resposta só atualiza blocos fora dele (hx-swap-oob)
        url = reverse('partners:partner_register')
        for name in TEXT_FIELDS:
            self.fields[name].widget.attrs.update({
                'hx-post': url,
                'hx-trigger': 'input changed delay:300ms, focusout',
                'hx-vals': 'js:{action: event.type === "focusout" ? "blur" : "edit", field: "%s"}' % name,
                'hx-sync': 'this:replace',
                'hx-swap': 'none',
            })
        self.fields['personality'].widget.attrs.update({
            'hx-post': url,
            'hx-trigger': 'change',
            'hx-vals': json.dumps({'action': 'personality'}),
            'hx-swap': 'none',
        })

    def _personality(self) -> str:
        if self.is_bound:
            value = self.data.get('personality')
            if value in Personality.values:
                return value
        return Personality.COMPANY

    def _append_class(self, name, css):
        widget = self.fields[name].widget
        widget.attrs['class'] = f"{widget.attrs.get('class', '')} {css}".strip()

    def clean(self):
        cleaned_data = super().clean()
        if self.state is not None:
            # Erros de quem conduz o formulário (inline/envio), não recalculados
            errors = dict(self.state.errors)
        else:
            errors = validate_draft(PartnerDraft.from_mapping(cleaned_data))
        for name, message in errors.items():
            self.add_error(name, message)
        return cleaned_data
