from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods

from .choices import TEXT_FIELDS, LookupKind
from .forms import PartnerForm
from .notifications import flash
from .services import PartnerFormController, PartnerRegistrationService


def _render(request, controller):
    context = {
        'form': PartnerForm.from_state(controller.state),
        'state': controller.state,
    }
    if request.htmx:
        return render(request, 'partners/partials/partner_form.html', context)
    return render(request, 'partners/partner_register.html', context)


def _render_update(request, controller, fields=(), feedback=()):
    """Resposta htmx só com blocos fora de banda; o input em digitação não é trocado."""
    form = PartnerForm.from_state(controller.state)
    context = {
        'form': form,
        'state': controller.state,
        'fields': [form[name] for name in fields],
        'feedback': [form[name] for name in feedback],
    }
    return render(request, 'partners/partials/partner_update.html', context)


@require_http_methods(['GET', 'POST'])
def partner_register(request):
    """
    Cadastro de parceiro.

    POST com `action`:
        edit        digitação em `field` (htmx); aplica máscara e limpa o erro do campo
        blur        máscara e validação inline de `field`
        personality troca entre pessoa física e jurídica
        lookup      consulta de `kind` (cep/cnpj) com o valor atual do campo de origem
        submit      validação completa e envio (padrão)
    """
    if request.method == 'GET':
        return _render(request, PartnerFormController())

    controller = PartnerFormController.from_data(
        request.POST,
        error_fields=[f for f in request.POST.getlist('error_fields') if f in TEXT_FIELDS],
    )
    action = request.POST.get('action', 'submit')
    field_name = request.POST.get('field', '')
    fields, feedback = [], []

    if action == 'edit' and field_name in TEXT_FIELDS:
        controller.edit(field_name, request.POST.get(field_name, ''))
        feedback = [field_name]
    elif action == 'blur' and field_name in TEXT_FIELDS:
        controller.blur(field_name, request.POST.get(field_name, ''))
        fields = [field_name]
    elif action == 'personality':
        controller.switch_personality(controller.state.draft.personality)
        fields = ['legal_name', 'tax_id']
    elif action == 'lookup' and request.POST.get('kind') in LookupKind.values:
        result = controller.lookup(request.POST['kind'])
        if result is not None and result.found:
            fields = list(result.fields)
    elif action == 'submit':
        submitted = PartnerRegistrationService().submit(controller)
        flash(request, controller.notifications.drain())
        if submitted:
            return redirect('partners:partner_register')
        return _render(request, controller)

    flash(request, controller.notifications.drain())
    if request.htmx:
        return _render_update(request, controller, fields, feedback)
    return _render(request, controller)
