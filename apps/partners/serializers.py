from rest_framework import serializers

from .choices import TEXT_FIELDS, Personality


class PartnerDraftSerializer(serializers.Serializer):
    """Rascunho como enviado pelo front-end; formato é checado por validate_draft."""
    personality = serializers.ChoiceField(choices=Personality.choices, default=Personality.COMPANY)
    legal_name = serializers.CharField(allow_blank=True, default='', trim_whitespace=False)
    tax_id = serializers.CharField(allow_blank=True, default='', trim_whitespace=False)
    postal_code = serializers.CharField(allow_blank=True, default='', trim_whitespace=False)
    state_code = serializers.CharField(allow_blank=True, default='', trim_whitespace=False)
    city = serializers.CharField(allow_blank=True, default='', trim_whitespace=False)
    street = serializers.CharField(allow_blank=True, default='', trim_whitespace=False)
    number = serializers.CharField(allow_blank=True, default='', trim_whitespace=False)
    neighborhood = serializers.CharField(allow_blank=True, default='', trim_whitespace=False)
    email = serializers.CharField(allow_blank=True, default='', trim_whitespace=False)
    phone = serializers.CharField(allow_blank=True, default='', trim_whitespace=False)
    complement = serializers.CharField(allow_blank=True, default='', trim_whitespace=False)
    note = serializers.CharField(allow_blank=True, default='', trim_whitespace=False)


class FormatFieldSerializer(serializers.Serializer):
    field = serializers.ChoiceField(choices=[(name, name) for name in TEXT_FIELDS])
    value = serializers.CharField(allow_blank=True, trim_whitespace=False)
    personality = serializers.ChoiceField(choices=Personality.choices, default=Personality.COMPANY)
