import bleach
from django.conf import settings
from rest_framework import serializers


def clean_text(v):
    return bleach.clean((v or '').strip(), tags=set(), strip=True).strip()


class CleanCharField(serializers.CharField):
    """CharField that strips HTML from user supplied text."""

    def to_internal_value(self, data):
        value = clean_text(super().to_internal_value(data))
        # markup-only input is blank once cleaned
        if not value and not self.allow_blank:
            self.fail('blank')
        return value


class AddressSerializer(serializers.Serializer):
    street = CleanCharField(max_length=255)
    neighborhood = CleanCharField(max_length=255)
    zipCode = serializers.RegexField(r'^\d{8}$', source='zip_code',
                                     error_messages={'invalid': 'Zip code must have 8 digits'})
    city = CleanCharField(max_length=255)
    state = serializers.RegexField(r'^[A-Za-z]{2}$',
                                   error_messages={'invalid': 'State must be a 2 letter code'})
    number = CleanCharField(max_length=20, required=False, allow_blank=True)
    additionalDetails = CleanCharField(max_length=255, required=False, allow_blank=True,
                                       source='additional_details')

    def validate_state(self, v):
        return v.upper()


class PageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    pageSize = serializers.IntegerField(min_value=1, required=False)

    def validate_pageSize(self, v):
        return min(v, settings.API_MAX_PAGE_SIZE)

    def validate(self, attrs):
        attrs.setdefault('pageSize', settings.API_PAGE_SIZE)
        return attrs
