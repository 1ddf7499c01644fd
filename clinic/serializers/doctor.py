from rest_framework import serializers

from clinic.models import Doctor, Specialty
from .common import AddressSerializer, CleanCharField


class DoctorCreateSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255)
    email = serializers.EmailField()
    crm = serializers.RegexField(r'^\d{4,6}$', error_messages={'invalid': 'CRM must have 4 to 6 digits'})
    telephone = CleanCharField(max_length=20)
    specialty = serializers.ChoiceField(choices=Specialty.choices)
    address = AddressSerializer()

    def validate_email(self, v):
        if Doctor.objects.filter(email__iexact=v).exists():
            raise serializers.ValidationError('A doctor with this email already exists')
        return v

    def validate_crm(self, v):
        if Doctor.objects.filter(crm=v).exists():
            raise serializers.ValidationError('A doctor with this CRM already exists')
        return v


class DoctorUpdateSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    name = CleanCharField(max_length=255, required=False)
    telephone = CleanCharField(max_length=20, required=False)
    address = AddressSerializer(required=False)
