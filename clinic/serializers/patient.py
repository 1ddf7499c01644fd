from rest_framework import serializers

from clinic.models import Patient
from .common import AddressSerializer, CleanCharField


class PatientCreateSerializer(serializers.Serializer):
    name = CleanCharField(max_length=255)
    email = serializers.EmailField()
    cpf = serializers.RegexField(r'^\d{11}$', error_messages={'invalid': 'CPF must have 11 digits'})
    telephone = CleanCharField(max_length=20)
    address = AddressSerializer()

    def validate_name(self, v):
        if len(v) < 2:
            raise serializers.ValidationError('Name must have at least 2 characters')
        return v

    def validate_email(self, v):
        if Patient.objects.filter(email__iexact=v).exists():
            raise serializers.ValidationError('A patient with this email already exists')
        return v

    def validate_cpf(self, v):
        if Patient.objects.filter(cpf=v).exists():
            raise serializers.ValidationError('A patient with this CPF already exists')
        return v


class PatientUpdateSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    name = CleanCharField(max_length=255, required=False)
    telephone = CleanCharField(max_length=20, required=False)
    address = AddressSerializer(required=False)
