from rest_framework import serializers

from clinic.models import ReasonCancellation, Specialty
from clinic.validators import validate_business_hours, validate_scheduled_in_advance
from .common import PageQuerySerializer


class ConsultationCreateSerializer(serializers.Serializer):
    patientId = serializers.IntegerField(min_value=1)
    doctorId = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    specialty = serializers.ChoiceField(choices=Specialty.choices, required=False, allow_null=True)
    consultationDate = serializers.DateTimeField(
        validators=[validate_scheduled_in_advance, validate_business_hours]
    )


class ConsultationCancelSerializer(serializers.Serializer):
    consultationId = serializers.IntegerField(min_value=1)
    reasonCancellation = serializers.ChoiceField(choices=ReasonCancellation.choices)


class ConsultationListQuerySerializer(PageQuerySerializer):
    doctorId = serializers.IntegerField(min_value=1, required=False)
    patientId = serializers.IntegerField(min_value=1, required=False)
    includeCanceled = serializers.BooleanField(required=False, default=False)
