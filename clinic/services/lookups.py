"""
Single-query lookups used by the services.

Each function wraps one ORM query and returns the record, or ``None``
when there is no match; deciding whether a miss is an error is left to
the caller.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.db.models import QuerySet
from django.utils import timezone

from clinic.models import Consultation, Doctor, Patient


def find_doctor_by_id(doctor_id: int) -> Optional[Doctor]:
    return Doctor.objects.filter(id=doctor_id).first()


def find_patient_by_id(patient_id: int) -> Optional[Patient]:
    return Patient.objects.filter(id=patient_id).first()


def find_consultation_by_id(consultation_id: int) -> Optional[Consultation]:
    return Consultation.objects.select_related('doctor', 'patient').filter(id=consultation_id).first()


def _overlapping(consultation_date: datetime) -> QuerySet[Consultation]:
    """Active consultations whose slot overlaps one starting at ``consultation_date``."""
    duration = timedelta(minutes=settings.CONSULTATION_DURATION_MINUTES)
    return Consultation.objects.filter(
        consultation_date__gt=consultation_date - duration,
        consultation_date__lt=consultation_date + duration,
        canceled=False,
    )


def find_consultation_by_doctor_and_date(doctor_id: int, consultation_date: datetime) -> Optional[Consultation]:
    return _overlapping(consultation_date).filter(doctor_id=doctor_id).first()


def find_consultation_by_patient_and_date(patient_id: int, consultation_date: datetime) -> Optional[Consultation]:
    """Any active consultation of the patient on the same local day."""
    local = timezone.localtime(consultation_date)
    day_start = local.replace(hour=0, minute=0, second=0, microsecond=0)
    day_end = local.replace(hour=23, minute=59, second=59, microsecond=999999)
    return Consultation.objects.filter(
        patient_id=patient_id,
        consultation_date__range=(day_start, day_end),
        canceled=False,
    ).first()


def find_one_free_doctor_by_specialty(specialty: str, consultation_date: datetime) -> Optional[Doctor]:
    busy = _overlapping(consultation_date).values('doctor_id')
    return (
        Doctor.objects.filter(active=True, specialty=specialty)
        .exclude(id__in=busy)
        .order_by('?')
        .first()
    )


def find_doctors() -> QuerySet[Doctor]:
    return Doctor.objects.filter(active=True).order_by('name', 'id')


def find_patients() -> QuerySet[Patient]:
    return Patient.objects.filter(active=True).order_by('name', 'id')
