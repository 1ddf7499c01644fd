"""
Consultation scheduling.

Booking runs a fixed cascade of checks: the patient must exist, be active
and be free that day; then a doctor is taken either by id (must be active
and free at that time) or, when only a specialty is given, picked among
the free active doctors of that specialty. The first failing check raises
:class:`ConsultationValidationError` with a message meant for the client.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from clinic.exceptions import ConsultationValidationError
from clinic.models import Consultation, Doctor, Patient
from clinic.services import lookups
from clinic.services.audit import log_action
from clinic.services.doctors import find_doctor_by_id
from clinic.services.paging import paginate
from clinic.services.patients import find_patient_by_id

logger = logging.getLogger(__name__)

UPDATES_GROUP = 'consultations'


def serialize_consultation(c: Consultation) -> dict:
    return {
        'id': c.id,
        'patientId': c.patient_id,
        'patientName': c.patient.name,
        'doctorId': c.doctor_id,
        'doctorName': c.doctor.name,
        'specialty': c.doctor.specialty,
        'consultationDate': timezone.localtime(c.consultation_date).isoformat(),
        'canceled': c.canceled,
        'reasonCancellation': c.reason_cancellation,
    }


def _publish(event_type: str, c: Consultation) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    payload = {
        'type': event_type,
        'consultationId': c.id,
        'doctorId': c.doctor_id,
        'patientId': c.patient_id,
        'consultationDate': c.consultation_date.isoformat(),
        'canceled': c.canceled,
    }
    async_to_sync(channel_layer.group_send)(UPDATES_GROUP, payload)


# ---------------------------------------------------------------------------
# Validation steps
# ---------------------------------------------------------------------------

def ensure_patient_active(patient: Patient) -> None:
    if not patient.active:
        raise ConsultationValidationError('This patient is not active')


def ensure_patient_free(patient: Patient, consultation_date: datetime) -> None:
    if lookups.find_consultation_by_patient_and_date(patient.id, consultation_date) is not None:
        raise ConsultationValidationError('This patient is not free on this date')


def ensure_doctor_active(doctor: Doctor) -> None:
    if not doctor.active:
        raise ConsultationValidationError('This doctor is not active')


def ensure_doctor_free(doctor: Doctor, consultation_date: datetime) -> None:
    if lookups.find_consultation_by_doctor_and_date(doctor.id, consultation_date) is not None:
        raise ConsultationValidationError('This doctor is not free on this date')


def select_doctor(doctor_id: Optional[int], specialty: Optional[str], consultation_date: datetime) -> Doctor:
    """Pick the doctor for a booking: by id when given, else by specialty."""
    if doctor_id is None and not specialty:
        raise ConsultationValidationError('At least the specialty or doctor ID must be filled in')

    if doctor_id is not None:
        doctor = find_doctor_by_id(doctor_id)
        ensure_doctor_active(doctor)
        ensure_doctor_free(doctor, consultation_date)
        return doctor

    doctor = lookups.find_one_free_doctor_by_specialty(specialty, consultation_date)
    if doctor is None:
        raise ConsultationValidationError('There is no free doctor for this date with this specialty')
    return doctor


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

@transaction.atomic
def add_consultation(*, patient_id: int, consultation_date: datetime, doctor_id: Optional[int] = None,
                     specialty: Optional[str] = None, user=None) -> Consultation:
    patient = find_patient_by_id(patient_id)
    ensure_patient_active(patient)
    ensure_patient_free(patient, consultation_date)

    doctor = select_doctor(doctor_id, specialty, consultation_date)

    try:
        with transaction.atomic():
            consultation = Consultation.objects.create(
                patient=patient, doctor=doctor, consultation_date=consultation_date
            )
    except IntegrityError:
        # a concurrent booking took the slot between the check and the insert
        raise ConsultationValidationError('This doctor is not free on this date')
    log_action(user=user, action='consultation_schedule', object_type='consultation', object_id=consultation.id,
               detail={'doctorId': doctor.id, 'patientId': patient.id})
    logger.info("Consultation %s scheduled: doctor=%s patient=%s at %s",
                consultation.id, doctor.id, patient.id, consultation_date.isoformat())
    transaction.on_commit(lambda: _publish('consultation.scheduled', consultation))
    return consultation


def find_consultation_by_id(consultation_id: int) -> Consultation:
    consultation = lookups.find_consultation_by_id(consultation_id)
    if consultation is None:
        raise NotFound('No existing consultation with this id')
    return consultation


@transaction.atomic
def cancel_consultation(*, consultation_id: int, reason_cancellation: str, user=None,
                        now: Optional[datetime] = None) -> Consultation:
    consultation = find_consultation_by_id(consultation_id)
    if consultation.canceled:
        raise ConsultationValidationError('This consultation is already canceled')

    now = now or timezone.now()
    notice = settings.CONSULTATION_CANCEL_MIN_HOURS
    if consultation.consultation_date - now < timedelta(hours=notice):
        raise ConsultationValidationError(f'Consultations must be canceled at least {notice} hours in advance')

    consultation.canceled = True
    consultation.reason_cancellation = reason_cancellation
    consultation.save(update_fields=['canceled', 'reason_cancellation', 'updated_at'])
    log_action(user=user, action='consultation_cancel', object_type='consultation', object_id=consultation.id,
               detail={'reason': reason_cancellation})
    logger.info("Consultation %s canceled (%s)", consultation.id, reason_cancellation)
    transaction.on_commit(lambda: _publish('consultation.canceled', consultation))
    return consultation


def list_consultations(*, doctor_id: Optional[int] = None, patient_id: Optional[int] = None,
                       include_canceled: bool = False, page: int = 1, page_size: int = 10):
    qs = Consultation.objects.select_related('doctor', 'patient')
    if doctor_id:
        qs = qs.filter(doctor_id=doctor_id)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if not include_canceled:
        qs = qs.filter(canceled=False)
    items, total = paginate(qs.order_by('consultation_date', 'id'), page, page_size)
    return [serialize_consultation(c) for c in items], total
