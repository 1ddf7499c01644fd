import logging
from typing import Optional

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from clinic.models import Patient
from clinic.services import lookups
from clinic.services.audit import log_action
from clinic.services.paging import paginate

logger = logging.getLogger(__name__)


def serialize_patient(p: Patient) -> dict:
    return {
        'id': p.id,
        'name': p.name,
        'email': p.email,
        'cpf': p.cpf,
        'telephone': p.telephone,
        'address': p.address,
        'active': p.active,
    }


def public_patient(p: Patient) -> dict:
    return {'id': p.id, 'name': p.name, 'email': p.email, 'cpf': p.cpf}


def add_patient(data: dict, *, user=None) -> Patient:
    address = data.get('address') or {}
    try:
        with transaction.atomic():
            patient = Patient.objects.create(
                name=data['name'],
                email=data['email'],
                cpf=data['cpf'],
                telephone=data['telephone'],
                **{f: address.get(f, '') for f in Patient.ADDRESS_FIELDS},
            )
    except IntegrityError:
        # a concurrent request registered the same email or CPF
        raise ValidationError('A patient with this email or CPF already exists')
    log_action(user=user, action='patient_create', object_type='patient', object_id=patient.id)
    logger.info("Patient %s created", patient.id)
    return patient


def find_patient_by_id(patient_id: int) -> Patient:
    patient = lookups.find_patient_by_id(patient_id)
    if patient is None:
        raise NotFound('No existing patient with this id')
    return patient


def find_patients(page: int = 1, page_size: int = 10) -> tuple[list[dict], int]:
    items, total = paginate(lookups.find_patients(), page, page_size)
    return [public_patient(p) for p in items], total


def update_patient(data: dict, *, user=None) -> Patient:
    patient = find_patient_by_id(data['id'])
    changed = [f for f in ('name', 'telephone') if data.get(f)]
    for field in changed:
        setattr(patient, field, data[field])
    address: Optional[dict] = data.get('address')
    if address:
        for field in Patient.ADDRESS_FIELDS:
            if field in address:
                setattr(patient, field, address[field])
                changed.append(field)
    if changed:
        patient.save(update_fields=changed)
    log_action(user=user, action='patient_update', object_type='patient', object_id=patient.id,
               detail={'fields': changed})
    return patient


def deactivate_patient(patient_id: int, *, user=None) -> Patient:
    patient = find_patient_by_id(patient_id)
    patient.active = False
    patient.save(update_fields=['active'])
    log_action(user=user, action='patient_deactivate', object_type='patient', object_id=patient.id)
    logger.info("Patient %s deactivated", patient.id)
    return patient
