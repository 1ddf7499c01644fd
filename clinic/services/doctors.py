import logging
from typing import Optional

from django.core.cache import cache
from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from clinic.models import Doctor
from clinic.services import lookups
from clinic.services.audit import log_action
from clinic.services.paging import paginate

logger = logging.getLogger(__name__)

CACHE_VERSION_KEY = 'doctors:version'
CACHE_TTL = 300


def serialize_doctor(d: Doctor) -> dict:
    return {
        'id': d.id,
        'name': d.name,
        'email': d.email,
        'crm': d.crm,
        'telephone': d.telephone,
        'specialty': d.specialty,
        'address': d.address,
        'active': d.active,
    }


def public_doctor(d: Doctor) -> dict:
    return {'id': d.id, 'name': d.name, 'email': d.email, 'crm': d.crm, 'specialty': d.specialty}


def _bump_list_cache() -> None:
    try:
        cache.incr(CACHE_VERSION_KEY)
    except ValueError:
        cache.set(CACHE_VERSION_KEY, 1, None)


def add_doctor(data: dict, *, user=None) -> Doctor:
    address = data.get('address') or {}
    try:
        with transaction.atomic():
            doctor = Doctor.objects.create(
                name=data['name'],
                email=data['email'],
                crm=data['crm'],
                telephone=data['telephone'],
                specialty=data['specialty'],
                **{f: address.get(f, '') for f in Doctor.ADDRESS_FIELDS},
            )
    except IntegrityError:
        # a concurrent request registered the same email or CRM
        raise ValidationError('A doctor with this email or CRM already exists')
    _bump_list_cache()
    log_action(user=user, action='doctor_create', object_type='doctor', object_id=doctor.id)
    logger.info("Doctor %s created (crm=%s, specialty=%s)", doctor.id, doctor.crm, doctor.specialty)
    return doctor


def find_doctor_by_id(doctor_id: int) -> Doctor:
    doctor = lookups.find_doctor_by_id(doctor_id)
    if doctor is None:
        raise NotFound('No existing doctor with this id')
    return doctor


def find_doctors(page: int = 1, page_size: int = 10) -> tuple[list[dict], int]:
    version = cache.get(CACHE_VERSION_KEY, 0)
    cache_key = f"doctors:v={version}:p={page}:ps={page_size}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached
    items, total = paginate(lookups.find_doctors(), page, page_size)
    result = ([public_doctor(d) for d in items], total)
    cache.set(cache_key, result, CACHE_TTL)
    return result


def update_doctor(data: dict, *, user=None) -> Doctor:
    """Apply a partial update; only name, telephone and address may change."""
    doctor = find_doctor_by_id(data['id'])
    changed = []
    for field in ('name', 'telephone'):
        if data.get(field):
            setattr(doctor, field, data[field])
            changed.append(field)
    address: Optional[dict] = data.get('address')
    if address:
        for field in Doctor.ADDRESS_FIELDS:
            if field in address:
                setattr(doctor, field, address[field])
                changed.append(field)
    if changed:
        doctor.save(update_fields=changed)
        _bump_list_cache()
    log_action(user=user, action='doctor_update', object_type='doctor', object_id=doctor.id,
               detail={'fields': changed})
    return doctor


def deactivate_doctor(doctor_id: int, *, user=None) -> Doctor:
    doctor = find_doctor_by_id(doctor_id)
    doctor.active = False
    doctor.save(update_fields=['active'])
    _bump_list_cache()
    log_action(user=user, action='doctor_deactivate', object_type='doctor', object_id=doctor.id)
    logger.info("Doctor %s deactivated", doctor.id)
    return doctor
