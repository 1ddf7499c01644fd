"""
Database models for the hospital management API.

Doctors and patients share an embedded postal address and an activity
flag; a consultation links one of each at a given date and time. API
accounts use a custom user model so that the login can evolve without a
swap of ``AUTH_USER_MODEL`` later on.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models
from django.db.models import Q


class User(AbstractUser):
    """API account. ``username`` holds the login used to obtain tokens."""

    def __str__(self) -> str:
        return self.username


class Specialty(models.TextChoices):
    ORTHOPEDICS = 'ORTHOPEDICS', 'Orthopedics'
    CARDIOLOGY = 'CARDIOLOGY', 'Cardiology'
    GYNECOLOGY = 'GYNECOLOGY', 'Gynecology'
    DERMATOLOGY = 'DERMATOLOGY', 'Dermatology'


class ReasonCancellation(models.TextChoices):
    PATIENT_GAVE_UP = 'PATIENT_GAVE_UP', 'Patient gave up'
    DOCTOR_CANCELED = 'DOCTOR_CANCELED', 'Doctor canceled'
    OTHERS = 'OTHERS', 'Others'


zip_code_validator = RegexValidator(r'^\d{8}$', 'Zip code must have 8 digits')
state_validator = RegexValidator(r'^[A-Za-z]{2}$', 'State must be a 2 letter code')
crm_validator = RegexValidator(r'^\d{4,6}$', 'CRM must have 4 to 6 digits')
cpf_validator = RegexValidator(r'^\d{11}$', 'CPF must have 11 digits')


class Address(models.Model):
    """Postal address columns embedded in the owning table."""
    street = models.CharField(max_length=255)
    neighborhood = models.CharField(max_length=255)
    zip_code = models.CharField(max_length=8, validators=[zip_code_validator])
    city = models.CharField(max_length=255)
    state = models.CharField(max_length=2, validators=[state_validator])
    number = models.CharField(max_length=20, blank=True)
    additional_details = models.CharField(max_length=255, blank=True)

    ADDRESS_FIELDS = ('street', 'neighborhood', 'zip_code', 'city', 'state', 'number', 'additional_details')

    class Meta:
        abstract = True

    @property
    def address(self) -> dict:
        return {
            'street': self.street,
            'neighborhood': self.neighborhood,
            'zipCode': self.zip_code,
            'city': self.city,
            'state': self.state,
            'number': self.number,
            'additionalDetails': self.additional_details,
        }


class Doctor(Address):
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    crm = models.CharField(max_length=6, unique=True, validators=[crm_validator],
                           help_text="Medical council registration number")
    telephone = models.CharField(max_length=20)
    specialty = models.CharField(max_length=20, choices=Specialty.choices, db_index=True)
    # free-doctor lookups filter on specialty + active
    active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['specialty', 'active'], name='doctor_specialty_active_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.specialty})"


class Patient(Address):
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    cpf = models.CharField(max_length=11, unique=True, validators=[cpf_validator],
                           help_text="National individual taxpayer number")
    telephone = models.CharField(max_length=20)
    active = models.BooleanField(default=True, db_index=True)

    class Meta:
        ordering = ['name']

    def __str__(self) -> str:
        return f"{self.name} ({self.cpf})"


class Consultation(models.Model):
    """An appointment linking one patient and one doctor at a given date/time."""
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='consultations')
    doctor = models.ForeignKey(Doctor, on_delete=models.PROTECT, related_name='consultations')
    consultation_date = models.DateTimeField(db_index=True)
    canceled = models.BooleanField(default=False)
    reason_cancellation = models.CharField(
        max_length=20, choices=ReasonCancellation.choices, blank=True, null=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['consultation_date', 'id']
        indexes = [
            models.Index(fields=['doctor', 'consultation_date'], name='consult_doctor_date_idx'),
            models.Index(fields=['patient', 'consultation_date'], name='consult_patient_date_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['doctor', 'consultation_date'],
                condition=Q(canceled=False),
                name='unique_active_consultation_per_doctor_slot',
            ),
        ]

    def __str__(self) -> str:
        return f"consultation d={self.doctor_id} p={self.patient_id} @ {self.consultation_date:%F %H:%M}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.object_type}#{self.object_id}"
