"""
Django admin registrations for the clinic models.

Superusers can inspect doctors, patients and consultations through
``/admin/``. Deactivation is exposed as a plain ``active`` flag; the
audit trail is read-only.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import AuditEvent, Consultation, Doctor, Patient, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'email', 'is_staff', 'is_superuser', 'last_login')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'crm', 'specialty', 'email', 'active')
    list_filter = ('specialty', 'active')
    search_fields = ('name', 'crm', 'email')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'cpf', 'email', 'active')
    list_filter = ('active', 'state')
    search_fields = ('name', 'cpf', 'email')


@admin.register(Consultation)
class ConsultationAdmin(admin.ModelAdmin):
    list_display = ('id', 'doctor', 'patient', 'consultation_date', 'canceled', 'reason_cancellation')
    list_filter = ('canceled', 'reason_cancellation', 'doctor__specialty')
    search_fields = ('doctor__name', 'patient__name', 'patient__cpf')
    date_hierarchy = 'consultation_date'
    raw_id_fields = ('doctor', 'patient')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('id', 'action', 'object_type', 'object_id', 'user', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('action', 'user__username')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')
