"""
Field validators for consultation booking requests.

These run during serializer validation, before any lookup touches the
database. Thresholds come from settings so deployments can adjust clinic
hours without code changes.
"""
from __future__ import annotations

from datetime import datetime, timedelta

from django.conf import settings
from django.utils import timezone
from rest_framework import serializers

SUNDAY = 6


def validate_scheduled_in_advance(value: datetime, *, now: datetime | None = None) -> datetime:
    """Reject dates less than ``CONSULTATION_MIN_ADVANCE_MINUTES`` ahead."""
    now = now or timezone.now()
    minutes = settings.CONSULTATION_MIN_ADVANCE_MINUTES
    if value - now < timedelta(minutes=minutes):
        raise serializers.ValidationError(
            f'Consultations must be scheduled at least {minutes} minutes in advance'
        )
    return value


def validate_business_hours(value: datetime) -> datetime:
    """Monday to Saturday; the last slot must end by closing time."""
    local = timezone.localtime(value) if timezone.is_aware(value) else value
    opening = settings.CLINIC_OPENING_HOUR
    closing = settings.CLINIC_CLOSING_HOUR
    start = local.replace(hour=opening, minute=0, second=0, microsecond=0)
    last_start = local.replace(hour=closing, minute=0, second=0, microsecond=0) - timedelta(
        minutes=settings.CONSULTATION_DURATION_MINUTES
    )
    if local.weekday() == SUNDAY or not (start <= local <= last_start):
        raise serializers.ValidationError(
            f'Consultations must be scheduled Monday to Saturday, from {opening:02d}:00 to {closing:02d}:00'
        )
    return value
