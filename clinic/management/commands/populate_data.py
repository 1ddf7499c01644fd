"""
Management command to populate the database with demo data.

Safe to run repeatedly: rows are matched on their natural keys (login,
crm, cpf) and only created when missing. A patient with an upcoming
consultation is not booked again.
"""
from datetime import datetime, time, timedelta

from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from clinic.models import Consultation, Doctor, Patient, Specialty, User

ADDRESS = {
    'street': 'Rua das Flores',
    'neighborhood': 'Centro',
    'zip_code': '01001000',
    'city': 'Sao Paulo',
    'state': 'SP',
    'number': '100',
    'additional_details': '',
}

DOCTORS = [
    {'name': 'Ana Souza', 'email': 'ana.souza@voll.med', 'crm': '123456', 'specialty': Specialty.ORTHOPEDICS},
    {'name': 'Bruno Lima', 'email': 'bruno.lima@voll.med', 'crm': '234567', 'specialty': Specialty.CARDIOLOGY},
    {'name': 'Carla Dias', 'email': 'carla.dias@voll.med', 'crm': '345678', 'specialty': Specialty.GYNECOLOGY},
    {'name': 'Diego Alves', 'email': 'diego.alves@voll.med', 'crm': '456789', 'specialty': Specialty.DERMATOLOGY},
    {'name': 'Elisa Rocha', 'email': 'elisa.rocha@voll.med', 'crm': '567890', 'specialty': Specialty.CARDIOLOGY},
]

PATIENTS = [
    {'name': 'Fernanda Costa', 'email': 'fernanda@example.com', 'cpf': '11122233344'},
    {'name': 'Gustavo Pereira', 'email': 'gustavo@example.com', 'cpf': '22233344455'},
    {'name': 'Helena Martins', 'email': 'helena@example.com', 'cpf': '33344455566'},
]


def _next_weekday(days_ahead: int, hour: int) -> datetime:
    """Local aware datetime ``days_ahead`` days out at ``hour``, skipping Sundays."""
    day = timezone.localdate() + timedelta(days=days_ahead)
    if day.weekday() == 6:
        day += timedelta(days=1)
    return timezone.make_aware(datetime.combine(day, time(hour=hour)))


class Command(BaseCommand):
    help = 'Populate database with demo doctors, patients and consultations'

    def add_arguments(self, parser):
        parser.add_argument('--login', default='api', help='login of the API user to ensure')
        parser.add_argument('--password', default='P@ssw0rd1', help='password of the API user')

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Creating demo data...')

        user, created = User.objects.get_or_create(
            username=options['login'],
            defaults={'password': make_password(options['password']), 'is_active': True},
        )
        self.stdout.write(f"{'Created' if created else 'Kept'} API user: {user.username}")

        doctors = self.create_doctors()
        patients = self.create_patients()
        self.create_consultations(doctors, patients)

        self.stdout.write(self.style.SUCCESS('Demo data ready.'))

    def create_doctors(self):
        doctors = []
        for data in DOCTORS:
            doctor, created = Doctor.objects.get_or_create(
                crm=data['crm'],
                defaults={**data, 'telephone': '11999990000', **ADDRESS},
            )
            doctors.append(doctor)
            if created:
                self.stdout.write(f'Created doctor: {doctor}')
        return doctors

    def create_patients(self):
        patients = []
        for data in PATIENTS:
            patient, created = Patient.objects.get_or_create(
                cpf=data['cpf'],
                defaults={**data, 'telephone': '11988880000', **ADDRESS},
            )
            patients.append(patient)
            if created:
                self.stdout.write(f'Created patient: {patient}')
        return patients

    def create_consultations(self, doctors, patients):
        for i, patient in enumerate(patients):
            upcoming = Consultation.objects.filter(
                patient=patient, canceled=False, consultation_date__gt=timezone.now())
            if upcoming.exists():
                continue
            doctor = doctors[i % len(doctors)]
            when = _next_weekday(7 + i, 9 + i)
            consultation, created = Consultation.objects.get_or_create(
                doctor=doctor,
                consultation_date=when,
                canceled=False,
                defaults={'patient': patient},
            )
            if created:
                self.stdout.write(f'Created {consultation}')
