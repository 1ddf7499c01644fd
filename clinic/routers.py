"""
URL mappings for the hospital management API.

Trailing slashes are deliberately omitted; resource endpoints live under
the versioned ``/api/v1.0`` prefix while authentication, health and
metrics stay unversioned.
"""
from django.urls import path, include

from .auth_views import login_view, logout_view, refresh_view, register_view
from .views import health
from .views.consultations import consultation_detail, consultations
from .views.doctors import doctor_detail, doctors
from .views.patients import patient_detail, patients

API = 'api/v1.0'

urlpatterns = [
    # django_prometheus.urls already declares the ``metrics`` path
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('api/auth/register', register_view, name='register_view'),
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', refresh_view, name='refresh_view'),
    path('api/auth/logout', logout_view, name='logout_view'),
    # Doctors
    path(f'{API}/doctors', doctors, name='doctors'),
    path(f'{API}/doctors/<int:pk>', doctor_detail, name='doctor_detail'),
    # Patients
    path(f'{API}/patients', patients, name='patients'),
    path(f'{API}/patients/<int:pk>', patient_detail, name='patient_detail'),
    # Consultations
    path(f'{API}/consultations', consultations, name='consultations'),
    path(f'{API}/consultations/<int:pk>', consultation_detail, name='consultation_detail'),
]
