"""
Patient endpoints, mirroring the doctor ones: list/register/update on
``/api/v1.0/patients`` and read/deactivate on ``/api/v1.0/patients/<id>``.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.common import PageQuerySerializer
from clinic.serializers.patient import PatientCreateSerializer, PatientUpdateSerializer
from clinic.services.patients import (
    add_patient,
    deactivate_patient,
    find_patient_by_id,
    find_patients,
    serialize_patient,
    update_patient,
)


@api_view(['GET', 'POST', 'PUT'])
@permission_classes([IsAuthenticated])
def patients(request):
    if request.method == 'GET':
        q = PageQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        page, page_size = q.validated_data['page'], q.validated_data['pageSize']
        data, total = find_patients(page, page_size)
        return Response({'ok': True, 'data': data, 'pagination': {'total': total, 'page': page, 'pageSize': page_size}})

    if request.method == 'POST':
        s = PatientCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        patient = add_patient(s.validated_data, user=request.user)
        return Response({'ok': True, 'data': serialize_patient(patient)}, status=201)

    s = PatientUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = update_patient(s.validated_data, user=request.user)
    return Response({'ok': True, 'data': serialize_patient(patient)})


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def patient_detail(request, pk: int):
    if request.method == 'GET':
        return Response({'ok': True, 'data': serialize_patient(find_patient_by_id(pk))})
    patient = deactivate_patient(pk, user=request.user)
    return Response({'ok': True, 'data': serialize_patient(patient)})
