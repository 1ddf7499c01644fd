"""
Doctor endpoints.

``/api/v1.0/doctors`` lists active doctors (GET), registers a doctor
(POST) and applies partial updates (PUT). ``/api/v1.0/doctors/<id>``
returns one doctor (GET) or deactivates it (PATCH); doctors are never
hard-deleted because consultations keep referencing them.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.common import PageQuerySerializer
from clinic.serializers.doctor import DoctorCreateSerializer, DoctorUpdateSerializer
from clinic.services.doctors import (
    add_doctor,
    deactivate_doctor,
    find_doctor_by_id,
    find_doctors,
    serialize_doctor,
    update_doctor,
)


@api_view(['GET', 'POST', 'PUT'])
@permission_classes([IsAuthenticated])
def doctors(request):
    if request.method == 'GET':
        q = PageQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        page, page_size = q.validated_data['page'], q.validated_data['pageSize']
        data, total = find_doctors(page, page_size)
        return Response({'ok': True, 'data': data, 'pagination': {'total': total, 'page': page, 'pageSize': page_size}})

    if request.method == 'POST':
        s = DoctorCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        doctor = add_doctor(s.validated_data, user=request.user)
        return Response({'ok': True, 'data': serialize_doctor(doctor)}, status=201)

    # PUT
    s = DoctorUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    doctor = update_doctor(s.validated_data, user=request.user)
    return Response({'ok': True, 'data': serialize_doctor(doctor)})


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def doctor_detail(request, pk: int):
    if request.method == 'GET':
        return Response({'ok': True, 'data': serialize_doctor(find_doctor_by_id(pk))})
    doctor = deactivate_doctor(pk, user=request.user)
    return Response({'ok': True, 'data': serialize_doctor(doctor)})
