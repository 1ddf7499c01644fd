from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clinic.serializers.consultation import (
    ConsultationCancelSerializer,
    ConsultationCreateSerializer,
    ConsultationListQuerySerializer,
)
from clinic.services.consultations import (
    add_consultation,
    cancel_consultation,
    find_consultation_by_id,
    list_consultations,
    serialize_consultation,
)


@api_view(['GET', 'POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def consultations(request):
    if request.method == 'GET':
        q = ConsultationListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        v = q.validated_data
        data, total = list_consultations(
            doctor_id=v.get('doctorId'),
            patient_id=v.get('patientId'),
            include_canceled=v.get('includeCanceled', False),
            page=v['page'],
            page_size=v['pageSize'],
        )
        return Response({'ok': True, 'data': data, 'pagination': {'total': total, 'page': v['page'], 'pageSize': v['pageSize']}})

    if request.method == 'POST':
        s = ConsultationCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        v = s.validated_data
        c = add_consultation(
            patient_id=v['patientId'],
            consultation_date=v['consultationDate'],
            doctor_id=v.get('doctorId'),
            specialty=v.get('specialty'),
            user=request.user,
        )
        return Response({'ok': True, 'data': serialize_consultation(c)}, status=201)

    # PATCH: cancel
    s = ConsultationCancelSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    c = cancel_consultation(
        consultation_id=s.validated_data['consultationId'],
        reason_cancellation=s.validated_data['reasonCancellation'],
        user=request.user,
    )
    return Response({'ok': True, 'data': serialize_consultation(c)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def consultation_detail(request, pk: int):
    return Response({'ok': True, 'data': serialize_consultation(find_consultation_by_id(pk))})
