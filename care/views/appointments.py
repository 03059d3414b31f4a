"""
Appointment endpoints.

Booking is public (the website form); everything else is for signed-in
staff.  Business rules live in :class:`AppointmentService`; these views
only parse input and shape the envelope.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated

from care.models import Appointment
from care.serializers.appointment import (
    AppointmentListQuerySerializer,
    AppointmentUpdateSerializer,
    BookingSerializer,
    StatusSerializer,
    WalkInSerializer,
)
from care.services.appointments import AppointmentService
from care.services.audit import log_action
from care.views.common import by_method, db_alias, iso, ok


def _service() -> AppointmentService:
    return AppointmentService(using=db_alias())


def _serialize(a: Appointment) -> dict:
    return {
        'id': a.id,
        'patientName': a.patient_name,
        'email': a.email,
        'phone': a.phone,
        'doctor': {'id': a.doctor.id, 'name': a.doctor.name, 'specialty': a.doctor.specialty} if a.doctor else None,
        'doctorName': a.doctor_name,
        'appointmentDate': iso(a.appointment_date),
        'appointmentTime': a.appointment_time,
        'reason': a.reason,
        'status': a.status,
        'isWalkIn': a.is_walk_in,
        'notes': a.notes,
        'createdAt': iso(a.created_at),
        'updatedAt': iso(a.updated_at),
    }


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def book_appointment(request):
    s = BookingSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appointment = _service().book(**s.validated_data)
    return ok(
        _serialize(appointment),
        message='Appointment booked successfully! We will confirm it shortly.',
        status_code=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_appointments(request):
    """Filter by ``status`` (``All`` for any), ``startDate``/``endDate``
    (inclusive) and ``search`` over name, phone and email."""
    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    appointments = _service().list(
        status=vd.get('status') or None,
        start_date=vd.get('startDate'),
        end_date=vd.get('endDate'),
        search=(vd.get('search') or '').strip() or None,
    )
    return ok([_serialize(a) for a in appointments], count=True)


appointments_root = by_method(GET=list_appointments, POST=book_appointment)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def register_walk_in(request):
    s = WalkInSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appointment = _service().register_walk_in(**s.validated_data)
    log_action(user=request.user, action='walk_in', object_type='appointment', object_id=appointment.id,
               detail={'phone': appointment.phone}, using=db_alias())
    return ok(_serialize(appointment), message='Walk-in patient registered!', status_code=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def today_appointments(request):
    return ok([_serialize(a) for a in _service().list_today()], count=True)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def appointment_stats(request):
    return ok(_service().stats())


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def appointment_detail(request, pk: int):
    service = _service()
    if request.method == 'GET':
        return ok(_serialize(service.get(pk)))
    if request.method == 'PUT':
        s = AppointmentUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        appointment = service.update(pk, s.validated_data)
        return ok(_serialize(appointment), message='Appointment updated.')
    # DELETE
    service.delete(pk)
    return ok(message='Appointment deleted.')


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def update_appointment_status(request, pk: int):
    s = StatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    new_status = s.validated_data['status']
    appointment = _service().update_status(pk, new_status)
    log_action(user=request.user, action='appointment_status', object_type='appointment', object_id=appointment.id,
               detail={'status': new_status}, using=db_alias())
    return ok(_serialize(appointment), message=f'Status updated to {new_status}.')
