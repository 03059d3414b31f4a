"""
Patient records for signed-in staff.

Visit counters and the New/Regular status are read-only here; they are
maintained by :mod:`care.services.visits`.
"""
from __future__ import annotations

from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from care.exceptions import NotFound
from care.models import Patient
from care.serializers.patient import PatientListQuerySerializer, PatientSerializer
from care.views.common import db_alias, iso, ok


def _patients():
    return Patient.objects.using(db_alias())


def _get(pk: int) -> Patient:
    patient = _patients().filter(pk=pk).first()
    if patient is None:
        raise NotFound('Patient not found.')
    return patient


def _serialize(p: Patient) -> dict:
    return {
        'id': p.id,
        'name': p.name,
        'email': p.email,
        'phone': p.phone,
        'dateOfBirth': iso(p.date_of_birth),
        'address': p.address,
        'gender': p.gender,
        'bloodGroup': p.blood_group,
        'notes': p.notes,
        'status': p.status,
        'totalVisits': p.total_visits,
        'lastVisit': iso(p.last_visit),
        'createdAt': iso(p.created_at),
        'updatedAt': iso(p.updated_at),
    }


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patients_root(request):
    if request.method == 'GET':
        q = PatientListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        search = (q.validated_data.get('search') or '').strip()
        qs = _patients()
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(phone__icontains=search) | Q(email__icontains=search))
        return ok([_serialize(p) for p in qs.order_by('-created_at', '-id')], count=True)
    # POST
    s = PatientSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = _patients().create(**s.validated_data)
    return ok(_serialize(patient), message='Patient registered successfully!', status_code=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def patient_detail(request, pk: int):
    patient = _get(pk)
    if request.method == 'GET':
        return ok(_serialize(patient))
    if request.method == 'PUT':
        s = PatientSerializer(patient, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        for field, value in s.validated_data.items():
            setattr(patient, field, value)
        if s.validated_data:
            patient.save(using=db_alias(), update_fields=list(s.validated_data) + ['updated_at'])
        return ok(_serialize(patient), message='Patient updated.')
    # DELETE
    patient.delete(using=db_alias())
    return ok(message='Patient deleted.')
