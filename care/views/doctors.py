from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated

from care.exceptions import NotFound
from care.models import Doctor
from care.permissions import IsAdmin
from care.serializers.content import DoctorSerializer
from care.views.common import by_method, db_alias, iso, ok


def _doctors():
    return Doctor.objects.using(db_alias())


def _get(pk: int) -> Doctor:
    doctor = _doctors().filter(pk=pk).first()
    if doctor is None:
        raise NotFound('Doctor not found.')
    return doctor


def _serialize(d: Doctor) -> dict:
    return {
        'id': d.id,
        'name': d.name,
        'specialty': d.specialty,
        'bio': d.bio,
        'photo': d.photo,
        'isActive': d.is_active,
        'createdAt': iso(d.created_at),
        'updatedAt': iso(d.updated_at),
    }


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def list_doctors(request):
    """Active doctors, for the website."""
    return ok([_serialize(d) for d in _doctors().filter(is_active=True).order_by('name', 'id')], count=True)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def create_doctor(request):
    s = DoctorSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    doctor = _doctors().create(**s.validated_data)
    return ok(_serialize(doctor), message='Doctor added successfully!', status_code=status.HTTP_201_CREATED)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def get_doctor(request, pk: int):
    return ok(_serialize(_get(pk)))


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def change_doctor(request, pk: int):
    doctor = _get(pk)
    if request.method == 'PUT':
        s = DoctorSerializer(doctor, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        for field, value in s.validated_data.items():
            setattr(doctor, field, value)
        doctor.save(using=db_alias())
        return ok(_serialize(doctor), message='Doctor updated!')
    # DELETE
    doctor.delete(using=db_alias())
    return ok(message='Doctor deleted.')


doctors_root = by_method(GET=list_doctors, POST=create_doctor)
doctor_detail = by_method(GET=get_doctor, PUT=change_doctor, DELETE=change_doctor)
