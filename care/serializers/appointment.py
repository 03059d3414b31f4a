from rest_framework import serializers

from care.models import Appointment, Doctor
from care.serializers.fields import CleanCharField, LooseDateField


def _doctor_field(**kwargs):
    return serializers.PrimaryKeyRelatedField(
        queryset=Doctor.objects.all(), required=False, allow_null=True, **kwargs
    )


class BookingSerializer(serializers.Serializer):
    """Public booking form.  Presence of the required fields is checked
    by the service so the website gets one combined message."""
    patientName = CleanCharField(source='patient_name', required=False, allow_blank=True, default='', max_length=255)
    email = serializers.CharField(required=False, allow_blank=True, default='', max_length=254)
    phone = CleanCharField(required=False, allow_blank=True, default='', max_length=32)
    appointmentDate = LooseDateField(source='appointment_date', required=False, default=None)
    appointmentTime = CleanCharField(source='appointment_time', required=False, allow_blank=True, default='', max_length=32)
    reason = CleanCharField(required=False, allow_blank=True, default='')
    doctorName = CleanCharField(source='doctor_name', required=False, allow_blank=True, default='', max_length=255)
    doctor = _doctor_field(default=None)


class WalkInSerializer(serializers.Serializer):
    patientName = serializers.CharField(source='patient_name', required=False, allow_blank=True, default='', max_length=255)
    email = serializers.CharField(required=False, allow_blank=True, default='', max_length=254)
    phone = serializers.CharField(required=False, allow_blank=True, default='', max_length=32)
    appointmentTime = serializers.CharField(source='appointment_time', required=False, allow_blank=True, default='', max_length=32)
    reason = serializers.CharField(required=False, allow_blank=True, default='')
    doctorName = serializers.CharField(source='doctor_name', required=False, allow_blank=True, default='', max_length=255)
    doctor = _doctor_field(default=None)
    # the dashboard posts ``date``; ``appointmentDate`` is accepted too
    date = LooseDateField(required=False, default=None)
    appointmentDate = LooseDateField(source='appointment_date', required=False, default=None)

    def validate(self, attrs):
        picked = attrs.pop('date', None)
        attrs['appointment_date'] = picked or attrs.get('appointment_date')
        return attrs


class StatusSerializer(serializers.Serializer):
    # membership is checked by the service, which owns the error message
    status = serializers.CharField(required=False, allow_blank=True, default='')


class AppointmentUpdateSerializer(serializers.Serializer):
    """Fields staff may change on an existing appointment."""
    patientName = serializers.CharField(source='patient_name', required=False, max_length=255)
    email = serializers.CharField(required=False, allow_blank=True, max_length=254)
    phone = serializers.CharField(required=False, max_length=32)
    doctor = _doctor_field()
    doctorName = serializers.CharField(source='doctor_name', required=False, allow_blank=True, max_length=255)
    appointmentDate = LooseDateField(source='appointment_date', required=False, allow_null=False)
    appointmentTime = serializers.CharField(source='appointment_time', required=False, max_length=32)
    reason = serializers.CharField(required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=Appointment.STATUSES, required=False)
    isWalkIn = serializers.BooleanField(source='is_walk_in', required=False)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_appointmentDate(self, v):
        if v is None:
            raise serializers.ValidationError('Appointment date is required.')
        return v


class AppointmentListQuerySerializer(serializers.Serializer):
    status = serializers.CharField(required=False, allow_blank=True)
    startDate = LooseDateField(required=False)
    endDate = LooseDateField(required=False)
    search = serializers.CharField(required=False, allow_blank=True)
