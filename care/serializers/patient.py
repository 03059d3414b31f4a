from rest_framework import serializers

from care.models import Patient
from care.serializers.fields import LooseDateField

GENDERS = [value for value, _ in Patient.GENDER_CHOICES]


class PatientSerializer(serializers.Serializer):
    """Staff-editable patient fields.

    The visit counters and New/Regular status are owned by the visit
    ledger and cannot be written here.
    """
    name = serializers.CharField(max_length=255, error_messages={
        'required': 'Patient name is required',
        'blank': 'Patient name is required',
    })
    email = serializers.CharField(required=False, allow_blank=True, max_length=254)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)
    dateOfBirth = LooseDateField(source='date_of_birth', required=False)
    address = serializers.CharField(required=False, allow_blank=True, max_length=512)
    gender = serializers.ChoiceField(choices=GENDERS, required=False, allow_blank=True)
    bloodGroup = serializers.CharField(source='blood_group', required=False, allow_blank=True, max_length=8)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_email(self, v):
        return (v or '').lower()


class PatientListQuerySerializer(serializers.Serializer):
    search = serializers.CharField(required=False, allow_blank=True)
