"""
Serializers for the website content: doctors, blog posts, reviews and
contact messages.  Anything the public can post is passed through
bleach.
"""
from rest_framework import serializers

from care.serializers.fields import CleanCharField


class DoctorSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    specialty = serializers.CharField(required=False, allow_blank=True, max_length=255)
    bio = serializers.CharField(required=False, allow_blank=True)
    photo = serializers.CharField(required=False, allow_blank=True, max_length=512)
    isActive = serializers.BooleanField(source='is_active', required=False)


class BlogPostSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    content = serializers.CharField()
    image = serializers.CharField(required=False, allow_blank=True, max_length=512)
    isPublished = serializers.BooleanField(source='is_published', required=False)


class ReviewSerializer(serializers.Serializer):
    patientName = CleanCharField(source='patient_name', required=False, allow_blank=True, default='', max_length=255)
    message = CleanCharField(required=False, allow_blank=True, default='')
    rating = serializers.IntegerField(required=False, min_value=0, max_value=5, default=0)

    def validate(self, attrs):
        if not attrs.get('patient_name') or not attrs.get('message'):
            raise serializers.ValidationError('Name and message are required.')
        return attrs


class ContactSerializer(serializers.Serializer):
    # older website builds post ``name`` instead of ``fullName``
    fullName = CleanCharField(required=False, allow_blank=True, default='', max_length=255)
    name = CleanCharField(required=False, allow_blank=True, default='', max_length=255)
    email = serializers.CharField(required=False, allow_blank=True, default='', max_length=254)
    phone = CleanCharField(required=False, allow_blank=True, default='', max_length=32)
    message = CleanCharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        full_name = attrs.pop('fullName') or attrs.pop('name')
        attrs.pop('name', None)
        if not full_name or not attrs.get('email') or not attrs.get('message'):
            raise serializers.ValidationError('Please fill in your name, email, and message.')
        attrs['full_name'] = full_name
        attrs['email'] = attrs['email'].lower()
        return attrs
