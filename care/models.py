"""
Database models for the clinic backend.

Staff accounts, appointments and the patient visit ledger form the
core of the system; doctors, blog posts, reviews and contact messages
back the public website.  Field names are snake_case here and exposed
as camelCase by the views.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Staff account used to sign in to the dashboard.

    Usernames are stored lower-case so lookups are effectively
    case-insensitive.  ``is_active`` and ``last_login`` come from
    :class:`AbstractUser`.
    """
    ROLE_ADMIN = 'admin'
    ROLE_DOCTOR = 'doctor'
    ROLE_RECEPTIONIST = 'receptionist'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_RECEPTIONIST, 'Receptionist'),
    ]
    name = models.CharField(max_length=255)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_RECEPTIONIST)

    def save(self, *args, **kwargs):
        if self.username:
            self.username = self.username.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Doctor(models.Model):
    """Public doctor profile shown on the website."""
    name = models.CharField(max_length=255)
    specialty = models.CharField(max_length=255, blank=True)
    bio = models.TextField(blank=True)
    photo = models.CharField(max_length=512, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.name


class Appointment(models.Model):
    """A booked or walk-in visit.

    ``status`` is not restricted to adjacent transitions: any of the
    seven values may follow any other.
    """
    STATUS_PENDING = 'pending'
    STATUS_CONFIRMED = 'confirmed'
    STATUS_ARRIVED = 'arrived'
    STATUS_WAITING = 'waiting'
    STATUS_LATE = 'late'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_ARRIVED, 'Arrived'),
        (STATUS_WAITING, 'Waiting'),
        (STATUS_LATE, 'Late'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]
    STATUSES = tuple(value for value, _ in STATUS_CHOICES)

    patient_name = models.CharField(max_length=255)
    email = models.CharField(max_length=254, blank=True)
    phone = models.CharField(max_length=32, db_index=True)
    doctor = models.ForeignKey(
        Doctor, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments'
    )
    doctor_name = models.CharField(max_length=255, blank=True)
    appointment_date = models.DateField(db_index=True)
    appointment_time = models.CharField(max_length=32)
    reason = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    is_walk_in = models.BooleanField(default=False)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['appointment_date', 'appointment_time'], name='care_appt_date_time_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.patient_name} on {self.appointment_date} {self.appointment_time} ({self.status})"


class Patient(models.Model):
    """Patient record with the visit ledger counters.

    ``total_visits`` only grows and ``status`` moves from New to Regular
    once.  Appointments find their patient by phone number.
    """
    STATUS_NEW = 'New'
    STATUS_REGULAR = 'Regular'
    STATUS_CHOICES = [
        (STATUS_NEW, 'New'),
        (STATUS_REGULAR, 'Regular'),
    ]
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]

    name = models.CharField(max_length=255)
    email = models.CharField(max_length=254, blank=True)
    phone = models.CharField(max_length=32, blank=True, db_index=True)
    date_of_birth = models.DateField(null=True, blank=True)
    address = models.CharField(max_length=512, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    blood_group = models.CharField(max_length=8, blank=True)
    notes = models.TextField(blank=True, default='')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_NEW)
    total_visits = models.PositiveIntegerField(default=0)
    last_visit = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.phone})"


class BlogPost(models.Model):
    title = models.CharField(max_length=255)
    content = models.TextField()
    image = models.CharField(max_length=512, blank=True)
    is_published = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.title


class Review(models.Model):
    """Patient testimonial; hidden until an admin approves it."""
    patient_name = models.CharField(max_length=255)
    message = models.TextField()
    rating = models.PositiveSmallIntegerField(default=0)
    is_approved = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.patient_name} ({self.rating})"


class ContactMessage(models.Model):
    full_name = models.CharField(max_length=255)
    email = models.CharField(max_length=254, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    message = models.TextField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.full_name}: {self.message[:30]}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='care_audit_action_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='care_audit_object_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
