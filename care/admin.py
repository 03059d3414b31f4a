"""
Django admin registrations for the clinic models.

Staff accounts, appointments and patients get list filters and search
so the front desk can look things up from ``/admin/`` when the
dashboard is not enough.
"""

from django.contrib import admin

from .models import AuditEvent, Appointment, BlogPost, ContactMessage, Doctor, Patient, Review, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'name', 'role', 'is_active', 'last_login')
    list_filter = ('role', 'is_active')
    search_fields = ('username', 'name', 'email')
    exclude = ('password',)


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('name', 'specialty', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('name', 'specialty')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('patient_name', 'phone', 'appointment_date', 'appointment_time', 'status', 'is_walk_in')
    list_filter = ('status', 'is_walk_in', 'appointment_date')
    search_fields = ('patient_name', 'phone', 'email')
    date_hierarchy = 'appointment_date'


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('name', 'phone', 'status', 'total_visits', 'last_visit')
    list_filter = ('status', 'gender')
    search_fields = ('name', 'phone', 'email')
    readonly_fields = ('total_visits', 'last_visit')


@admin.register(BlogPost)
class BlogPostAdmin(admin.ModelAdmin):
    list_display = ('title', 'is_published', 'created_at')
    list_filter = ('is_published',)
    search_fields = ('title',)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('patient_name', 'rating', 'is_approved', 'created_at')
    list_filter = ('is_approved', 'rating')


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'email', 'is_read', 'created_at')
    list_filter = ('is_read',)
    search_fields = ('full_name', 'email')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('action', 'object_type')
