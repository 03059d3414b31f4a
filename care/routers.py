"""
URL mappings for the clinic API.

Paths have no trailing slash, matching what the dashboard and the
public website call.  Paths that mix a public method with a staff-only
one are routed through :func:`care.views.common.by_method`.
"""
from django.urls import include, path

from .views import appointments, auth, blog, common, contact, doctors, patients, reviews

urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', common.healthz),
    path('api', common.api_index),

    # Authentication
    path('api/auth/signup', auth.signup_view),
    path('api/auth/login', auth.login_view),
    path('api/auth/me', auth.me_view),
    path('api/auth/users', auth.list_users_view),
    path('api/auth/users/<int:pk>', auth.delete_user_view),

    # Appointments
    path('api/appointments', appointments.appointments_root),
    path('api/appointments/walkin', appointments.register_walk_in),
    path('api/appointments/today', appointments.today_appointments),
    path('api/appointments/stats', appointments.appointment_stats),
    path('api/appointments/<int:pk>', appointments.appointment_detail),
    path('api/appointments/<int:pk>/status', appointments.update_appointment_status),

    # Patients
    path('api/patients', patients.patients_root),
    path('api/patients/<int:pk>', patients.patient_detail),

    # Website content
    path('api/doctors', doctors.doctors_root),
    path('api/doctors/<int:pk>', doctors.doctor_detail),
    path('api/blog', blog.blog_root),
    path('api/blog/all', blog.list_all_posts),
    path('api/blog/<int:pk>', blog.blog_detail),
    path('api/reviews', reviews.reviews_root),
    path('api/reviews/all', reviews.all_reviews),
    path('api/reviews/<int:pk>/approve', reviews.approve_review),
    path('api/reviews/<int:pk>', reviews.delete_review),
    path('api/contact', contact.contact_root),
    path('api/contact/<int:pk>/read', contact.mark_read),
    path('api/contact/<int:pk>', contact.delete_message),
]
