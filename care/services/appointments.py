"""
Appointment lifecycle.

Bookings from the public website start ``pending``; walk-ins
registered at the desk start ``confirmed`` and are counted in the
patient ledger immediately.  Status updates accept any of the seven
statuses from any other status; only membership is checked.  Marking
an appointment ``completed`` counts a visit for the patient with the
same phone number.

The service writes through the database alias it was built with, and
each appointment-plus-ledger change commits as one transaction.
"""
from __future__ import annotations

import datetime
import logging
from typing import Any, Dict, List, Optional

from django.db import DEFAULT_DB_ALIAS, transaction
from django.db.models import Count, Q
from django.utils import timezone

from care.exceptions import NotFound, ValidationError
from care.models import Appointment, Doctor, Patient
from care.services.visits import VisitLedger

logger = logging.getLogger(__name__)

BOOKING_REQUIRED_MESSAGE = 'Please fill in all required fields: name, email, phone, date, and time.'
WALK_IN_REQUIRED_MESSAGE = 'Patient name, phone, and time are required.'
NOT_FOUND_MESSAGE = 'Appointment not found.'

# Fields a full update may touch; anything else is ignored.
UPDATABLE_FIELDS = frozenset({
    'patient_name', 'email', 'phone', 'doctor', 'doctor_name',
    'appointment_date', 'appointment_time', 'reason', 'status',
    'is_walk_in', 'notes',
})


def _missing(*values: Any) -> bool:
    return any(v is None or (isinstance(v, str) and not v.strip()) for v in values)


class AppointmentService:
    def __init__(self, using: str = DEFAULT_DB_ALIAS, ledger: Optional[VisitLedger] = None):
        self.using = using
        self.ledger = ledger or VisitLedger(using=using)

    def _appointments(self):
        return Appointment.objects.using(self.using)

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------
    def book(self, *, patient_name: str, email: str, phone: str,
             appointment_date: Optional[datetime.date], appointment_time: str,
             reason: str = '', doctor_name: str = '', doctor: Optional[Doctor] = None) -> Appointment:
        """Public booking; every contact field is mandatory."""
        if _missing(patient_name, email, phone, appointment_date, appointment_time):
            raise ValidationError(BOOKING_REQUIRED_MESSAGE)
        return self._appointments().create(
            patient_name=patient_name,
            email=email.lower(),
            phone=phone,
            appointment_date=appointment_date,
            appointment_time=appointment_time,
            reason=reason or '',
            doctor_name=doctor_name or '',
            doctor=doctor,
            status=Appointment.STATUS_PENDING,
            is_walk_in=False,
        )

    def register_walk_in(self, *, patient_name: str, phone: str, appointment_time: str,
                         email: Optional[str] = None, reason: str = '', doctor_name: str = '',
                         appointment_date: Optional[datetime.date] = None,
                         doctor: Optional[Doctor] = None) -> Appointment:
        """Register a patient who arrived without booking and count the visit."""
        if _missing(patient_name, phone, appointment_time):
            raise ValidationError(WALK_IN_REQUIRED_MESSAGE)
        with transaction.atomic(using=self.using):
            appointment = self._appointments().create(
                patient_name=patient_name,
                email=(email or '').lower(),
                phone=phone,
                appointment_date=appointment_date or timezone.localdate(),
                appointment_time=appointment_time,
                reason=reason or '',
                doctor_name=doctor_name or '',
                doctor=doctor,
                status=Appointment.STATUS_CONFIRMED,
                is_walk_in=True,
            )
            self.ledger.record_walk_in_visit(patient_name, email, phone)
        logger.info('walk-in appointment %s registered', appointment.pk)
        return appointment

    # ------------------------------------------------------------------
    # Status & updates
    # ------------------------------------------------------------------
    def update_status(self, pk: int, new_status: str) -> Appointment:
        if new_status not in Appointment.STATUSES:
            raise ValidationError(f"Invalid status. Must be one of: {', '.join(Appointment.STATUSES)}")
        with transaction.atomic(using=self.using):
            appointment = self.get(pk)
            appointment.status = new_status
            appointment.save(using=self.using, update_fields=['status', 'updated_at'])
            if new_status == Appointment.STATUS_COMPLETED:
                self.ledger.record_completion_visit(appointment.phone)
        logger.info('appointment %s status -> %s', appointment.pk, new_status)
        return appointment

    def update(self, pk: int, fields: Dict[str, Any]) -> Appointment:
        """Patch the allow-listed fields; no ledger side effects."""
        appointment = self.get(pk)
        changed = []
        for name, value in fields.items():
            if name not in UPDATABLE_FIELDS:
                continue
            if name == 'email' and value:
                value = value.lower()
            setattr(appointment, name, value)
            changed.append(name)
        if changed:
            appointment.save(using=self.using, update_fields=changed + ['updated_at'])
        return appointment

    def delete(self, pk: int) -> None:
        deleted, _ = self._appointments().filter(pk=pk).delete()
        if not deleted:
            raise NotFound(NOT_FOUND_MESSAGE)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get(self, pk: int) -> Appointment:
        appointment = self._appointments().select_related('doctor').filter(pk=pk).first()
        if appointment is None:
            raise NotFound(NOT_FOUND_MESSAGE)
        return appointment

    def list(self, *, status: Optional[str] = None, start_date: Optional[datetime.date] = None,
             end_date: Optional[datetime.date] = None, search: Optional[str] = None) -> List[Appointment]:
        qs = self._appointments().select_related('doctor')
        if status and status.lower() != 'all':
            qs = qs.filter(status=status.lower())
        if start_date:
            qs = qs.filter(appointment_date__gte=start_date)
        if end_date:
            qs = qs.filter(appointment_date__lte=end_date)
        if search:
            qs = qs.filter(
                Q(patient_name__icontains=search)
                | Q(phone__icontains=search)
                | Q(email__icontains=search)
            )
        return list(qs.order_by('appointment_date', 'appointment_time', 'id'))

    def list_today(self) -> List[Appointment]:
        return list(
            self._appointments().select_related('doctor')
            .filter(appointment_date=timezone.localdate())
            .order_by('appointment_time', 'id')
        )

    def stats(self) -> Dict[str, int]:
        """Dashboard counters for today.

        ``waiting`` counts confirmed appointments; the dashboard has
        always labelled them that way.
        """
        counts = self._appointments().filter(appointment_date=timezone.localdate()).aggregate(
            totalToday=Count('id'),
            waiting=Count('id', filter=Q(status=Appointment.STATUS_CONFIRMED)),
            late=Count('id', filter=Q(status=Appointment.STATUS_LATE)),
            cancelled=Count('id', filter=Q(status=Appointment.STATUS_CANCELLED)),
        )
        counts['totalPatients'] = Patient.objects.using(self.using).count()
        return counts
