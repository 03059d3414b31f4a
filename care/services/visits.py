"""
Patient visit ledger.

Keeps ``total_visits``, ``last_visit`` and the New/Regular status of a
patient in step with appointment events.  Patients are matched by
phone number, first record by id wins; the phone is a lookup key, not
a uniqueness constraint, so a reused or mistyped number can still
produce duplicates.

The two entry points differ on purpose:

* a walk-in creates the patient when the phone is unknown, and only
  promotes New to Regular on a repeat visit;
* a completed appointment never creates a patient and always leaves
  the record Regular, even on its first counted visit.
"""
from __future__ import annotations

import logging
from typing import Optional

from django.db import DEFAULT_DB_ALIAS, transaction
from django.db.models import F
from django.utils import timezone

from care.models import Patient

logger = logging.getLogger(__name__)


class VisitLedger:
    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using

    def _patients(self):
        return Patient.objects.using(self.using)

    def find_by_phone(self, phone: str) -> Optional[Patient]:
        if not phone:
            return None
        return self._patients().filter(phone=phone).order_by('id').first()

    def record_walk_in_visit(self, name: str, email: str | None, phone: str) -> Patient:
        """Count a walk-in visit, registering the patient on first sight."""
        now = timezone.now()
        with transaction.atomic(using=self.using):
            patient = (
                self._patients().select_for_update()
                .filter(phone=phone).order_by('id').first()
            )
            if patient is None:
                patient = self._patients().create(
                    name=name,
                    email=(email or '').lower(),
                    phone=phone,
                    status=Patient.STATUS_NEW,
                    total_visits=1,
                    last_visit=now,
                )
                logger.info('walk-in registered new patient %s', patient.pk)
                return patient

            patient.total_visits = F('total_visits') + 1
            patient.last_visit = now
            if patient.status == Patient.STATUS_NEW:
                patient.status = Patient.STATUS_REGULAR
            patient.save(using=self.using, update_fields=['total_visits', 'last_visit', 'status', 'updated_at'])
            patient.refresh_from_db(using=self.using)
        logger.info('walk-in visit counted for patient %s (total %s)', patient.pk, patient.total_visits)
        return patient

    def record_completion_visit(self, phone: str) -> Optional[Patient]:
        """Count a completed appointment; unknown phones are ignored."""
        patient = self.find_by_phone(phone)
        if patient is None:
            logger.info('completed appointment has no matching patient; ledger unchanged')
            return None
        self._patients().filter(pk=patient.pk).update(
            total_visits=F('total_visits') + 1,
            last_visit=timezone.now(),
            status=Patient.STATUS_REGULAR,
            updated_at=timezone.now(),
        )
        patient.refresh_from_db(using=self.using)
        logger.info('completion visit counted for patient %s (total %s)', patient.pk, patient.total_visits)
        return patient
