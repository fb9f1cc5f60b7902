"""
Medication & Vaccination Management Models

Tracks vaccinations and treatments given to batches.

Models:
    - VaccinationRecord: A vaccine administered, with an optional follow-up due date
    - TreatmentRecord: A medication course, with its withdrawal period
"""

import uuid

from django.core.exceptions import ValidationError
from django.db import models


class VaccinationRecord(models.Model):
    """
    Record of a vaccination given to a batch.

    A record with no ``next_due_date`` counts as completed; otherwise the
    follow-up dose is overdue or upcoming depending on today's date.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    batch = models.ForeignKey('livestock.Batch', on_delete=models.CASCADE, related_name='vaccinations')

    vaccine_name = models.CharField(max_length=200)
    date_administered = models.DateField()
    dosage = models.CharField(max_length=100)
    next_due_date = models.DateField(null=True, blank=True, help_text="Date the next dose is due")
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'vaccination_records'
        ordering = ['-date_administered']
        indexes = [
            models.Index(fields=['batch', 'date_administered']),
            models.Index(fields=['next_due_date']),
        ]

    def __str__(self):
        return f"{self.vaccine_name} on {self.date_administered}"

    def clean(self):
        errors = {}

        if not (self.vaccine_name or '').strip():
            errors['vaccine_name'] = 'Vaccine name is required'
        if not (self.dosage or '').strip():
            errors['dosage'] = 'Dosage is required'
        if self.next_due_date and self.date_administered and self.next_due_date <= self.date_administered:
            errors['next_due_date'] = 'Next due date must be after administration date'

        if errors:
            raise ValidationError(errors)


class TreatmentRecord(models.Model):
    """
    Record of a medication given to a batch.

    Products from the batch should not be sold until ``withdrawal_days``
    after the treatment date.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    batch = models.ForeignKey('livestock.Batch', on_delete=models.CASCADE, related_name='treatments')

    medication_name = models.CharField(max_length=200)
    reason = models.CharField(max_length=255)
    date = models.DateField()
    dosage = models.CharField(max_length=100)
    withdrawal_days = models.IntegerField(default=0)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'treatment_records'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['batch', 'date']),
        ]

    def __str__(self):
        return f"{self.medication_name} on {self.date}"

    def clean(self):
        errors = {}

        if not (self.medication_name or '').strip():
            errors['medication_name'] = 'Medication name is required'
        if not (self.reason or '').strip():
            errors['reason'] = 'Reason is required'
        if not (self.dosage or '').strip():
            errors['dosage'] = 'Dosage is required'
        if self.withdrawal_days is not None and self.withdrawal_days < 0:
            errors['withdrawal_days'] = 'Withdrawal days cannot be negative'

        if errors:
            raise ValidationError(errors)
