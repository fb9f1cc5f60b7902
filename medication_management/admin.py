"""
Medication & Vaccination Admin Configuration
"""

from django.contrib import admin

from .models import TreatmentRecord, VaccinationRecord


@admin.register(VaccinationRecord)
class VaccinationRecordAdmin(admin.ModelAdmin):
    list_display = ['vaccine_name', 'batch', 'date_administered', 'dosage', 'next_due_date']
    list_filter = ['date_administered', 'next_due_date']
    search_fields = ['vaccine_name', 'batch__species', 'batch__farm__name']
    date_hierarchy = 'date_administered'


@admin.register(TreatmentRecord)
class TreatmentRecordAdmin(admin.ModelAdmin):
    list_display = ['medication_name', 'batch', 'date', 'reason', 'withdrawal_days']
    list_filter = ['date']
    search_fields = ['medication_name', 'reason', 'batch__species']
    date_hierarchy = 'date'
