# ==========================================
# apps/inspections/models.py
# ==========================================

from django.db import models
import uuid

from .checklist import CHECKLIST_VERSION


def generate_document_id():
    """String ids, so placeholder and imported store ids share one key space."""
    return uuid.uuid4().hex


class InspectionStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    COMPLETED = 'completed', 'Completed'
    REVIEWED = 'reviewed', 'Reviewed'


class Store(models.Model):
    """Store reference data inspections point at."""

    id = models.CharField(primary_key=True, max_length=64, default=generate_document_id, editable=False)
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'stores'
        ordering = ['name']

    def __str__(self):
        return self.name


class Inspection(models.Model):
    """
    One daily walk of a store.

    ``items`` holds the answered checklist as a list of
    ``{id, description, passed, fixed, comments}`` documents in catalog order.
    ``store_id`` is a plain reference, not a foreign key: inspections keep
    pointing at stores that were removed or never persisted.
    """

    id = models.CharField(primary_key=True, max_length=64, default=generate_document_id, editable=False)
    store_id = models.CharField(max_length=64, db_index=True)
    date = models.DateField()
    time = models.TimeField()
    items = models.JSONField(default=list)
    checklist_version = models.PositiveSmallIntegerField(default=CHECKLIST_VERSION)
    status = models.CharField(max_length=20, choices=InspectionStatus.choices, default=InspectionStatus.DRAFT)
    inspected_by = models.JSONField(default=dict)
    corrected_by = models.JSONField(null=True, blank=True)
    version = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'inspections'
        indexes = [
            models.Index(fields=['store_id', 'created_at'], name='inspections_store_created_idx'),
            models.Index(fields=['created_at'], name='inspections_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"Inspection {self.id} - store {self.store_id} on {self.date} ({self.status})"

    @property
    def is_draft(self):
        return self.status == InspectionStatus.DRAFT
