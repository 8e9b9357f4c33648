"""
Serializers for the inspections app.

Field names are camelCase (``storeId``, ``inspectedBy``...) so API payloads
match the persisted inspection documents exactly.

Input Serializers:
    InspectionItemSerializer - One checklist answer
    InspectionFormSerializer - New inspection (draft save or submit)
    InspectionChangesSerializer - Edits to an existing draft
    InspectionListQuerySerializer - List filters

Response Serializers:
    StoreSerializer
    InspectionSerializer
    InspectionDetailSerializer - Adds item summary and store name
"""

from django.conf import settings
from django.utils import timezone
from rest_framework import serializers

from .models import Inspection, InspectionStatus, Store
from .checklist import CHECKLIST_VERSION
from .services import has_failed_items, summarize_inspection

TIME_FORMAT = '%H:%M'
TIME_INPUT_FORMATS = [TIME_FORMAT, 'iso-8601']


class StoreSerializer(serializers.ModelSerializer):

    class Meta:
        model = Store
        fields = ['id', 'name', 'location']
        read_only_fields = fields


class InspectionItemSerializer(serializers.Serializer):
    """One answered checklist item; ``passed`` null means unanswered."""

    id = serializers.IntegerField(min_value=1)
    description = serializers.CharField(required=False, allow_blank=True)
    passed = serializers.BooleanField(allow_null=True, default=None)
    fixed = serializers.BooleanField(default=False)
    comments = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        # Fixed only means something for a failed item
        if attrs.get('passed') is not False:
            attrs['fixed'] = False
        return attrs


class InspectionFormSerializer(serializers.Serializer):
    """
    Validate a new inspection form.

    ``status`` picks the action: 'draft' saves as draft, 'completed'
    submits. Missing date and time default to now.
    """

    storeId = serializers.CharField(source='store_id', required=False, allow_blank=True, default='')
    date = serializers.DateField(required=False)
    time = serializers.TimeField(required=False, input_formats=TIME_INPUT_FORMATS)
    items = InspectionItemSerializer(many=True, required=False)
    correctedBy = serializers.CharField(source='corrected_by', required=False, allow_blank=True, default='')
    status = serializers.ChoiceField(
        choices=[InspectionStatus.DRAFT, InspectionStatus.COMPLETED],
        default=InspectionStatus.DRAFT,
    )

    def validate(self, attrs):
        now = timezone.localtime()
        attrs.setdefault('date', now.date())
        attrs.setdefault('time', now.time().replace(second=0, microsecond=0))
        if 'items' in attrs:
            attrs['items'] = [dict(item) for item in attrs['items']]
        return attrs


class InspectionChangesSerializer(serializers.Serializer):
    """Partial changes to a draft; ``version`` enables the stale-write check."""

    storeId = serializers.CharField(source='store_id', required=False, allow_blank=True)
    date = serializers.DateField(required=False)
    time = serializers.TimeField(required=False, input_formats=TIME_INPUT_FORMATS)
    items = InspectionItemSerializer(many=True, required=False)
    correctedBy = serializers.CharField(source='corrected_by', required=False, allow_blank=True)
    version = serializers.IntegerField(required=False, min_value=1)

    def validate(self, attrs):
        if 'items' in attrs:
            attrs['items'] = [dict(item) for item in attrs['items']]
        return attrs


class InspectionListQuerySerializer(serializers.Serializer):
    """Query parameters of the inspection list."""

    store = serializers.CharField(required=False, allow_blank=True)
    search = serializers.CharField(required=False, allow_blank=True, default='')
    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=settings.INSPECTIONS_MAX_LIMIT,
        default=settings.INSPECTIONS_DEFAULT_LIMIT,
    )


class InspectionSerializer(serializers.ModelSerializer):
    storeId = serializers.CharField(source='store_id', read_only=True)
    time = serializers.TimeField(format=TIME_FORMAT, read_only=True)
    inspectedBy = serializers.JSONField(source='inspected_by', read_only=True)
    correctedBy = serializers.JSONField(source='corrected_by', read_only=True)
    checklistVersion = serializers.IntegerField(source='checklist_version', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Inspection
        fields = [
            'id',
            'storeId',
            'date',
            'time',
            'items',
            'status',
            'inspectedBy',
            'correctedBy',
            'checklistVersion',
            'version',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields


class InspectionDetailSerializer(InspectionSerializer):
    """Inspection plus the summary shown on its read-only view."""

    storeName = serializers.SerializerMethodField()
    summary = serializers.SerializerMethodField()
    hasFailedItems = serializers.SerializerMethodField()

    class Meta(InspectionSerializer.Meta):
        fields = InspectionSerializer.Meta.fields + ['storeName', 'summary', 'hasFailedItems']
        read_only_fields = fields

    def get_storeName(self, obj):
        names = self.context.get('store_names', {})
        return names.get(obj.store_id) or f"Store #{obj.store_id}"

    def get_summary(self, obj):
        return summarize_inspection(obj)

    def get_hasFailedItems(self, obj):
        return has_failed_items(obj.items or [])


class NewInspectionFormSerializer(serializers.Serializer):
    """Initial values for the new inspection screen."""

    storeId = serializers.CharField(source='store_id')
    date = serializers.DateField()
    time = serializers.TimeField(format=TIME_FORMAT)
    items = InspectionItemSerializer(many=True)
    correctedBy = serializers.CharField(source='corrected_by', allow_blank=True)
    checklistVersion = serializers.SerializerMethodField()
    stores = StoreSerializer(many=True)

    def get_checklistVersion(self, obj):
        return CHECKLIST_VERSION


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
