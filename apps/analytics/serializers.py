"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting

Input Serializers:
    StatisticsQuerySerializer - Validates store filter and inspection limit

Response Serializers:
    StoreStatsSerializer - One per-store statistics row
    InspectionStatisticsSerializer - Global and per-store statistics
"""

from django.conf import settings
from rest_framework import serializers


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class StatisticsQuerySerializer(serializers.Serializer):
    """
    Validate statistics query parameters.

    Query Parameters:
        store (str): Only count inspections of this store
        limit (int): How many of the newest inspections to count
    """

    store = serializers.CharField(required=False, allow_blank=True)
    limit = serializers.IntegerField(
        required=False,
        min_value=1,
        max_value=settings.INSPECTIONS_MAX_LIMIT,
        default=settings.INSPECTIONS_DEFAULT_LIMIT,
    )


# =============================================================================
# Response Serializers
# =============================================================================

class StoreStatsSerializer(serializers.Serializer):
    """Item outcome counts and rates of one store."""
    storeId = serializers.CharField()
    name = serializers.CharField()
    inspections = serializers.IntegerField()
    passed = serializers.IntegerField()
    failed = serializers.IntegerField()
    fixed = serializers.IntegerField()
    complianceRate = serializers.IntegerField(help_text='Percentage of answered items that passed')
    fixRate = serializers.IntegerField(help_text='Percentage of failed items that were fixed')


class InspectionStatisticsSerializer(serializers.Serializer):
    """Statistics over the loaded inspections."""
    total = serializers.IntegerField()
    completed = serializers.IntegerField()
    draft = serializers.IntegerField()
    passedItems = serializers.IntegerField()
    failedItems = serializers.IntegerField()
    fixedItems = serializers.IntegerField()
    complianceRate = serializers.IntegerField()
    fixRate = serializers.IntegerField()
    storeStats = StoreStatsSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    """Standard error response."""
    error = serializers.CharField()
