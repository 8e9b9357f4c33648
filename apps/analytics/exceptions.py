"""
Domain exceptions for analytics app.

This module defines domain-specific exceptions raised by the analytics
layer. Errors from loading the underlying inspections are the inspections
app's own exceptions and pass through unchanged.

Exception Hierarchy:
    AnalyticsServiceError (base)
    └── InvalidLimitError

Usage:
    from apps.analytics.exceptions import InvalidLimitError

    if limit < 1:
        raise InvalidLimitError(f"Invalid limit: {limit}")
"""


class AnalyticsServiceError(Exception):
    """
    Base exception for all analytics service errors.

    All domain-specific exceptions in the analytics app inherit from this
    class, making it easy to catch all analytics errors in views:

        try:
            data = InspectionAnalytics.dashboard(session=session, limit=0)
        except AnalyticsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidLimitError(AnalyticsServiceError):
    """
    Raised when the inspection limit is not a positive number.

    Example:
        raise InvalidLimitError("Invalid limit: 0. Must be at least 1")
    """

    pass
