from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.accounts.session import get_session_user
from apps.inspections.exceptions import AuthenticationError, InspectionsServiceError, StoreUnavailableError
from apps.inspections.notifications import notify_error
from .analytics import InspectionAnalytics
from .serializers import (
    StatisticsQuerySerializer,
    InspectionStatisticsSerializer,
    ErrorSerializer,
)
from .exceptions import AnalyticsServiceError


@extend_schema(
    parameters=[
        OpenApiParameter('store', OpenApiTypes.STR, description='Only count inspections of this store'),
        OpenApiParameter('limit', OpenApiTypes.INT, description='Number of newest inspections to count', default=50),
    ],
    responses={
        200: InspectionStatisticsSerializer,
        400: ErrorSerializer,
        503: ErrorSerializer,
    },
    description="Compliance and fix rates of daily walk inspections, globally and per store.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inspection_statistics(request):
    """Get inspection statistics - thin HTTP handler."""
    # Validate query parameters using input serializer
    query_serializer = StatisticsQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = InspectionAnalytics.dashboard(
            session=get_session_user(request),
            store_id=params.get('store') or None,
            limit=params['limit'],
            request=request,
        )
    except AnalyticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except AuthenticationError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except StoreUnavailableError as e:
        notify_error(request, 'Failed to load statistics', str(e))
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
    except InspectionsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(data)
