import logging

from django.http import HttpResponseRedirect
from django.urls import reverse
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.accounts.session import get_session_user
from .notifications import notify_error, notify_success
from .serializers import (
    ErrorSerializer,
    InspectionChangesSerializer,
    InspectionDetailSerializer,
    InspectionFormSerializer,
    InspectionListQuerySerializer,
    InspectionSerializer,
    NewInspectionFormSerializer,
    StoreSerializer,
)
from .services import (
    get_inspection_by_id,
    get_inspections,
    get_stores,
    load_for_edit,
    new_inspection_form,
    save_draft_edits,
    save_new_draft,
    search_inspections,
    submit_edits,
    submit_new_inspection,
)
from .exceptions import (
    AuthenticationError,
    InspectionLockedError,
    InspectionNotFoundError,
    InspectionsServiceError,
    InspectionValidationError,
    IncompleteInspectionError,
    StaleInspectionError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (InspectionNotFoundError, status.HTTP_404_NOT_FOUND),
    (InspectionValidationError, status.HTTP_400_BAD_REQUEST),
    (InspectionLockedError, status.HTTP_409_CONFLICT),
    (StaleInspectionError, status.HTTP_409_CONFLICT),
    (StoreUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def error_response(request, error: InspectionsServiceError, title='Error'):
    """Translate a service error into a one-line JSON error and a notification."""
    http_status = status.HTTP_400_BAD_REQUEST
    for error_class, mapped_status in ERROR_STATUS:
        if isinstance(error, error_class):
            http_status = mapped_status
            break

    notify_error(request, title, str(error))
    body = {'error': str(error)}
    if isinstance(error, IncompleteInspectionError) and error.unanswered_ids:
        body['unansweredItems'] = error.unanswered_ids
    if isinstance(error, InspectionLockedError):
        body['redirect'] = reverse('inspections:inspection-detail', args=[error.inspection_id])
    return Response(body, status=http_status)


def _store_names(request):
    return {store.id: store.name for store in get_stores(request=request)}


@extend_schema(
    responses={200: StoreSerializer(many=True), 503: ErrorSerializer},
    description="List stores. An empty store table is seeded with one demo store.",
    tags=['stores'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def store_list(request):
    """List store reference data - thin HTTP handler."""
    try:
        stores = get_stores(request=request)
    except StoreUnavailableError as e:
        return error_response(request, e, title='Failed to load stores')
    return Response(StoreSerializer(stores, many=True).data)


@extend_schema(
    responses={200: NewInspectionFormSerializer, 401: ErrorSerializer},
    description="Initial values for a new daily walk: unanswered checklist, date, time and stores.",
    tags=['inspections'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def new_inspection(request):
    """Initial form values for a new inspection."""
    try:
        stores = get_stores(request=request)
        form = new_inspection_form(session=get_session_user(request), stores=stores)
    except InspectionsServiceError as e:
        return error_response(request, e)
    return Response(NewInspectionFormSerializer({**form, 'stores': stores}).data)


@extend_schema(
    methods=['GET'],
    parameters=[
        OpenApiParameter('store', OpenApiTypes.STR, description='Only inspections of this store'),
        OpenApiParameter('search', OpenApiTypes.STR, description='Match store name, date or inspector'),
        OpenApiParameter('limit', OpenApiTypes.INT, description='Maximum inspections to load', default=50),
    ],
    responses={200: InspectionSerializer(many=True), 400: ErrorSerializer},
    description="List inspections, newest first.",
    tags=['inspections'],
)
@extend_schema(
    methods=['POST'],
    request=InspectionFormSerializer,
    responses={201: InspectionSerializer, 400: ErrorSerializer},
    description="Create an inspection. status='draft' saves a draft, status='completed' submits it.",
    tags=['inspections'],
)
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inspection_list_create(request):
    """List inspections or create a new one."""
    session = get_session_user(request)

    if request.method == 'GET':
        query_serializer = InspectionListQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)
        params = query_serializer.validated_data

        try:
            stores = get_stores(request=request)
            inspections = get_inspections(
                session=session,
                store_id=params.get('store') or None,
                limit=params['limit'],
            )
        except InspectionsServiceError as e:
            return error_response(request, e, title='Failed to load inspections')

        inspections = search_inspections(inspections, stores, search=params['search'])
        return Response(InspectionSerializer(inspections, many=True).data)

    serializer = InspectionFormSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    form = dict(serializer.validated_data)
    submit = form.pop('status') == 'completed'

    try:
        if submit:
            inspection = submit_new_inspection(session=session, **form)
            notify_success(request, 'Inspection Submitted', 'Your inspection has been successfully submitted.')
        else:
            inspection = save_new_draft(session=session, **form)
            notify_success(request, 'Draft Saved', 'Your inspection has been saved as a draft.')
    except InspectionsServiceError as e:
        return error_response(request, e, title='Validation Error' if isinstance(e, InspectionValidationError) else 'Error')

    return Response(InspectionSerializer(inspection).data, status=status.HTTP_201_CREATED)


@extend_schema(
    methods=['GET'],
    responses={200: InspectionDetailSerializer, 404: ErrorSerializer},
    description="Get one inspection with its item summary.",
    tags=['inspections'],
)
@extend_schema(
    methods=['PATCH'],
    request=InspectionChangesSerializer,
    responses={200: InspectionSerializer, 404: ErrorSerializer, 409: ErrorSerializer},
    description="Save changes to a draft inspection. Completed inspections are read-only.",
    tags=['inspections'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def inspection_detail(request, inspection_id):
    """Read an inspection or save draft edits."""
    if request.method == 'GET':
        try:
            store_names = _store_names(request)
            inspection = get_inspection_by_id(inspection_id=inspection_id)
        except InspectionsServiceError as e:
            return error_response(request, e, title='Failed to load inspection details')
        serializer = InspectionDetailSerializer(inspection, context={'store_names': store_names})
        return Response(serializer.data)

    serializer = InspectionChangesSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    changes = dict(serializer.validated_data)
    expected_version = changes.pop('version', None)

    try:
        inspection = save_draft_edits(
            inspection_id=inspection_id,
            changes=changes,
            expected_version=expected_version,
        )
    except InspectionsServiceError as e:
        return error_response(request, e, title='Cannot Edit' if isinstance(e, InspectionLockedError) else 'Error')

    notify_success(request, 'Draft Saved', 'Your changes have been saved.')
    return Response(InspectionSerializer(inspection).data)


@extend_schema(
    responses={200: InspectionSerializer, 303: None, 404: ErrorSerializer},
    description="Load a draft for editing. Non-draft inspections redirect (303) to their read-only view.",
    tags=['inspections'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def inspection_edit(request, inspection_id):
    """Load a draft into the edit form."""
    try:
        inspection = load_for_edit(inspection_id=inspection_id)
    except InspectionLockedError as e:
        notify_error(request, 'Cannot Edit', str(e))
        detail_url = reverse('inspections:inspection-detail', args=[e.inspection_id])
        return HttpResponseRedirect(detail_url, status=status.HTTP_303_SEE_OTHER)
    except InspectionsServiceError as e:
        return error_response(request, e)
    return Response(InspectionSerializer(inspection).data)


@extend_schema(
    request=InspectionChangesSerializer,
    responses={200: InspectionSerializer, 400: ErrorSerializer, 409: ErrorSerializer},
    description="Apply final changes to a draft and mark it completed. Every item must be answered.",
    tags=['inspections'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def inspection_submit(request, inspection_id):
    """Submit a draft as completed."""
    serializer = InspectionChangesSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    changes = dict(serializer.validated_data)
    expected_version = changes.pop('version', None)

    try:
        inspection = submit_edits(
            inspection_id=inspection_id,
            changes=changes,
            expected_version=expected_version,
        )
    except InspectionsServiceError as e:
        return error_response(request, e, title='Validation Error' if isinstance(e, InspectionValidationError) else 'Error')

    notify_success(request, 'Inspection Submitted', 'Your inspection has been successfully submitted.')
    return Response(InspectionSerializer(inspection).data)
