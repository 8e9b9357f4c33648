"""Inspection management service - create, read and update daily walks."""

import logging
from contextlib import contextmanager
from datetime import date as date_type, time as time_type
from typing import Iterable, Optional

from django.db import transaction, DatabaseError

from apps.accounts.session import SessionUser
from ..checklist import (
    Outcome,
    initialize_checklist_items,
    item_outcome,
    normalize_item,
    validate_items_against_catalog,
)
from ..exceptions import (
    AuthenticationError,
    InspectionLockedError,
    InspectionNotFoundError,
    InspectionValidationError,
    InvalidStatusError,
    StaleInspectionError,
    StoreUnavailableError,
)
from ..models import Inspection, InspectionStatus

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50

# Fields a caller may merge over an existing inspection
UPDATABLE_FIELDS = ('store_id', 'date', 'time', 'items', 'status', 'corrected_by')


def _require_session(session: Optional[SessionUser]) -> SessionUser:
    if session is None:
        raise AuthenticationError("User not authenticated")
    return session


def _validate_status(status: str) -> str:
    if status not in InspectionStatus.values:
        raise InvalidStatusError(
            f"Invalid status: '{status}'. Valid options: {', '.join(InspectionStatus.values)}"
        )
    return status


def _prepare_items(items: Iterable[dict]) -> list[dict]:
    items = [normalize_item(item) for item in items]
    validate_items_against_catalog(items)
    return items


def _ensure_draft(inspection: Inspection) -> None:
    if inspection.status != InspectionStatus.DRAFT:
        logger.info("Refused write to %s inspection %s", inspection.status, inspection.id)
        raise InspectionLockedError(
            "This inspection has been finalized and cannot be edited.",
            inspection_id=inspection.id,
            status=inspection.status,
        )


@contextmanager
def _store_access(action: str):
    """Log database failures and surface them as StoreUnavailableError."""
    try:
        yield
    except DatabaseError as e:
        logger.error("Error %s", action, exc_info=True)
        raise StoreUnavailableError(f"Inspection store unavailable while {action}") from e


def create_inspection(
    *,
    session: Optional[SessionUser],
    store_id: str,
    date: date_type,
    time: time_type,
    items: Optional[list[dict]] = None,
    status: Optional[str] = None,
    corrected_by=None,
) -> Inspection:
    """
    Create a new inspection stamped with the current inspector.

    Args:
        session: Current identity; None means unauthenticated
        store_id: Store the walk was done in
        date: Inspection date
        time: Inspection time (minutes precision)
        items: Answered checklist; a fresh unanswered checklist when None
        status: Initial status, 'draft' when not given
        corrected_by: Free-text name or identity of whoever fixed failures

    Returns:
        Created Inspection with its assigned id and server timestamps

    Raises:
        AuthenticationError: If there is no session
        ChecklistMismatchError: If items do not match the checklist catalog
        InvalidStatusError: If status is not a known value
        StoreUnavailableError: If the database fails
    """
    user = _require_session(session)
    status = _validate_status(status or InspectionStatus.DRAFT)
    prepared_items = _prepare_items(items if items is not None else initialize_checklist_items())

    with _store_access("creating inspection"):
        inspection = Inspection.objects.create(
            store_id=store_id or '',
            date=date,
            time=time.replace(second=0, microsecond=0),
            items=prepared_items,
            status=status,
            inspected_by=user.as_identity(),
            corrected_by=corrected_by or None,
        )

    logger.info(
        "Inspection %s created for store %s by %s (%s)",
        inspection.id, inspection.store_id, user.uid, inspection.status,
    )
    return inspection


def get_inspections(
    *,
    session: Optional[SessionUser],
    store_id: Optional[str] = None,
    limit: int = DEFAULT_LIMIT,
) -> list[Inspection]:
    """
    List inspections, newest first.

    There is no cursor: callers needing more rows raise ``limit``.

    Raises:
        AuthenticationError: If there is no session
        InspectionValidationError: If limit is not positive
        StoreUnavailableError: If the database fails
    """
    _require_session(session)
    if limit < 1:
        raise InspectionValidationError("Limit must be a positive number")

    with _store_access("getting inspections"):
        queryset = Inspection.objects.order_by('-created_at')
        if store_id:
            queryset = queryset.filter(store_id=store_id)
        return list(queryset[:limit])


def get_inspection_by_id(*, inspection_id: str, lock: bool = False) -> Inspection:
    """
    Retrieve a single inspection.

    With ``lock`` the row is read with ``select_for_update()``; callers must
    already be inside a transaction.

    Raises:
        InspectionNotFoundError: If no inspection has this id
        StoreUnavailableError: If the database fails
    """
    with _store_access(f"getting inspection {inspection_id}"):
        try:
            queryset = Inspection.objects.select_for_update() if lock else Inspection.objects
            return queryset.get(id=inspection_id)
        except Inspection.DoesNotExist:
            logger.warning("Inspection %s not found", inspection_id)
            raise InspectionNotFoundError("Inspection not found")


@transaction.atomic
def update_inspection(
    *,
    inspection_id: str,
    changes: dict,
    expected_version: Optional[int] = None,
    require_draft: bool = False,
) -> Inspection:
    """
    Merge ``changes`` over an existing inspection.

    Only checks that the inspection is still a draft when ``require_draft``
    is set; edit controllers pass it. Without ``expected_version`` concurrent
    writers overwrite each other field by field (last write wins).

    Args:
        inspection_id: Inspection to update
        changes: Subset of store_id, date, time, items, status, corrected_by
        expected_version: Version the caller loaded; rejects stale writes
        require_draft: Refuse the write unless the locked row is a draft

    Returns:
        Updated Inspection

    Raises:
        InspectionNotFoundError: If the inspection doesn't exist
        InspectionLockedError: If require_draft is set and it is not a draft
        InspectionValidationError: On unknown fields, bad items or status
        StaleInspectionError: If expected_version no longer matches
        StoreUnavailableError: If the database fails
    """
    unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
    if unknown:
        raise InspectionValidationError(f"Unknown inspection field(s): {', '.join(unknown)}")

    changes = dict(changes)
    if 'items' in changes:
        changes['items'] = _prepare_items(changes['items'])
    if 'status' in changes:
        _validate_status(changes['status'])
    if changes.get('time') is not None:
        changes['time'] = changes['time'].replace(second=0, microsecond=0)

    with _store_access(f"updating inspection {inspection_id}"):
        try:
            inspection = (
                Inspection.objects
                .select_for_update()
                .get(id=inspection_id)
            )
        except Inspection.DoesNotExist:
            logger.warning("Update of missing inspection %s", inspection_id)
            raise InspectionNotFoundError("Inspection not found")

        if require_draft:
            _ensure_draft(inspection)

        if expected_version is not None and inspection.version != expected_version:
            raise StaleInspectionError(
                f"Inspection was modified (version {inspection.version}, expected {expected_version})"
            )

        for field, value in changes.items():
            setattr(inspection, field, value)
        inspection.version += 1
        inspection.save(update_fields=[*changes, 'version', 'updated_at'])

    return inspection


@transaction.atomic
def complete_inspection(
    *,
    inspection_id: str,
    corrected_by_user: Optional[SessionUser] = None,
    require_draft: bool = False,
) -> Inspection:
    """
    Mark an inspection completed.

    ``correctedBy`` is only replaced when ``corrected_by_user`` is given.

    Raises:
        InspectionNotFoundError: If the inspection doesn't exist
        InspectionLockedError: If require_draft is set and it is not a draft
        StoreUnavailableError: If the database fails
    """
    with _store_access(f"completing inspection {inspection_id}"):
        try:
            inspection = (
                Inspection.objects
                .select_for_update()
                .get(id=inspection_id)
            )
        except Inspection.DoesNotExist:
            raise InspectionNotFoundError("Inspection not found")

        if require_draft:
            _ensure_draft(inspection)

        update_fields = ['status', 'version', 'updated_at']
        inspection.status = InspectionStatus.COMPLETED
        if corrected_by_user is not None:
            inspection.corrected_by = corrected_by_user.as_identity()
            update_fields.append('corrected_by')
        inspection.version += 1
        inspection.save(update_fields=update_fields)

    logger.info("Inspection %s completed", inspection_id)
    return inspection


def summarize_inspection(inspection) -> dict:
    """Item counts shown on an inspection's read-only view."""
    items = inspection.items or []
    outcomes = [item_outcome(item) for item in items]
    return {
        'total': len(items),
        'passed': sum(1 for o in outcomes if o.outcome == Outcome.PASSED),
        'failed': sum(1 for o in outcomes if o.outcome == Outcome.FAILED),
        'fixed': sum(1 for o in outcomes if o.fixed),
    }


def search_inspections(
    inspections: Iterable[Inspection],
    stores: Iterable,
    *,
    store_id: Optional[str] = None,
    search: str = '',
) -> list[Inspection]:
    """
    Filter an already-loaded inspection list like the list screen does.

    ``search`` matches, case-insensitively, the store name, the inspection
    date (ISO ``2025-01-31`` or US ``1/31/2025``) or the inspector's name.
    """
    store_names = {store.id: store.name for store in stores}
    needle = search.strip().lower()

    def matches(inspection):
        if not needle:
            return True
        store_name = store_names.get(inspection.store_id, '')
        if needle in store_name.lower():
            return True
        if inspection.date:
            day = inspection.date
            if needle in day.isoformat() or needle in f"{day.month}/{day.day}/{day.year}":
                return True
        inspector = (inspection.inspected_by or {}).get('name') or ''
        return needle in inspector.lower()

    return [
        inspection for inspection in inspections
        if (not store_id or inspection.store_id == store_id) and matches(inspection)
    ]
