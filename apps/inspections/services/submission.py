"""
Form and edit controllers for daily walk inspections.

Answer completeness is tracked separately from the record status:

    EMPTY -> PARTIALLY_ANSWERED -> FULLY_ANSWERED

Saving a draft is allowed in any answer state. Submitting (persisting as
completed) is only allowed once every item is answered and a store is
selected, and is rejected here before the database is touched. Only
drafts can be edited; anything else is sent back to its read-only view.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from django.db import transaction
from django.utils import timezone

from apps.accounts.session import SessionUser
from ..checklist import Outcome, initialize_checklist_items, item_outcome
from ..exceptions import (
    AuthenticationError,
    IncompleteInspectionError,
    InspectionLockedError,
)
from ..models import Inspection, InspectionStatus
from .inspection_management import (
    complete_inspection,
    create_inspection,
    get_inspection_by_id,
    update_inspection,
)

logger = logging.getLogger(__name__)


class AnswerState(str, Enum):
    EMPTY = 'empty'
    PARTIALLY_ANSWERED = 'partially_answered'
    FULLY_ANSWERED = 'fully_answered'


def unanswered_item_ids(items: Iterable[dict]) -> list[int]:
    return [item.get('id') for item in items if item_outcome(item).outcome == Outcome.UNANSWERED]


def answer_state(items: Iterable[dict]) -> AnswerState:
    items = list(items)
    missing = len(unanswered_item_ids(items))
    if items and missing == 0:
        return AnswerState.FULLY_ANSWERED
    if missing < len(items):
        return AnswerState.PARTIALLY_ANSWERED
    return AnswerState.EMPTY


def has_failed_items(items: Iterable[dict]) -> bool:
    """True when some item failed, i.e. the corrected-by field applies."""
    return any(item_outcome(item).outcome == Outcome.FAILED for item in items)


def validate_submission(*, store_id: Optional[str], items: Iterable[dict]) -> None:
    """
    Check that an inspection may be submitted as completed.

    Raises:
        IncompleteInspectionError: If no store is selected or an item is unanswered
    """
    if not store_id:
        raise IncompleteInspectionError("Please select a store before submitting.")

    missing = unanswered_item_ids(items)
    if missing:
        raise IncompleteInspectionError(
            "Please complete all required fields before submitting.",
            unanswered_ids=missing,
        )


def new_inspection_form(*, session: Optional[SessionUser], stores: Iterable) -> dict:
    """
    Initial values for a new inspection form.

    Preselects the inspector's default store when it is one of ``stores``.

    Raises:
        AuthenticationError: If there is no session
    """
    if session is None:
        raise AuthenticationError("User not authenticated")

    now = timezone.localtime()
    store_ids = {store.id for store in stores}
    return {
        'store_id': session.store_id if session.store_id in store_ids else '',
        'date': now.date(),
        'time': now.time().replace(second=0, microsecond=0),
        'items': initialize_checklist_items(),
        'corrected_by': '',
    }


def save_new_draft(*, session: Optional[SessionUser], **form) -> Inspection:
    """Persist a new inspection as draft, whatever its answer state."""
    inspection = create_inspection(session=session, status=InspectionStatus.DRAFT, **form)
    logger.info("Draft %s saved", inspection.id)
    return inspection


def submit_new_inspection(*, session: Optional[SessionUser], **form) -> Inspection:
    """
    Persist a new, fully answered inspection as completed.

    Raises:
        IncompleteInspectionError: Before any database access, if not fully answered
    """
    if session is None:
        raise AuthenticationError("User not authenticated")
    items = form.get('items')
    validate_submission(
        store_id=form.get('store_id'),
        items=items if items is not None else initialize_checklist_items(),
    )
    return create_inspection(session=session, status=InspectionStatus.COMPLETED, **form)


def load_for_edit(*, inspection_id: str, lock: bool = False) -> Inspection:
    """
    Load a draft for editing.

    ``lock`` holds the row until the surrounding transaction ends, so the
    draft check stays true for the write that follows.

    Raises:
        InspectionNotFoundError: If the inspection doesn't exist
        InspectionLockedError: If it is not a draft; nothing is modified
    """
    inspection = get_inspection_by_id(inspection_id=inspection_id, lock=lock)
    if not inspection.is_draft:
        logger.info("Refused edit of %s inspection %s", inspection.status, inspection_id)
        raise InspectionLockedError(
            "This inspection has been finalized and cannot be edited.",
            inspection_id=inspection.id,
            status=inspection.status,
        )
    return inspection


@transaction.atomic
def save_draft_edits(
    *,
    inspection_id: str,
    changes: dict,
    expected_version: Optional[int] = None,
) -> Inspection:
    """Save changes to a draft, keeping it a draft."""
    load_for_edit(inspection_id=inspection_id, lock=True)
    return update_inspection(
        inspection_id=inspection_id,
        changes={**changes, 'status': InspectionStatus.DRAFT},
        expected_version=expected_version,
        require_draft=True,
    )


@transaction.atomic
def submit_edits(
    *,
    inspection_id: str,
    changes: Optional[dict] = None,
    expected_version: Optional[int] = None,
    corrected_by_user: Optional[SessionUser] = None,
) -> Inspection:
    """
    Apply final changes to a draft and complete it.

    Completeness is checked on the merged result (stored values overlaid
    with ``changes``) before anything is written.

    Raises:
        InspectionLockedError: If the inspection is not a draft
        IncompleteInspectionError: If the merged inspection is not fully answered
        StaleInspectionError: If expected_version no longer matches
    """
    changes = dict(changes or {})
    changes.pop('status', None)
    inspection = load_for_edit(inspection_id=inspection_id, lock=True)

    validate_submission(
        store_id=changes.get('store_id', inspection.store_id),
        items=changes.get('items', inspection.items),
    )

    if changes or expected_version is not None:
        update_inspection(
            inspection_id=inspection_id,
            changes=changes,
            expected_version=expected_version,
            require_draft=True,
        )
    return complete_inspection(
        inspection_id=inspection_id,
        corrected_by_user=corrected_by_user,
        require_draft=True,
    )
