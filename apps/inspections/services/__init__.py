"""
Inspections services - Business logic layer.

This package contains all business operations for daily walk inspections:
- Inspection CRUD against the inspection store
- Store reference data (with demo seeding and placeholder fallback)
- Form/edit controllers (completeness checks, draft vs completed)
"""

from ..checklist import initialize_checklist_items

# Inspection Management
from .inspection_management import (
    create_inspection,
    get_inspections,
    get_inspection_by_id,
    update_inspection,
    complete_inspection,
    summarize_inspection,
    search_inspections,
)

# Store Management
from .store_management import (
    get_stores,
    placeholder_store,
    seed_default_store,
)

# Form / Edit Controllers
from .submission import (
    AnswerState,
    answer_state,
    has_failed_items,
    unanswered_item_ids,
    validate_submission,
    new_inspection_form,
    save_new_draft,
    submit_new_inspection,
    load_for_edit,
    save_draft_edits,
    submit_edits,
)

# Domain Exceptions
from ..exceptions import (
    InspectionsServiceError,
    AuthenticationError,
    InspectionNotFoundError,
    InspectionValidationError,
    IncompleteInspectionError,
    ChecklistMismatchError,
    InvalidStatusError,
    InspectionLockedError,
    StaleInspectionError,
    StoreUnavailableError,
)

__all__ = [
    # Inspection Management Services
    'initialize_checklist_items',
    'create_inspection',
    'get_inspections',
    'get_inspection_by_id',
    'update_inspection',
    'complete_inspection',
    'summarize_inspection',
    'search_inspections',
    # Store Management Services
    'get_stores',
    'placeholder_store',
    'seed_default_store',
    # Controllers
    'AnswerState',
    'answer_state',
    'has_failed_items',
    'unanswered_item_ids',
    'validate_submission',
    'new_inspection_form',
    'save_new_draft',
    'submit_new_inspection',
    'load_for_edit',
    'save_draft_edits',
    'submit_edits',
    # Exceptions
    'InspectionsServiceError',
    'AuthenticationError',
    'InspectionNotFoundError',
    'InspectionValidationError',
    'IncompleteInspectionError',
    'ChecklistMismatchError',
    'InvalidStatusError',
    'InspectionLockedError',
    'StaleInspectionError',
    'StoreUnavailableError',
]
