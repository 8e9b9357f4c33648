"""
Domain exceptions for the inspections app.

These are raised by the inspection services and controllers and stay free of
HTTP concerns; views translate them into responses.

Exception Hierarchy:
    InspectionsServiceError (base)
    ├── AuthenticationError
    ├── InspectionNotFoundError
    ├── InspectionValidationError
    │   ├── IncompleteInspectionError
    │   ├── ChecklistMismatchError
    │   └── InvalidStatusError
    ├── InspectionLockedError
    ├── StaleInspectionError
    └── StoreUnavailableError
"""


class InspectionsServiceError(Exception):
    """Base exception for all inspections service errors."""
    pass


class AuthenticationError(InspectionsServiceError):
    """No authenticated session for an operation that requires one."""
    pass


class InspectionNotFoundError(InspectionsServiceError):
    """Referenced inspection does not exist."""
    pass


class InspectionValidationError(InspectionsServiceError):
    """Inspection data was rejected before reaching the store."""
    pass


class IncompleteInspectionError(InspectionValidationError):
    """
    Submission attempted while the inspection is not fully answered.

    ``unanswered_ids`` lists the checklist ids still missing an answer.
    """

    def __init__(self, message, unanswered_ids=()):
        super().__init__(message)
        self.unanswered_ids = list(unanswered_ids)


class ChecklistMismatchError(InspectionValidationError):
    """Inspection items do not line up with the checklist catalog."""
    pass


class InvalidStatusError(InspectionValidationError):
    """Status value is not one of draft, completed, reviewed."""
    pass


class InspectionLockedError(InspectionsServiceError):
    """
    Inspection is no longer a draft and cannot be edited.

    ``inspection_id`` identifies the record so callers can send the user
    to its read-only view instead.
    """

    def __init__(self, message, inspection_id=None, status=None):
        super().__init__(message)
        self.inspection_id = inspection_id
        self.status = status


class StaleInspectionError(InspectionsServiceError):
    """Inspection changed since the caller loaded it (version mismatch)."""
    pass


class StoreUnavailableError(InspectionsServiceError):
    """The inspection database could not be reached or failed the query."""
    pass
