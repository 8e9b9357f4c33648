"""Store reference data service."""

import logging
from typing import Optional

from django.conf import settings
from django.db import transaction, DatabaseError

from ..exceptions import StoreUnavailableError
from ..models import Store
from ..notifications import notify_error, notify_success

logger = logging.getLogger(__name__)

DEFAULT_STORE = {'name': 'Store #123', 'location': 'Main Street'}
PLACEHOLDER_STORE_ID = 'demo-store'
PLACEHOLDER_STORE_NAME = 'Demo Store'


def placeholder_store() -> Store:
    """Unsaved stand-in returned when stores cannot be loaded."""
    return Store(id=PLACEHOLDER_STORE_ID, name=PLACEHOLDER_STORE_NAME)


def seed_default_store() -> Optional[Store]:
    """Create the demo store if the collection is empty; otherwise do nothing."""
    if Store.objects.exists():
        return None
    store, created = Store.objects.get_or_create(
        name=DEFAULT_STORE['name'],
        defaults={'location': DEFAULT_STORE['location']},
    )
    return store if created else None


def get_stores(*, fallback_on_error: Optional[bool] = None, request=None) -> list[Store]:
    """
    Return all stores, seeding a single demo store into an empty table.

    When the database fails the outcome depends on ``fallback_on_error``
    (``INSPECTIONS_STORE_FALLBACK`` when None): either a one-element list
    holding the placeholder store, or StoreUnavailableError.

    Args:
        fallback_on_error: Substitute the placeholder instead of raising
        request: Optional request that receives user notifications

    Raises:
        StoreUnavailableError: On database failure with fallback disabled
    """
    if fallback_on_error is None:
        fallback_on_error = settings.INSPECTIONS_STORE_FALLBACK

    try:
        with transaction.atomic():
            seeded = seed_default_store()
            stores = list(Store.objects.order_by('name'))
    except DatabaseError as e:
        logger.error("Error getting stores", exc_info=True)
        if not fallback_on_error:
            raise StoreUnavailableError("Failed to load stores") from e
        notify_error(request, "Failed to load stores")
        return [placeholder_store()]

    if seeded is not None:
        logger.info("Seeded default store %s", seeded.id)
        notify_success(request, "Demo store created")

    return stores
