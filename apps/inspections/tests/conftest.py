import pytest
from datetime import date, time
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.accounts.session import SessionUser
from apps.inspections.checklist import initialize_checklist_items
from apps.inspections.models import Inspection, InspectionStatus, Store


def answered_items(failed=(), fixed=(), unanswered=()):
    """Checklist with every item passed except the listed ids."""
    items = initialize_checklist_items()
    for item in items:
        if item['id'] in unanswered:
            continue
        if item['id'] in failed:
            item['passed'] = False
            item['fixed'] = item['id'] in fixed
        else:
            item['passed'] = True
    return items


@pytest.fixture
def make_items():
    """Return the ``answered_items`` builder."""
    return answered_items


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def inspector(db):
    """Create the main inspector."""
    return User.objects.create_user(
        email='inspector@example.com',
        password='TestPass123!',
        display_name='Ivy Inspector',
        store_id='store-1',
    )


@pytest.fixture
def other_inspector(db):
    return User.objects.create_user(
        email='other@example.com',
        password='TestPass123!',
        display_name='Oscar Other',
    )


@pytest.fixture
def session(inspector):
    """Identity passed into services as ``session=``."""
    return SessionUser.from_user(inspector)


@pytest.fixture
def other_session(other_inspector):
    return SessionUser.from_user(other_inspector)


@pytest.fixture
def inspector_client(api_client, inspector):
    """Return API client authenticated as the inspector."""
    refresh = RefreshToken.for_user(inspector)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


# =============================================================================
# Stores
# =============================================================================

@pytest.fixture
def store(db):
    return Store.objects.create(id='store-1', name='Store #1', location='Elm Street')


@pytest.fixture
def store_two(db):
    return Store.objects.create(id='store-2', name='Riverside', location='River Road')


# =============================================================================
# Inspections
# =============================================================================

@pytest.fixture
def draft_inspection(store, session):
    """A draft with nothing answered."""
    return Inspection.objects.create(
        store_id=store.id,
        date=date(2025, 1, 31),
        time=time(9, 30),
        items=initialize_checklist_items(),
        status=InspectionStatus.DRAFT,
        inspected_by=session.as_identity(),
    )


@pytest.fixture
def completed_inspection(store, session):
    """A completed walk with item 2 failed and fixed, item 3 failed."""
    return Inspection.objects.create(
        store_id=store.id,
        date=date(2025, 1, 30),
        time=time(8, 15),
        items=answered_items(failed=(2, 3), fixed=(2,)),
        status=InspectionStatus.COMPLETED,
        inspected_by=session.as_identity(),
        corrected_by='Manager Mike',
    )
