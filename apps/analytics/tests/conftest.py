import pytest
from datetime import date, time
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.accounts.session import SessionUser
from apps.inspections.checklist import initialize_checklist_items
from apps.inspections.models import Inspection, InspectionStatus, Store


def _build_items(passed=(), failed=(), fixed=()):
    """Checklist with the listed ids answered; all other items unanswered."""
    items = initialize_checklist_items()
    for item in items:
        if item['id'] in passed:
            item['passed'] = True
        elif item['id'] in failed:
            item['passed'] = False
            item['fixed'] = item['id'] in fixed
    return items


@pytest.fixture
def build_items():
    """Return the checklist builder."""
    return _build_items


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def analytics_user(db):
    """Create the main analytics test user."""
    return User.objects.create_user(
        email='analytics_user@example.com',
        password='TestPass123!',
        display_name='Analytics User',
    )


@pytest.fixture
def analytics_session(analytics_user):
    return SessionUser.from_user(analytics_user)


@pytest.fixture
def analytics_user_client(api_client, analytics_user):
    """Return API client authenticated as analytics user."""
    refresh = RefreshToken.for_user(analytics_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def store_a(db):
    return Store.objects.create(id='A', name='Airport')


@pytest.fixture
def store_b(db):
    return Store.objects.create(id='B', name='Bay Road')


@pytest.fixture
def inspection_a(store_a, analytics_session):
    """Store A: one passed, two failed, one of those fixed."""
    return Inspection.objects.create(
        store_id=store_a.id,
        date=date(2025, 3, 1),
        time=time(9, 0),
        items=_build_items(passed=(1,), failed=(2, 3), fixed=(2,)),
        status=InspectionStatus.COMPLETED,
        inspected_by=analytics_session.as_identity(),
    )


@pytest.fixture
def inspection_b(store_b, analytics_session):
    """Store B draft: three passed, nothing failed."""
    return Inspection.objects.create(
        store_id=store_b.id,
        date=date(2025, 3, 2),
        time=time(10, 0),
        items=_build_items(passed=(1, 2, 3)),
        status=InspectionStatus.DRAFT,
        inspected_by=analytics_session.as_identity(),
    )
