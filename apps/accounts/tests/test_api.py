import pytest
from django.test import RequestFactory
from django.contrib.auth.models import AnonymousUser
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User
from apps.accounts.session import SessionUser, get_session_user
from apps.inspections.models import Inspection


def login(client, email, password='TestPass123!'):
    return client.post(reverse('users:login'), {'email': email, 'password': password})


def use_token(client, response):
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['tokens']['access']}")
    return client


# =============================================================================
# Login into the daily walk
# =============================================================================

@pytest.mark.django_db
class TestLoginToDailyWalk:
    """Tests for POST /api/auth/login/ followed by inspection requests."""

    def test_token_opens_new_walk_at_home_store(self, api_client, user, home_store):
        response = login(api_client, user.email)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['store_id'] == 'store-1'

        form = use_token(api_client, response).get(reverse('inspections:inspection-new'))

        assert form.status_code == status.HTTP_200_OK
        assert form.data['storeId'] == 'store-1'
        assert [s['id'] for s in form.data['stores']] == ['store-1']

    def test_draft_is_stamped_with_logged_in_inspector(self, api_client, user, home_store):
        client = use_token(api_client, login(api_client, user.email))

        response = client.post(
            reverse('inspections:inspection-list'),
            {'storeId': home_store.id, 'status': 'draft'},
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        inspection = Inspection.objects.get(id=response.data['id'])
        assert inspection.inspected_by == {'userId': str(user.id), 'name': 'Test User'}
        user.refresh_from_db()
        assert user.last_login is not None

    def test_bad_password_and_unknown_email_look_alike(self, api_client, user):
        wrong = login(api_client, user.email, password='NotThePassword1!')
        unknown = login(api_client, 'nobody@example.com')

        assert wrong.status_code == unknown.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong.data == unknown.data == {'error': 'Invalid credentials'}

    def test_deactivated_inspector_refused(self, api_client, user_inactive):
        response = login(api_client, user_inactive.email)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['error'] == 'Account is deactivated'
        assert 'tokens' not in response.data

    def test_token_stops_working_after_deactivation(self, api_client, user, home_store):
        client = use_token(api_client, login(api_client, user.email))
        User.objects.filter(id=user.id).update(is_active=False)

        response = client.get(reverse('inspections:inspection-list'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert Inspection.objects.count() == 0

    def test_form_errors_name_the_field(self, api_client):
        response = api_client.post(reverse('users:login'), {'email': 'walker@example.com'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert set(response.data) == {'password'}


@pytest.mark.django_db
class TestCurrentInspector:
    """Tests for GET /api/auth/user/"""

    def test_profile_carries_default_store(self, authenticated_client, user):
        response = authenticated_client.get(reverse('users:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['display_name'] == 'Test User'
        assert response.data['store_id'] == 'store-1'

    def test_anonymous_has_no_profile(self, api_client):
        response = api_client.get(reverse('users:current-user'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Session identity
# =============================================================================

class TestSessionUser:
    """Tests for the identity handed to inspection services."""

    def test_from_user(self, user):
        session = SessionUser.from_user(user)

        assert session.uid == str(user.id)
        assert session.name == 'Test User'
        assert session.store_id == 'store-1'

    def test_name_falls_back_to_email(self):
        session = SessionUser(uid='u1', email='walker@example.com')
        assert session.name == 'walker@example.com'

    def test_as_identity(self):
        session = SessionUser(uid='u1', display_name='Alice')
        assert session.as_identity() == {'userId': 'u1', 'name': 'Alice'}

    def test_blank_store_becomes_none(self, db):
        user = User.objects.create_user(email='nostore@example.com', password='x')
        assert SessionUser.from_user(user).store_id is None

    def test_get_session_user_anonymous(self):
        request = RequestFactory().get('/')
        request.user = AnonymousUser()
        assert get_session_user(request) is None

    def test_get_session_user_authenticated(self, user):
        request = RequestFactory().get('/')
        request.user = user
        assert get_session_user(request).uid == str(user.id)


@pytest.mark.django_db
class TestInspectorAccount:

    def test_display_name_falls_back_to_email_prefix(self, user):
        user.display_name = ''
        user.save()
        assert user.get_display_name() == 'testuser'

    def test_superuser_can_open_admin(self, db):
        admin = User.objects.create_superuser(email='admin@example.com', password='AdminPass123!')
        assert admin.is_staff and admin.is_superuser
        assert str(admin) == 'admin@example.com'
