import pytest
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from unittest.mock import patch
from django.db import DatabaseError
from apps.inspections.checklist import initialize_checklist_items
from apps.inspections.models import Inspection, InspectionStatus, Store
from apps.inspections.services import (
    complete_inspection,
    create_inspection,
    get_inspection_by_id,
    get_inspections,
    get_stores,
    placeholder_store,
    search_inspections,
    summarize_inspection,
    update_inspection,
)
from apps.inspections.exceptions import (
    AuthenticationError,
    ChecklistMismatchError,
    InspectionLockedError,
    InspectionNotFoundError,
    InspectionValidationError,
    InvalidStatusError,
    StaleInspectionError,
    StoreUnavailableError,
)


# =============================================================================
# create_inspection
# =============================================================================

@pytest.mark.django_db
class TestCreateInspection:

    def test_create_draft_with_fresh_checklist(self, session, store):
        inspection = create_inspection(
            session=session,
            store_id=store.id,
            date=date(2025, 2, 1),
            time=time(7, 45, 12),
        )

        assert inspection.id
        assert inspection.status == InspectionStatus.DRAFT
        assert inspection.inspected_by == {'userId': session.uid, 'name': 'Ivy Inspector'}
        assert inspection.corrected_by is None
        assert len(inspection.items) == 26
        assert all(item['passed'] is None for item in inspection.items)
        assert inspection.time == time(7, 45)
        assert inspection.created_at is not None
        assert inspection.updated_at is not None
        assert inspection.version == 1

    def test_create_completed_with_answers(self, session, store, make_items):
        inspection = create_inspection(
            session=session,
            store_id=store.id,
            date=date(2025, 2, 1),
            time=time(8, 0),
            items=make_items(failed=(4,), fixed=(4,)),
            status=InspectionStatus.COMPLETED,
            corrected_by='Manager Mike',
        )

        inspection.refresh_from_db()
        assert inspection.status == InspectionStatus.COMPLETED
        assert inspection.corrected_by == 'Manager Mike'
        assert inspection.items[3]['passed'] is False
        assert inspection.items[3]['fixed'] is True

    def test_fixed_cleared_on_passed_items(self, session, store, make_items):
        items = make_items()
        items[0]['fixed'] = True

        inspection = create_inspection(
            session=session, store_id=store.id, date=date.today(), time=time(9, 0), items=items,
        )

        assert inspection.items[0]['fixed'] is False

    def test_unauthenticated_rejected(self, store):
        with pytest.raises(AuthenticationError):
            create_inspection(session=None, store_id=store.id, date=date.today(), time=time(9, 0))

        assert Inspection.objects.count() == 0

    def test_invalid_status_rejected(self, session, store):
        with pytest.raises(InvalidStatusError):
            create_inspection(
                session=session, store_id=store.id, date=date.today(), time=time(9, 0), status='archived',
            )

    def test_items_must_match_catalog(self, session, store):
        with pytest.raises(ChecklistMismatchError):
            create_inspection(
                session=session,
                store_id=store.id,
                date=date.today(),
                time=time(9, 0),
                items=initialize_checklist_items()[:10],
            )

    def test_database_failure_raises_store_unavailable(self, session, store):
        with patch.object(Inspection.objects, 'create', side_effect=DatabaseError('down')):
            with pytest.raises(StoreUnavailableError):
                create_inspection(session=session, store_id=store.id, date=date.today(), time=time(9, 0))


# =============================================================================
# get_inspections / get_inspection_by_id
# =============================================================================

@pytest.mark.django_db
class TestGetInspections:

    def _make(self, session, store_id, created_at):
        inspection = create_inspection(
            session=session, store_id=store_id, date=created_at.date(), time=created_at.time(),
        )
        Inspection.objects.filter(id=inspection.id).update(created_at=created_at)
        return inspection

    def test_newest_first_with_limit(self, session, store):
        start = datetime(2025, 1, 1, 9, 0, tzinfo=dt_timezone.utc)
        made = [self._make(session, store.id, start + timedelta(days=i)) for i in range(3)]

        result = get_inspections(session=session, limit=2)

        assert [i.id for i in result] == [made[2].id, made[1].id]

    def test_filter_by_store(self, session, store, store_two):
        start = datetime(2025, 1, 1, 9, 0, tzinfo=dt_timezone.utc)
        self._make(session, store.id, start)
        other = self._make(session, store_two.id, start + timedelta(hours=1))

        result = get_inspections(session=session, store_id=store_two.id)

        assert [i.id for i in result] == [other.id]

    def test_default_limit_is_50(self, session, store):
        start = datetime(2025, 1, 1, 9, 0, tzinfo=dt_timezone.utc)
        for i in range(52):
            self._make(session, store.id, start + timedelta(minutes=i))

        assert len(get_inspections(session=session)) == 50

    def test_invalid_limit(self, session):
        with pytest.raises(InspectionValidationError):
            get_inspections(session=session, limit=0)

    def test_unauthenticated(self, db):
        with pytest.raises(AuthenticationError):
            get_inspections(session=None)

    def test_get_by_id(self, draft_inspection):
        assert get_inspection_by_id(inspection_id=draft_inspection.id) == draft_inspection

    def test_get_by_id_not_found(self, db):
        with pytest.raises(InspectionNotFoundError):
            get_inspection_by_id(inspection_id='missing')


# =============================================================================
# update_inspection / complete_inspection
# =============================================================================

@pytest.mark.django_db
class TestUpdateInspection:

    def test_merges_only_given_fields(self, draft_inspection, store_two):
        updated = update_inspection(
            inspection_id=draft_inspection.id,
            changes={'store_id': store_two.id},
        )

        updated.refresh_from_db()
        assert updated.store_id == store_two.id
        assert updated.date == draft_inspection.date
        assert updated.inspected_by == draft_inspection.inspected_by
        assert updated.version == 2
        assert updated.updated_at >= draft_inspection.updated_at

    def test_update_items(self, draft_inspection, make_items):
        updated = update_inspection(
            inspection_id=draft_inspection.id,
            changes={'items': make_items(failed=(1,))},
        )

        assert updated.items[0]['passed'] is False

    def test_unknown_field_rejected(self, draft_inspection):
        with pytest.raises(InspectionValidationError):
            update_inspection(inspection_id=draft_inspection.id, changes={'inspected_by': {}})

    def test_not_found(self, db):
        with pytest.raises(InspectionNotFoundError):
            update_inspection(inspection_id='missing', changes={'store_id': 'x'})

    def test_stale_version_rejected(self, draft_inspection):
        update_inspection(inspection_id=draft_inspection.id, changes={'store_id': 'a'}, expected_version=1)

        with pytest.raises(StaleInspectionError):
            update_inspection(inspection_id=draft_inspection.id, changes={'store_id': 'b'}, expected_version=1)

        draft_inspection.refresh_from_db()
        assert draft_inspection.store_id == 'a'

    def test_without_version_last_write_wins(self, draft_inspection):
        update_inspection(inspection_id=draft_inspection.id, changes={'store_id': 'a'})
        update_inspection(inspection_id=draft_inspection.id, changes={'store_id': 'b'})

        draft_inspection.refresh_from_db()
        assert draft_inspection.store_id == 'b'

    def test_complete_inspection(self, draft_inspection, other_session):
        completed = complete_inspection(inspection_id=draft_inspection.id, corrected_by_user=other_session)

        completed.refresh_from_db()
        assert completed.status == InspectionStatus.COMPLETED
        assert completed.corrected_by == {'userId': other_session.uid, 'name': 'Oscar Other'}

    def test_complete_keeps_corrected_by_without_user(self, completed_inspection):
        completed = complete_inspection(inspection_id=completed_inspection.id)
        assert completed.corrected_by == 'Manager Mike'

    def test_complete_not_found(self, db):
        with pytest.raises(InspectionNotFoundError):
            complete_inspection(inspection_id='missing')

    def test_require_draft_refuses_completed(self, completed_inspection):
        with pytest.raises(InspectionLockedError):
            update_inspection(
                inspection_id=completed_inspection.id,
                changes={'status': InspectionStatus.DRAFT},
                require_draft=True,
            )

        completed_inspection.refresh_from_db()
        assert completed_inspection.status == InspectionStatus.COMPLETED
        assert completed_inspection.version == 1

    def test_require_draft_on_complete(self, completed_inspection, other_session):
        with pytest.raises(InspectionLockedError):
            complete_inspection(
                inspection_id=completed_inspection.id,
                corrected_by_user=other_session,
                require_draft=True,
            )

        completed_inspection.refresh_from_db()
        assert completed_inspection.corrected_by == 'Manager Mike'

    def test_locked_read_of_draft(self, draft_inspection):
        assert get_inspection_by_id(inspection_id=draft_inspection.id, lock=True) == draft_inspection


# =============================================================================
# get_stores
# =============================================================================

@pytest.mark.django_db
class TestGetStores:

    def test_empty_table_seeded_once(self):
        with patch('apps.inspections.services.store_management.notify_success') as notify:
            stores = get_stores()
            again = get_stores()

        assert len(stores) == 1
        assert stores[0].name == 'Store #123'
        assert stores[0].location == 'Main Street'
        assert [s.id for s in again] == [stores[0].id]
        assert Store.objects.count() == 1
        notify.assert_called_once()

    def test_existing_stores_not_seeded(self, store, store_two):
        stores = get_stores()

        assert [s.name for s in stores] == ['Riverside', 'Store #1']
        assert not Store.objects.filter(name='Store #123').exists()

    def test_database_failure_falls_back_to_placeholder(self):
        with patch(
            'apps.inspections.services.store_management.seed_default_store',
            side_effect=DatabaseError('down'),
        ):
            stores = get_stores(fallback_on_error=True)

        assert len(stores) == 1
        assert stores[0].id == 'demo-store'
        assert stores[0].name == 'Demo Store'

    def test_database_failure_raises_without_fallback(self):
        with patch(
            'apps.inspections.services.store_management.seed_default_store',
            side_effect=DatabaseError('down'),
        ):
            with pytest.raises(StoreUnavailableError):
                get_stores(fallback_on_error=False)

    def test_fallback_follows_setting(self, settings):
        settings.INSPECTIONS_STORE_FALLBACK = False
        with patch(
            'apps.inspections.services.store_management.seed_default_store',
            side_effect=DatabaseError('down'),
        ):
            with pytest.raises(StoreUnavailableError):
                get_stores()

    def test_placeholder_is_unsaved(self):
        placeholder_store()
        assert Store.objects.count() == 0


# =============================================================================
# summarize_inspection / search_inspections
# =============================================================================

@pytest.mark.django_db
class TestSummaryAndSearch:

    def test_summarize(self, completed_inspection):
        assert summarize_inspection(completed_inspection) == {
            'total': 26,
            'passed': 24,
            'failed': 2,
            'fixed': 1,
        }

    def test_summarize_unanswered(self, draft_inspection):
        assert summarize_inspection(draft_inspection) == {
            'total': 26,
            'passed': 0,
            'failed': 0,
            'fixed': 0,
        }

    def test_search_by_store_name(self, draft_inspection, store, store_two):
        result = search_inspections([draft_inspection], [store, store_two], search='store #1')
        assert result == [draft_inspection]

        assert search_inspections([draft_inspection], [store, store_two], search='riverside') == []

    def test_search_by_date(self, draft_inspection, store):
        assert search_inspections([draft_inspection], [store], search='2025-01-31') == [draft_inspection]
        assert search_inspections([draft_inspection], [store], search='1/31/2025') == [draft_inspection]

    def test_search_by_inspector(self, draft_inspection, store):
        assert search_inspections([draft_inspection], [store], search='ivy') == [draft_inspection]

    def test_filter_by_store_id(self, draft_inspection, store, store_two):
        assert search_inspections([draft_inspection], [store], store_id=store_two.id) == []

    def test_empty_search_returns_all(self, draft_inspection, completed_inspection, store):
        result = search_inspections([draft_inspection, completed_inspection], [store])
        assert len(result) == 2
