"""
Analytics Module
=================

Derived statistics for daily walk inspections: how many walks were done,
how many checklist items passed or failed, and how many failures were fixed,
globally and per store.

Classes:
    InspectionAnalytics: Static methods computing inspection statistics.

Example:
    Summarizing an already-loaded list::

        from apps.analytics.analytics import InspectionAnalytics

        stats = InspectionAnalytics.summarize(inspections, stores)
        print(f"Compliance: {stats['complianceRate']}%")

Note:
    The aggregation is a pure fold over loaded data and recomputes
    everything on each call. List sizes are bounded by the inspection
    fetch limit, so there is no incremental update path.
"""

from decimal import Decimal, ROUND_HALF_UP

from apps.inspections.checklist import Outcome, item_outcome
from apps.inspections.services import get_inspections, get_stores
from apps.inspections.exceptions import AuthenticationError
from .exceptions import InvalidLimitError


def _get(record, key, attr):
    """Read a field from a model instance or a plain dict document."""
    if isinstance(record, dict):
        return record.get(key)
    return getattr(record, attr, None)


def _percentage(part, whole):
    if not whole:
        return 0
    ratio = Decimal(part) * 100 / Decimal(whole)
    return int(ratio.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


class InspectionAnalytics:
    """
    Statistics over daily walk inspections.

    Methods:
        compliance_rate: Percentage of answered items that passed.
        fix_rate: Percentage of failed items that were fixed.
        summarize: Global and per-store counts for a loaded inspection list.
        dashboard: Load stores and inspections, then summarize.

    Note:
        All methods return plain dictionaries or ints, suitable for JSON
        serialization in API responses.
    """

    @staticmethod
    def compliance_rate(passed, failed):
        """
        Percentage of answered items marked passed.

        Args:
            passed (int): Passed item count.
            failed (int): Failed item count.

        Returns:
            int: ``round(100 * passed / (passed + failed))``, rounding
            halves up; 0 when nothing was answered.
        """
        return _percentage(passed, passed + failed)

    @staticmethod
    def fix_rate(fixed, failed):
        """
        Percentage of failed items subsequently marked fixed.

        Returns:
            int: ``round(100 * fixed / failed)``, 0 when nothing failed.
        """
        return _percentage(fixed, failed)

    @staticmethod
    def summarize(inspections, stores=()):
        """
        Aggregate item outcomes globally and per store.

        Each inspection contributes one to its store's ``inspections`` count;
        each of its items counts as passed, failed, or (failed and) fixed.
        Unanswered items count toward nothing. Store rows appear in order of
        first appearance and are named from ``stores``, falling back to
        ``"Store #<id>"``.

        Args:
            inspections (Iterable): Inspection models or dict documents
                (``storeId``, ``status``, ``items`` keys).
            stores (Iterable): Store models or dicts with ``id``/``name``.

        Returns:
            dict: A dictionary containing:
                - total, completed, draft (int): Inspection counts.
                - passedItems, failedItems, fixedItems (int): Item counts.
                - complianceRate, fixRate (int): Global percentages.
                - storeStats (list[dict]): One row per store with storeId,
                  name, inspections, passed, failed, fixed, complianceRate
                  and fixRate.

        Example:
            One inspection at store "A" with items passed, failed+fixed,
            failed gives passedItems=1, failedItems=2, fixedItems=1,
            complianceRate=33 and fixRate=50.
        """
        store_names = {
            str(_get(store, 'id', 'id')): _get(store, 'name', 'name')
            for store in stores
        }

        total = completed = draft = 0
        passed_items = failed_items = fixed_items = 0
        store_map = {}

        for inspection in inspections:
            total += 1
            status = _get(inspection, 'status', 'status')
            if status == 'completed':
                completed += 1
            elif status == 'draft':
                draft += 1

            store_id = _get(inspection, 'storeId', 'store_id')
            row = store_map.get(store_id)
            if row is None:
                row = store_map[store_id] = {
                    'storeId': store_id,
                    'name': store_names.get(str(store_id)) or f"Store #{store_id}",
                    'inspections': 0,
                    'passed': 0,
                    'failed': 0,
                    'fixed': 0,
                }
            row['inspections'] += 1

            for item in _get(inspection, 'items', 'items') or []:
                outcome = item_outcome(item)
                if outcome.outcome == Outcome.PASSED:
                    passed_items += 1
                    row['passed'] += 1
                elif outcome.outcome == Outcome.FAILED:
                    failed_items += 1
                    row['failed'] += 1
                    if outcome.fixed:
                        fixed_items += 1
                        row['fixed'] += 1

        store_stats = []
        for row in store_map.values():
            row['complianceRate'] = InspectionAnalytics.compliance_rate(row['passed'], row['failed'])
            row['fixRate'] = InspectionAnalytics.fix_rate(row['fixed'], row['failed'])
            store_stats.append(row)

        return {
            'total': total,
            'completed': completed,
            'draft': draft,
            'passedItems': passed_items,
            'failedItems': failed_items,
            'fixedItems': fixed_items,
            'complianceRate': InspectionAnalytics.compliance_rate(passed_items, failed_items),
            'fixRate': InspectionAnalytics.fix_rate(fixed_items, failed_items),
            'storeStats': store_stats,
        }

    @staticmethod
    def dashboard(*, session, store_id=None, limit=50, request=None):
        """
        Load stores and the latest inspections, then summarize them.

        Args:
            session (SessionUser | None): Current identity.
            store_id (str, optional): Restrict to one store.
            limit (int): Maximum inspections to load (newest first).
            request: Optional request receiving store notifications.

        Returns:
            dict: ``summarize()`` output.

        Raises:
            AuthenticationError: If there is no session; nothing is loaded.
            InvalidLimitError: If limit is not positive.
            StoreUnavailableError: If inspections cannot be loaded.
        """
        if session is None:
            raise AuthenticationError("User not authenticated")
        if limit < 1:
            raise InvalidLimitError(f"Invalid limit: {limit}. Must be at least 1")

        stores = get_stores(request=request)
        inspections = get_inspections(session=session, store_id=store_id, limit=limit)
        return InspectionAnalytics.summarize(inspections, stores)
