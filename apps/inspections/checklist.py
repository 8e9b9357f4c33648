"""
Daily walk checklist catalog.

The catalog is a versioned, immutable table of compliance checks. Every new
inspection copies it into its ``items`` document; changing the table only
changes the shape of inspections created afterwards, never persisted ones.

Item answers are stored as plain dicts (``passed`` is ``True``, ``False`` or
``None``). ``item_outcome()`` gives the tagged reading of such a dict:

    UNANSWERED            passed is None
    PASSED                passed is True
    FAILED (fixed=bool)   passed is False
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, NamedTuple

from .exceptions import ChecklistMismatchError


CHECKLIST_VERSION = 1


@dataclass(frozen=True)
class ChecklistItemDefinition:
    """One compliance check in the catalog."""

    id: int
    description: str


CHECKLIST_ITEMS = (
    ChecklistItemDefinition(1, "Is the hotdog/Grill Area clean ?"),
    ChecklistItemDefinition(2, "Are there product Tags/IDs available for each product on roller grill ?"),
    ChecklistItemDefinition(3, "Hotdog Buns labeled and are in date ?"),
    ChecklistItemDefinition(4, "Are tongs clean ? Are Tongs in place ?"),
    ChecklistItemDefinition(5, "Fresh Condiments and Bottle Condiments labeled ?"),
    ChecklistItemDefinition(6, "Under Counter Hotdog Containers labeled properly ?"),
    ChecklistItemDefinition(7, "Is fountain area clean ?"),
    ChecklistItemDefinition(8, "Are fountain machine nozzles free of any buildup ?"),
    ChecklistItemDefinition(9, "Are top of coffee machine and container tops free of beans and dust ?"),
    ChecklistItemDefinition(10, "Is coffee area clean ?"),
    ChecklistItemDefinition(11, "Do cold creamers have expiration labels on them and machine free from buildup ?"),
    ChecklistItemDefinition(12, "Pizza Warmer / Flexserve free of any expired products ?"),
    ChecklistItemDefinition(13, "Does bakery case has all labels/tags that include calories information"),
    ChecklistItemDefinition(14, 'Only "Approved" chemicals in chemical area ?'),
    ChecklistItemDefinition(15, "Any chemical bottle without lid ?"),
    ChecklistItemDefinition(16, "Santizer Bucket prepared and labeled ?"),
    ChecklistItemDefinition(17, "Santizer Sink Prepared and labeled ?"),
    ChecklistItemDefinition(18, "Sanitizer bottle prepared and labeled ?"),
    ChecklistItemDefinition(19, "Handwashing Sink free of any clutter and Employee Cups/Mugs"),
    ChecklistItemDefinition(20, "Ecosure Logs are in Conspicuous and visible place ?"),
    ChecklistItemDefinition(21, "Restrooms Clean and stocked with Handwashing soap,tissue and paper towels ?"),
    ChecklistItemDefinition(22, "Dumspter Lid Closed ?"),
    ChecklistItemDefinition(23, "Paper Towels available near handwashing sink ?"),
    ChecklistItemDefinition(24, "Mops Stored properly ?"),
    ChecklistItemDefinition(25, "Cashier knows about 6 food allergens ?"),
    ChecklistItemDefinition(26, "Microwaves clean ?"),
)

CHECKLIST_IDS = tuple(item.id for item in CHECKLIST_ITEMS)

_DESCRIPTIONS = {item.id: item.description for item in CHECKLIST_ITEMS}


class Outcome(str, Enum):
    UNANSWERED = 'unanswered'
    PASSED = 'passed'
    FAILED = 'failed'


class ItemOutcome(NamedTuple):
    outcome: Outcome
    fixed: bool = False


def initialize_checklist_items() -> list[dict]:
    """Return a fresh, fully unanswered item list for a new inspection."""
    return [
        {
            'id': item.id,
            'description': item.description,
            'passed': None,
            'fixed': False,
            'comments': '',
        }
        for item in CHECKLIST_ITEMS
    ]


def item_outcome(item: dict) -> ItemOutcome:
    passed = item.get('passed')
    if passed is None:
        return ItemOutcome(Outcome.UNANSWERED)
    if passed:
        return ItemOutcome(Outcome.PASSED)
    return ItemOutcome(Outcome.FAILED, fixed=bool(item.get('fixed')))


def normalize_item(item: dict) -> dict:
    """Copy an item, clearing ``fixed`` unless the item failed."""
    normalized = dict(item)
    normalized['fixed'] = item_outcome(item).fixed
    normalized.setdefault('comments', '')
    if not normalized.get('description'):
        normalized['description'] = _DESCRIPTIONS.get(item.get('id'), '')
    return normalized


def validate_items_against_catalog(items: Iterable[dict]) -> None:
    """
    Ensure an item list has exactly the catalog's ids, in catalog order.

    Raises:
        ChecklistMismatchError: On missing, extra, duplicated or reordered ids
    """
    ids = tuple(item.get('id') for item in items)
    if ids != CHECKLIST_IDS:
        raise ChecklistMismatchError(
            f"Inspection items must match the {len(CHECKLIST_IDS)}-item checklist "
            f"(version {CHECKLIST_VERSION})"
        )
