# core/visibility.py

"""
Visibility filter for Owner viewers.

Independent of authorization: it only ever narrows a result that an
allowed read produced. Hiding a record is not deleting it, and seeing
a record never implies write access.
"""

from typing import Iterable, List, Optional

from core.decision import Decision, Relationship
from core.hierarchy import RESOURCE_LAYOUTS
from models.enums import RelationshipKind

VISIBILITY_FIELD = "visible_to_owner"


def record_visible(record) -> bool:
    """True only for an explicit True flag; a missing flag means hidden."""
    if isinstance(record, dict):
        flag = record.get(VISIBILITY_FIELD)
    else:
        flag = getattr(record, VISIBILITY_FIELD, None)
    return flag is True


def is_owner_view(decision: Decision) -> bool:
    relation = decision.relationship
    return relation is not None and relation.kind == RelationshipKind.owner


def filter_visible(decision: Decision, records: Iterable) -> List:
    """
    Apply the read decision to a collection:
    - denied        → nothing
    - owner viewer  → only records flagged visible_to_owner
    - anyone else   → everything
    """
    if decision.denied:
        return []
    if is_owner_view(decision):
        return [r for r in records if record_visible(r)]
    return list(records)


def default_visibility(relationship: Optional[Relationship], requested: Optional[bool] = None) -> bool:
    """
    Flag for a newly created record. Owners see their own uploads unless
    they say otherwise; everyone else's work stays hidden until shared.
    """
    if requested is not None:
        return bool(requested)
    return relationship is not None and relationship.kind == RelationshipKind.owner


def visible_records(decision: Decision, resource_type, records: Iterable) -> List:
    """
    Collection response for `resource_type`. Types without a visibility
    flag (projects, stages, folders, ...) are only gated by the decision.
    """
    layout = RESOURCE_LAYOUTS.get(resource_type)
    if layout is not None and layout.has_visibility:
        return filter_visible(decision, records)
    return list(records) if decision.allowed else []
