# letter_tracker/schemas/filter_schemas.py
"""
Filter/sort state for the shipment table, mapped to and from URL query parameters

Absent filters are None, never an empty list: None means "no constraint",
while an empty list would mean "match nothing".
"""

from datetime import date
from typing import Any, List, Literal, Optional, Tuple

from dateutil import parser
from pydantic import BaseModel

from letter_tracker.config import settings

DEFAULT_SORT = settings.default_sort
DEFAULT_SORT_COLUMN, DEFAULT_SORT_DIRECTION = DEFAULT_SORT.split(".", 1)

# Model field -> query parameter name
QUERY_PARAM_NAMES = {
    "account_id": "accountId",
    "status": "status",
    "letter_type": "letterType",
    "date_from": "from",
    "date_to": "to",
    "sort": "sort",
}

MULTI_VALUE_FIELDS = ("status", "letter_type")


class SortSpec(BaseModel):
    column: str = DEFAULT_SORT_COLUMN
    direction: Literal["asc", "desc"] = DEFAULT_SORT_DIRECTION


def parse_sort(sort: Optional[str]) -> SortSpec:
    """Split "<column>.<direction>" on the first dot; never raises"""
    column, _, direction = (sort or "").partition(".")
    direction = direction.strip().lower()
    return SortSpec(
        column=column.strip() or DEFAULT_SORT_COLUMN,
        direction=direction if direction in ("asc", "desc") else DEFAULT_SORT_DIRECTION
    )


def _get_all(params: Any, name: str) -> List[str]:
    if hasattr(params, "getlist"):
        return list(params.getlist(name))
    value = params.get(name)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def _parse_multi(values: List[str]) -> Optional[List[str]]:
    items: List[str] = []
    for raw in values:
        for part in raw.split(","):
            part = part.strip()
            if part and part not in items:
                items.append(part)
    return items or None


def _parse_iso_date(values: List[str]) -> Optional[date]:
    if not values or not values[-1].strip():
        return None
    try:
        return parser.isoparse(values[-1].strip()).date()
    except (ValueError, OverflowError):
        return None


class FilterValues(BaseModel):
    account_id: Optional[str] = None
    status: Optional[List[str]] = None
    letter_type: Optional[List[str]] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    sort: str = DEFAULT_SORT

    @classmethod
    def from_query_params(cls, params: Any) -> "FilterValues":
        """Build from a multi-dict (or plain dict); malformed values fall back to defaults"""
        account_ids = _get_all(params, QUERY_PARAM_NAMES["account_id"])
        account_id = account_ids[-1].strip() if account_ids else ""
        sorts = _get_all(params, QUERY_PARAM_NAMES["sort"])
        sort = sorts[-1].strip() if sorts else ""

        return cls(
            account_id=account_id or None,
            status=_parse_multi(_get_all(params, QUERY_PARAM_NAMES["status"])),
            letter_type=_parse_multi(_get_all(params, QUERY_PARAM_NAMES["letter_type"])),
            date_from=_parse_iso_date(_get_all(params, QUERY_PARAM_NAMES["date_from"])),
            date_to=_parse_iso_date(_get_all(params, QUERY_PARAM_NAMES["date_to"])),
            sort=sort or DEFAULT_SORT
        )

    def to_query_params(self) -> List[Tuple[str, str]]:
        """Flat (name, value) pairs; absent fields and the default sort are omitted"""
        pairs: List[Tuple[str, str]] = []
        if self.account_id:
            pairs.append((QUERY_PARAM_NAMES["account_id"], self.account_id))
        for field in MULTI_VALUE_FIELDS:
            for value in getattr(self, field) or []:
                pairs.append((QUERY_PARAM_NAMES[field], value))
        if self.date_from:
            pairs.append((QUERY_PARAM_NAMES["date_from"], self.date_from.isoformat()))
        if self.date_to:
            pairs.append((QUERY_PARAM_NAMES["date_to"], self.date_to.isoformat()))
        if self.sort and self.sort != DEFAULT_SORT:
            pairs.append((QUERY_PARAM_NAMES["sort"], self.sort))
        return pairs

    @property
    def sort_spec(self) -> SortSpec:
        return parse_sort(self.sort)

    @property
    def has_filters(self) -> bool:
        return bool(
            self.account_id
            or self.status
            or self.letter_type
            or self.date_from
            or self.date_to
        )

    def toggle(self, field: str, value: str, checked: bool) -> "FilterValues":
        """Checkbox toggle for status/letter_type; an emptied set becomes None"""
        field = {"letterType": "letter_type"}.get(field, field)
        if field not in MULTI_VALUE_FIELDS:
            raise ValueError(f"{field} is not a multi-value filter")

        current = list(getattr(self, field) or [])
        if checked:
            if value not in current:
                current.append(value)
        else:
            current = [item for item in current if item != value]

        return self.model_copy(update={field: current or None})

    def cleared(self, keep_sort: bool = False) -> "FilterValues":
        """Every filter back to absent; sort back to default unless kept"""
        return FilterValues(sort=self.sort if keep_sort else DEFAULT_SORT)
