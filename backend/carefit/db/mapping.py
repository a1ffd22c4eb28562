"""
Field maps between domain records and table rows.

Domain records use camelCase keys (the JSON shape the frontend sends and
reads); rows use snake_case column names. Each entity has exactly one map and
every service call translates through it in both directions.
"""

from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple


class FieldMap:
    """Bidirectional domain field <-> column name table for one entity."""

    def __init__(
        self,
        pairs: Iterable[Tuple[str, str]],
        read_only: Iterable[str] = (),
        defaults: Optional[Dict[str, Callable[[], Any]]] = None,
    ):
        self.pairs = tuple(pairs)
        self.columns = {field: column for field, column in self.pairs}
        column_names = set(self.columns.values())
        if len(self.columns) != len(self.pairs) or len(column_names) != len(self.pairs):
            raise ValueError("Field map must be one-to-one")
        self.read_only = frozenset(read_only)
        # Factories for fields that must never read back as None
        self.defaults = defaults or {}

    def column_for(self, field: str) -> str:
        try:
            return self.columns[field]
        except KeyError:
            raise ValueError(f"Unknown field: {field}") from None

    def to_row(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Translate a (possibly partial) domain record into column values."""
        row = {}
        for field, value in record.items():
            if field in self.read_only:
                raise ValueError(f"Field is managed by the store: {field}")
            row[self.column_for(field)] = value
        return row

    def to_domain(self, obj: Any) -> Dict[str, Any]:
        """Read every mapped column off a row object into a domain record."""
        record = {}
        for field, column in self.pairs:
            value = getattr(obj, column)
            if value is None and field in self.defaults:
                value = self.defaults[field]()
            record[field] = value
        return record


USER_FIELDS = FieldMap(
    [
        ("id", "id"),
        ("lastName", "last_name"),
        ("firstName", "first_name"),
        ("gender", "gender"),
        ("birthDate", "birth_date"),
        ("medicalHistory", "medical_history"),
        ("createdAt", "created_at"),
        ("updatedAt", "updated_at"),
    ],
    read_only=("id", "createdAt", "updatedAt"),
    defaults={"medicalHistory": list},
)

MEASUREMENT_FIELDS = FieldMap(
    [
        ("id", "id"),
        ("userId", "user_id"),
        ("measurementDate", "measurement_date"),
        ("height", "height"),
        ("weight", "weight"),
        ("tug", "tug"),
        ("walkingSpeed", "walking_speed"),
        ("fr", "fr"),
        ("cs10", "cs10"),
        ("bi", "bi"),
        ("notes", "notes"),
        ("createdAt", "created_at"),
        ("updatedAt", "updated_at"),
    ],
    read_only=("id", "createdAt", "updatedAt"),
    defaults={"bi": int, "cs10": int, "notes": str},
)
