"""Pydantic schemas for board records and the snapshot that holds them."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from app.schemas.reference import CallOrigin, Priority, UnitStatus, UnitType


class Record(BaseModel):
    """
    Immutable board record.

    Serialized with camelCase keys (``unitIds``, ``createdAt``) for storage and
    dispatch screens; validated from either camelCase or field names so remote
    rows in snake_case load as well.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any, info: ValidationInfo) -> Any:
        """NULL in an optional text or id-list column reads as empty."""
        if value is not None:
            return value
        field = cls.model_fields[info.field_name]
        if field.is_required():
            return value
        if field.annotation is str:
            return ""
        if field.annotation == tuple[str, ...]:
            return ()
        return value


class Unit(Record):
    """A field resource that can be grouped and assigned to calls."""

    id: str
    name: str
    type: UnitType
    subdivision: str = ""
    status: UnitStatus = UnitStatus.AVAILABLE


class Group(Record):
    """Named set of unit ids. Members may reference deleted units."""

    id: str
    name: str
    unit_ids: tuple[str, ...] = ()


class Call(Record):
    """Incident record with its assigned units."""

    id: str
    title: str
    address: str = ""
    postal: str = ""
    priority: Priority = Priority.MEDIUM
    origin: CallOrigin = CallOrigin.CALLER
    code: str = ""
    active: bool = True
    notes: str = ""
    assigned: tuple[str, ...] = ()


class Bolo(Record):
    """Be-on-the-lookout alert."""

    id: str
    title: str
    plate: str = ""
    note: str = ""
    active: bool = True
    created_at: datetime


class Snapshot(Record):
    """The complete board state at one instant."""

    units: tuple[Unit, ...] = ()
    groups: tuple[Group, ...] = ()
    calls: tuple[Call, ...] = ()
    bolos: tuple[Bolo, ...] = ()
    dispatch_notes: str = ""

    def find_unit(self, unit_id: str) -> Unit | None:
        return next((u for u in self.units if u.id == unit_id), None)

    def find_group(self, group_id: str) -> Group | None:
        return next((g for g in self.groups if g.id == group_id), None)

    def find_call(self, call_id: str) -> Call | None:
        return next((c for c in self.calls if c.id == call_id), None)

    def find_bolo(self, bolo_id: str) -> Bolo | None:
        return next((b for b in self.bolos if b.id == bolo_id), None)

    def unit_name(self, unit_id: str) -> str:
        """Display name for a referenced unit; dangling ids read as "Unknown"."""
        unit = self.find_unit(unit_id)
        return unit.name if unit else "Unknown"


COLLECTIONS = ("units", "groups", "calls", "bolos")
