"""
Board mutations.

Each function takes the current snapshot and returns a new one; inputs are
never modified and untouched collections are shared with the input. A
mutation aimed at an id that is not on the board returns the input snapshot
unchanged, so stale references from a dispatch screen are harmless.
"""

import time
import uuid
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, TypeVar

from app.schemas.board import Bolo, Call, Group, Snapshot, Unit
from app.schemas.reference import (
    DEFAULT_CODE,
    SUBDIVIDED_TYPE,
    CallOrigin,
    Priority,
    Subdivision,
    UnitStatus,
    UnitType,
)

E = TypeVar("E", bound=StrEnum)

EDITABLE_CALL_FIELDS = frozenset(
    {"title", "address", "postal", "priority", "origin", "code", "active", "notes"}
)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


class ValidationError(Exception):
    """A required field is blank or an enumerated value is not allowed."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def _base36(number: int) -> str:
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits)) or "0"


def new_id(prefix: str = "") -> str:
    """Opaque id whose lexicographic order follows creation time."""
    millis = time.time_ns() // 1_000_000
    return f"{prefix}{_base36(millis)}{uuid.uuid4().hex[:6]}"


def _require(value: str | None, field: str) -> None:
    if not value or not value.strip():
        raise ValidationError(field, f"{field} is required")


def _coerce(enum_cls: type[E], value: Any, field: str) -> E:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(field, f"Invalid {field} {value!r} (expected one of: {allowed})") from None


def _ordered_set(ids: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(ids))


def _replace_call(snapshot: Snapshot, call_id: str, **changes: Any) -> Snapshot:
    if snapshot.find_call(call_id) is None:
        return snapshot
    calls = tuple(
        c.model_copy(update=changes) if c.id == call_id else c for c in snapshot.calls
    )
    return snapshot.model_copy(update={"calls": calls})


# Units


def create_unit(
    snapshot: Snapshot,
    name: str,
    unit_type: UnitType | str,
    subdivision: str = "",
    status: UnitStatus | str = UnitStatus.AVAILABLE,
    *,
    unit_id: str | None = None,
) -> Snapshot:
    _require(name, "name")
    unit_type = _coerce(UnitType, unit_type, "type")
    status = _coerce(UnitStatus, status, "status")
    if subdivision:
        if unit_type != SUBDIVIDED_TYPE:
            raise ValidationError(
                "subdivision", f"Only {SUBDIVIDED_TYPE} units have a subdivision"
            )
        subdivision = _coerce(Subdivision, subdivision, "subdivision").value

    unit = Unit(
        id=unit_id or new_id("u_"),
        name=name,
        type=unit_type,
        subdivision=subdivision or "",
        status=status,
    )
    return snapshot.model_copy(update={"units": (*snapshot.units, unit)})


def delete_unit(snapshot: Snapshot, unit_id: str) -> Snapshot:
    """Remove a unit and every group membership and call assignment naming it."""
    if snapshot.find_unit(unit_id) is None:
        return snapshot

    groups = tuple(
        g.model_copy(update={"unit_ids": tuple(u for u in g.unit_ids if u != unit_id)})
        if unit_id in g.unit_ids
        else g
        for g in snapshot.groups
    )
    calls = tuple(
        c.model_copy(update={"assigned": tuple(u for u in c.assigned if u != unit_id)})
        if unit_id in c.assigned
        else c
        for c in snapshot.calls
    )
    return snapshot.model_copy(
        update={
            "units": tuple(u for u in snapshot.units if u.id != unit_id),
            "groups": groups,
            "calls": calls,
        }
    )


def set_unit_status(snapshot: Snapshot, unit_id: str, status: UnitStatus | str) -> Snapshot:
    status = _coerce(UnitStatus, status, "status")
    if snapshot.find_unit(unit_id) is None:
        return snapshot
    units = tuple(
        u.model_copy(update={"status": status}) if u.id == unit_id else u
        for u in snapshot.units
    )
    return snapshot.model_copy(update={"units": units})


# Groups


def create_group(
    snapshot: Snapshot,
    name: str,
    member_ids: Iterable[str] = (),
    *,
    group_id: str | None = None,
) -> Snapshot:
    """Members are kept as given; they are not checked against the unit list."""
    _require(name, "name")
    group = Group(id=group_id or new_id("g_"), name=name, unit_ids=_ordered_set(member_ids))
    return snapshot.model_copy(update={"groups": (*snapshot.groups, group)})


def delete_group(snapshot: Snapshot, group_id: str) -> Snapshot:
    """Remove a group. Units already copied onto calls stay assigned."""
    if snapshot.find_group(group_id) is None:
        return snapshot
    return snapshot.model_copy(
        update={"groups": tuple(g for g in snapshot.groups if g.id != group_id)}
    )


# Calls


def create_call(
    snapshot: Snapshot,
    title: str,
    address: str = "",
    postal: str = "",
    priority: Priority | str = Priority.MEDIUM,
    origin: CallOrigin | str = CallOrigin.CALLER,
    code: str = DEFAULT_CODE,
    active: bool = True,
    *,
    call_id: str | None = None,
) -> Snapshot:
    _require(title, "title")
    call = Call(
        id=call_id or new_id("c_"),
        title=title,
        address=address or "",
        postal=postal or "",
        priority=_coerce(Priority, priority, "priority"),
        origin=_coerce(CallOrigin, origin, "origin"),
        code=code or "",
        active=bool(active),
    )
    return snapshot.model_copy(update={"calls": (call, *snapshot.calls)})


def delete_call(snapshot: Snapshot, call_id: str) -> Snapshot:
    if snapshot.find_call(call_id) is None:
        return snapshot
    return snapshot.model_copy(
        update={"calls": tuple(c for c in snapshot.calls if c.id != call_id)}
    )


def toggle_call_active(snapshot: Snapshot, call_id: str) -> Snapshot:
    call = snapshot.find_call(call_id)
    if call is None:
        return snapshot
    return _replace_call(snapshot, call_id, active=not call.active)


def edit_call(snapshot: Snapshot, call_id: str, changes: Mapping[str, Any]) -> Snapshot:
    """
    Merge the given fields into a call.

    Only keys in EDITABLE_CALL_FIELDS are accepted; anything else (including
    ``id`` and ``assigned``) is a ValidationError. Keys that are absent keep
    their current value.
    """
    unknown = set(changes) - EDITABLE_CALL_FIELDS
    if unknown:
        field = sorted(unknown)[0]
        raise ValidationError(field, f"Call field {field!r} cannot be edited")

    update: dict[str, Any] = {}
    for field, value in changes.items():
        if field == "title":
            _require(value, "title")
        elif value is None:
            # null clears free text; it never resets an enum or the active flag
            if field in ("priority", "origin", "active"):
                continue
            value = ""
        elif field == "priority":
            value = _coerce(Priority, value, "priority")
        elif field == "origin":
            value = _coerce(CallOrigin, value, "origin")
        elif field == "active":
            value = bool(value)
        update[field] = value

    if not update:
        return snapshot
    return _replace_call(snapshot, call_id, **update)


def assign_unit_to_call(snapshot: Snapshot, unit_id: str, call_id: str) -> Snapshot:
    """Add a unit to a call. Assigning twice leaves a single entry."""
    call = snapshot.find_call(call_id)
    if call is None or unit_id in call.assigned:
        return snapshot
    return _replace_call(snapshot, call_id, assigned=(*call.assigned, unit_id))


def assign_group_to_call(snapshot: Snapshot, group_id: str, call_id: str) -> Snapshot:
    """
    Copy a group's current members onto a call (set union).

    The call keeps no link to the group; later group changes do not reach it.
    """
    group = snapshot.find_group(group_id)
    call = snapshot.find_call(call_id)
    if group is None or call is None:
        return snapshot
    assigned = _ordered_set((*call.assigned, *group.unit_ids))
    if assigned == call.assigned:
        return snapshot
    return _replace_call(snapshot, call_id, assigned=assigned)


def remove_assigned_unit(snapshot: Snapshot, unit_id: str, call_id: str) -> Snapshot:
    call = snapshot.find_call(call_id)
    if call is None or unit_id not in call.assigned:
        return snapshot
    return _replace_call(
        snapshot, call_id, assigned=tuple(u for u in call.assigned if u != unit_id)
    )


# BOLOs


def create_bolo(
    snapshot: Snapshot,
    title: str,
    plate: str = "",
    note: str = "",
    active: bool = True,
    *,
    bolo_id: str | None = None,
    created_at: datetime | None = None,
) -> Snapshot:
    _require(title, "title")
    bolo = Bolo(
        id=bolo_id or new_id("b_"),
        title=title,
        plate=plate or "",
        note=note or "",
        active=bool(active),
        created_at=created_at or datetime.now(UTC),
    )
    return snapshot.model_copy(update={"bolos": (bolo, *snapshot.bolos)})


def delete_bolo(snapshot: Snapshot, bolo_id: str) -> Snapshot:
    if snapshot.find_bolo(bolo_id) is None:
        return snapshot
    return snapshot.model_copy(
        update={"bolos": tuple(b for b in snapshot.bolos if b.id != bolo_id)}
    )


# Dispatch-wide notes


def set_dispatch_notes(snapshot: Snapshot, notes: str) -> Snapshot:
    notes = notes or ""
    if notes == snapshot.dispatch_notes:
        return snapshot
    return snapshot.model_copy(update={"dispatch_notes": notes})
