"""Pydantic schemas for API request/response bodies."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.board import Snapshot
from app.schemas.reference import (
    DEFAULT_CODE,
    CallOrigin,
    Priority,
    UnitStatus,
    UnitType,
)


class RequestBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UnitCreate(RequestBody):
    name: str
    type: UnitType = UnitType.LASD
    subdivision: str = ""
    status: UnitStatus = UnitStatus.AVAILABLE


class StatusUpdate(RequestBody):
    status: UnitStatus


class GroupCreate(RequestBody):
    name: str
    unit_ids: list[str] = Field(default_factory=list)


class CallCreate(RequestBody):
    title: str
    address: str = ""
    postal: str = ""
    priority: Priority = Priority.MEDIUM
    origin: CallOrigin = CallOrigin.CALLER
    code: str = DEFAULT_CODE
    active: bool = True


class CallPatch(RequestBody):
    """
    Partial call edit.

    Only fields explicitly present in the request are applied; assignments are
    changed through the assignment routes, never through a patch.
    """

    title: str | None = None
    address: str | None = None
    postal: str | None = None
    priority: Priority | None = None
    origin: CallOrigin | None = None
    code: str | None = None
    active: bool | None = None
    notes: str | None = None

    def changes(self) -> dict:
        """Fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class BoloCreate(RequestBody):
    title: str
    plate: str = ""
    note: str = ""
    active: bool = True


class NotesUpdate(RequestBody):
    dispatch_notes: str


class BoardResponse(Snapshot):
    """Current snapshot with its version stamp."""

    version: int


class ReferenceResponse(RequestBody):
    """Lookup tables for dispatch screens."""

    unit_types: list[str]
    subdivisions: dict[str, list[str]]
    unit_statuses: list[str]
    call_origins: list[str]
    priorities: dict[str, str]
    ten_codes: dict[str, str]


class ChangeNotification(BaseModel):
    """Row-change webhook from the hosted table store. Only the table matters."""

    type: Literal["INSERT", "UPDATE", "DELETE", "*"] = "*"
    table: str
    schema_name: str | None = Field(default=None, alias="schema")


class SyncResult(BaseModel):
    """Result of a reload request."""

    reloaded: bool
    version: int
    message: str
