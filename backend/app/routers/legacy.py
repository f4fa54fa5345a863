"""
Minimal in-memory REST resources (bolos, calls, units, users).

Kept for older clients that post free-form records. Records live in process
memory only: every restart brings back the seed rows. They are unrelated to
the dispatch board.
"""

import copy
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["legacy"])

SEED_RECORDS: dict[str, list[dict[str, Any]]] = {
    "bolos": [
        {"id": 1, "type": "Vehicle", "description": "Black SUV fleeing from scene"},
    ],
    "calls": [
        {"id": 1, "description": "Robbery in progress", "location": "Downtown", "status": "Active"},
        {"id": 2, "description": "Traffic stop", "location": "Highway 41", "status": "Completed"},
    ],
    "units": [
        {"id": 1, "name": "Unit 23", "status": "Available"},
        {"id": 2, "name": "Unit 45", "status": "Busy"},
    ],
    "users": [
        {"id": 1, "name": "Officer Drift", "rank": "Sergeant"},
        {"id": 2, "name": "Officer Sky", "rank": "Lieutenant"},
    ],
}


class LegacyCollections:
    """Per-resource lists with sequential ids assigned on append."""

    def __init__(self, seed: dict[str, list[dict[str, Any]]] = SEED_RECORDS):
        self._seed = seed
        self.reset()

    def reset(self) -> None:
        self.records = copy.deepcopy(self._seed)

    def __contains__(self, resource: str) -> bool:
        return resource in self.records

    def get(self, resource: str) -> list[dict[str, Any]]:
        return self.records[resource]

    def append(self, resource: str, record: dict[str, Any]) -> dict[str, Any]:
        items = self.records[resource]
        record = {**record, "id": len(items) + 1}
        items.append(record)
        return record


collections = LegacyCollections()


@router.api_route("/{resource}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def legacy_resource(resource: str, request: Request) -> JSONResponse:
    """GET lists every record, POST appends one; other methods are not allowed."""
    if resource not in collections:
        raise HTTPException(status_code=404, detail=f"Unknown resource: {resource}")

    if request.method == "GET":
        return JSONResponse(status_code=200, content=collections.get(resource))

    if request.method == "POST":
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse(status_code=400, content={"error": "Invalid JSON"})
        if not isinstance(body, dict):
            return JSONResponse(status_code=400, content={"error": "Expected a JSON object"})

        record = collections.append(resource, body)
        logger.info(f"Legacy {resource} record {record['id']} created")
        return JSONResponse(status_code=201, content=record)

    return JSONResponse(status_code=405, content={"error": "Method not allowed"})
