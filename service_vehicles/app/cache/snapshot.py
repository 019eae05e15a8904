"""
JSON codec for the collection snapshot.
"""

import json
from typing import Iterable, List

from pydantic import ValidationError as PydanticValidationError

from ..models import Vehicle


class SnapshotDecodeError(ValueError):
    """Cached payload is not a valid vehicle snapshot."""


def encode_snapshot(vehicles: Iterable[Vehicle]) -> str:
    """Serialize the ordered collection into a single payload."""
    return json.dumps([vehicle.model_dump() for vehicle in vehicles])


def decode_snapshot(payload: str) -> List[Vehicle]:
    """Deserialize a payload written by encode_snapshot, preserving order."""
    try:
        data = json.loads(payload)
    except (TypeError, json.JSONDecodeError) as e:
        raise SnapshotDecodeError(f"Snapshot is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise SnapshotDecodeError("Snapshot must be a JSON array")

    try:
        return [Vehicle.model_validate(item) for item in data]
    except PydanticValidationError as e:
        raise SnapshotDecodeError(f"Snapshot entry is not a vehicle: {e}") from e
