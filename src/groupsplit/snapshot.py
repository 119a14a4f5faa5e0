"""Load group snapshots (members, expenses, recorded settlements) from JSON."""

import json
import logging
from decimal import Decimal
from pathlib import Path

from .exceptions import SnapshotLoadError
from .models import GroupSnapshot

logger = logging.getLogger(__name__)


def parse_snapshot(data: str | bytes) -> GroupSnapshot:
    """
    Parse a JSON group snapshot.

    Accepts the REST API's camelCase field names. A bare JSON list is read
    as a list of expenses with no roster.

    Args:
        data: Raw JSON document

    Returns:
        Parsed snapshot

    Raises:
        ValueError: If the document is not JSON or not a valid snapshot
            (pydantic.ValidationError is a ValueError)
    """
    payload = json.loads(data, parse_float=Decimal)
    if isinstance(payload, list):
        payload = {"expenses": payload}
    return GroupSnapshot.model_validate(payload)


def load_snapshot(path: Path) -> GroupSnapshot:
    """
    Load a group snapshot from a JSON file.

    Args:
        path: Path to the snapshot file

    Returns:
        Parsed snapshot

    Raises:
        SnapshotLoadError: If the file is missing, unreadable or invalid
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise SnapshotLoadError(
            str(path), f"Could not read snapshot {path}: {e}"
        ) from e

    try:
        snapshot = parse_snapshot(raw)
    except ValueError as e:
        raise SnapshotLoadError(
            str(path), f"Invalid snapshot {path}:\n{e}"
        ) from e

    logger.info(
        f"Loaded snapshot for group {snapshot.group_id or '(unknown)'}: "
        f"{len(snapshot.members)} members, {len(snapshot.expenses)} expenses, "
        f"{len(snapshot.settlements)} settlements"
    )
    return snapshot
