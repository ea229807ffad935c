"""Checkpoint save/load for registry state.

A checkpoint holds exactly the persisted resources of the registry
(record map, grant matrix, sequence counter) plus the root authority,
the host height at save time and some bookkeeping. Writes are atomic:
temp file, then os.replace.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypedDict

from ..config import get
from .records import RecordDict
from .sequence import BlockHeight
from .service import RegistryService

# Current checkpoint format version
CHECKPOINT_VERSION = 1


class CheckpointData(TypedDict):
    """Structure of a checkpoint file."""

    version: int
    timestamp: str
    reason: str
    root_authority: str
    sequence: int
    height: int
    records: list[RecordDict]
    grants: list[list[Any]]


def _default_path() -> str:
    configured = get("checkpoint.checkpoint_file")
    return configured if isinstance(configured, str) else "registry_checkpoint.json"


def save_checkpoint(
    service: RegistryService,
    checkpoint_file: str | Path | None = None,
    reason: str = "manual",
) -> str:
    """Save registry state to a checkpoint file.

    Args:
        service: The RegistryService to checkpoint
        checkpoint_file: Target path (default: checkpoint.checkpoint_file)
        reason: Why the checkpoint was taken (e.g., "shutdown")

    Returns:
        Path to the saved checkpoint file
    """
    path = str(checkpoint_file or _default_path())
    state = service.export_state()

    checkpoint: CheckpointData = {
        "version": CHECKPOINT_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "reason": reason,
        "root_authority": state["root_authority"],
        "sequence": state["sequence"],
        "height": service.height,
        "records": state["records"],
        "grants": state["grants"],
    }

    # Atomic write: if interrupted, the previous checkpoint remains valid
    temp_file = f"{path}.tmp"
    with open(temp_file, "w") as f:
        json.dump(checkpoint, f, indent=2)
    os.replace(temp_file, path)

    return path


def load_checkpoint(checkpoint_file: str | Path | None = None) -> CheckpointData | None:
    """Load registry state from a checkpoint file.

    Checkpoints written without a height fall back to the highest
    registered_at among their records.

    Returns:
        CheckpointData if the file exists, None otherwise.

    Raises:
        ValueError: If the file is not valid JSON, is shaped wrongly, or
            is from an unsupported format version.
    """
    checkpoint_path = Path(checkpoint_file or _default_path())
    if not checkpoint_path.exists():
        return None

    with open(checkpoint_path) as f:
        data: Any = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Checkpoint {checkpoint_path} must hold a JSON object")

    try:
        version = int(data.get("version", CHECKPOINT_VERSION))
        if version != CHECKPOINT_VERSION:
            raise ValueError(
                f"Unsupported checkpoint version {version} (expected {CHECKPOINT_VERSION})"
            )
        records = list(data.get("records", []))
        fallback_height = max((int(r["registered_at"]) for r in records), default=0)
        return {
            "version": version,
            "timestamp": str(data.get("timestamp", "")),
            "reason": str(data.get("reason", "")),
            "root_authority": str(data.get("root_authority", "")),
            "sequence": int(data.get("sequence", 0)),
            "height": int(data.get("height", fallback_height)),
            "records": records,
            "grants": list(data.get("grants", [])),
        }
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed checkpoint {checkpoint_path}: {e!r}") from e


def restore_from_checkpoint(
    service: RegistryService,
    checkpoint_file: str | Path | None = None,
    height: BlockHeight | None = None,
) -> bool:
    """Load a checkpoint into a service. Returns False if there was none.

    When a BlockHeight is given it is moved up to the checkpoint's height,
    so records created after the resume never predate restored ones.
    """
    checkpoint = load_checkpoint(checkpoint_file)
    if checkpoint is None:
        return False
    service.restore_state(dict(checkpoint))
    if height is not None and checkpoint["height"] > height.current():
        height.set(checkpoint["height"])
    return True
