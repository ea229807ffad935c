"""Registry service - the single entry point for content records

Owns the record store, the permission matrix and the sequence counter,
and is the only writer to any of them. Every operation follows the same
pattern: validate inputs, look up the record, authorize, then apply or
project. Results are dicts:

    {"success": True, ...payload}               # on success
    {"success": False, "code": ..., ...}        # see errors.py

Nothing is raised for bad input or failed authorization, and a failed
operation leaves all three resources exactly as they were.

Atomicity: every public method holds one re-entrant lock for its whole
duration, so a create's record insert, self-grant and counter advance
are never observed separately.

Authorization summary:
- transfer / update / delete: caller must equal the current owner
  (OWNERSHIP_MISMATCH otherwise)
- fetch_details: caller needs an explicit grant or ownership
  (ACCESS_FORBIDDEN otherwise)
- analyze_access / lookup_owner / fetch_metrics: ungated

Transfer moves only the owner field. Grants stay keyed by
(content_id, user), so a former owner keeps their self-grant and the new
owner is authorized purely by owner equality.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from ..config import get_validated_config
from .errors import (
    ErrorCode,
    permission_error,
    resource_error,
    validation_error,
)
from .interface import REGISTRY_TOOLS, validate_invocation
from .logger import EventLogger
from .permissions import PermissionMatrix
from .records import ContentRecord, RecordStore
from .sequence import BlockHeight, HeightSource, SequenceCounter
from .validation import validate_metadata

logger = logging.getLogger(__name__)

Result = dict[str, Any]

# Methods whose handler takes the caller identity as first argument
_INVOKER_METHODS = frozenset({
    "create_record",
    "transfer_ownership",
    "update_metadata",
    "delete_record",
    "fetch_details",
})


def _is_content_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class RegistryService:
    """Content registry with per-record ownership and explicit read grants.

    Args:
        root_authority: Fixed system authority reported by fetch_metrics.
            Defaults to registry.root_authority from config.
        height_source: Host height provider, read once per create.
            Defaults to a fresh BlockHeight at 0.
        event_logger: Optional JSONL event log for mutations and rejections.
        validation_mode: Schema validation mode for invoke()
            ('none' | 'warn' | 'strict'). Defaults to config.
    """

    records: RecordStore
    permissions: PermissionMatrix
    event_logger: EventLogger | None
    _sequence: SequenceCounter
    _height: HeightSource
    _root_authority: str
    _validation_mode: str
    _lock: threading.RLock

    def __init__(
        self,
        root_authority: str | None = None,
        height_source: HeightSource | None = None,
        event_logger: EventLogger | None = None,
        validation_mode: str | None = None,
    ) -> None:
        if root_authority is None or validation_mode is None:
            registry_cfg = get_validated_config().registry
            if root_authority is None:
                root_authority = registry_cfg.root_authority
            if validation_mode is None:
                validation_mode = registry_cfg.validation_mode

        self.records = RecordStore()
        self.permissions = PermissionMatrix()
        self.event_logger = event_logger
        self._sequence = SequenceCounter()
        self._height = height_source if height_source is not None else BlockHeight()
        self._root_authority = root_authority
        self._validation_mode = validation_mode
        self._lock = threading.RLock()

    @property
    def root_authority(self) -> str:
        return self._root_authority

    @property
    def sequence(self) -> int:
        """Highest content id assigned so far."""
        return self._sequence.value

    @property
    def height(self) -> int:
        """Current host height as the registry sees it."""
        return self._height.current()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _reject(
        self,
        operation: str,
        invoker_id: str | None,
        error: Result,
        content_id: Any = None,
    ) -> Result:
        logger.debug(
            f"{operation} rejected for {invoker_id} on {content_id}: {error['code']}"
        )
        if self.event_logger is not None:
            self.event_logger.log_rejection(operation, invoker_id, error, content_id)
        return error

    def _emit(self, event_type: str, data: dict[str, Any]) -> None:
        if self.event_logger is not None:
            self.event_logger.log(event_type, data)

    def _find(self, content_id: Any) -> ContentRecord | None:
        if not _is_content_id(content_id):
            return None
        return self.records.get(content_id)

    @staticmethod
    def _not_found(content_id: Any) -> Result:
        return resource_error(
            f"Content {content_id} does not exist",
            code=ErrorCode.CONTENT_NOT_FOUND,
            content_id=content_id,
        )

    @staticmethod
    def _not_owner(content_id: int, invoker_id: str) -> Result:
        return permission_error(
            f"{invoker_id} is not the owner of content {content_id}",
            code=ErrorCode.OWNERSHIP_MISMATCH,
            content_id=content_id,
            invoker=invoker_id,
        )

    def _owned_record(
        self, operation: str, invoker_id: str, content_id: Any
    ) -> tuple[ContentRecord | None, Result | None]:
        """Look up a record and require the caller to own it."""
        record = self._find(content_id)
        if record is None:
            return None, self._reject(operation, invoker_id, self._not_found(content_id), content_id)
        if record.owner != invoker_id:
            return None, self._reject(
                operation, invoker_id, self._not_owner(record.id, invoker_id), content_id
            )
        return record, None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_record(
        self,
        invoker_id: str,
        title: str,
        size: int,
        summary: str,
        labels: list[str],
    ) -> Result:
        """Register new content metadata owned by the caller.

        Returns:
            {"success": True, "content_id": <new id>} or an error dict
            (INVALID_INPUT, SIZE_LIMIT_EXCEEDED, INVALID_METADATA).
        """
        with self._lock:
            error = validate_metadata(title, size, summary, labels)
            if error is not None:
                return self._reject("create_record", invoker_id, error)

            content_id = self._sequence.peek()
            record = ContentRecord(
                id=content_id,
                title=title,
                owner=invoker_id,
                size=size,
                registered_at=self._height.current(),
                summary=summary,
                labels=list(labels),
            )
            self.records.insert(record)
            self.permissions.grant(content_id, invoker_id)
            self._sequence.advance()

            logger.info(f"Content {content_id} registered by {invoker_id}")
            self._emit("content_created", {
                "content_id": content_id,
                "owner": invoker_id,
                "registered_at": record.registered_at,
            })
            return {"success": True, "content_id": content_id}

    def transfer_ownership(self, invoker_id: str, content_id: int, new_owner: str) -> Result:
        """Hand a record to a new owner. Only the owner field changes."""
        with self._lock:
            record, error = self._owned_record("transfer_ownership", invoker_id, content_id)
            if error is not None:
                return error
            assert record is not None

            previous_owner = record.owner
            record.owner = new_owner

            logger.info(f"Content {record.id} transferred from {previous_owner} to {new_owner}")
            self._emit("ownership_transferred", {
                "content_id": record.id,
                "from_owner": previous_owner,
                "to_owner": new_owner,
            })
            return {"success": True, "content_id": record.id, "owner": new_owner}

    def update_metadata(
        self,
        invoker_id: str,
        content_id: int,
        title: str,
        size: int,
        summary: str,
        labels: list[str],
    ) -> Result:
        """Replace title, size, summary and labels in place.

        id, owner and registered_at are untouched. All four fields are
        re-validated; on failure the stored record is unchanged.
        """
        with self._lock:
            record, error = self._owned_record("update_metadata", invoker_id, content_id)
            if error is not None:
                return error
            assert record is not None

            error = validate_metadata(title, size, summary, labels)
            if error is not None:
                return self._reject("update_metadata", invoker_id, error, content_id)

            record.title = title
            record.size = size
            record.summary = summary
            record.labels = list(labels)

            logger.info(f"Content {record.id} metadata updated by {invoker_id}")
            self._emit("metadata_updated", {"content_id": record.id, "owner": invoker_id})
            return {"success": True, "content_id": record.id}

    def delete_record(self, invoker_id: str, content_id: int) -> Result:
        """Remove a record permanently.

        Grants for the id are left in place; every read checks the record
        first, so they are never consulted again. The id is not reused.
        """
        with self._lock:
            record, error = self._owned_record("delete_record", invoker_id, content_id)
            if error is not None:
                return error
            assert record is not None

            self.records.remove(record.id)

            logger.info(f"Content {record.id} deleted by {invoker_id}")
            self._emit("content_deleted", {"content_id": record.id, "owner": invoker_id})
            return {"success": True, "content_id": record.id}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def analyze_access(self, content_id: int, target_user: str) -> Result:
        """Report whether target_user holds a grant, owns the record, or either.

        Callable by anyone about anyone.
        """
        with self._lock:
            record = self._find(content_id)
            if record is None:
                return self._reject("analyze_access", None, self._not_found(content_id), content_id)

            has_grant = self.permissions.has_grant(record.id, target_user)
            is_owner = record.owner == target_user
            return {
                "success": True,
                "has_grant": has_grant,
                "is_owner": is_owner,
                "access_permitted": has_grant or is_owner,
            }

    def lookup_owner(self, content_id: int) -> Result:
        """Return the current owner of a record."""
        with self._lock:
            record = self._find(content_id)
            if record is None:
                return self._reject("lookup_owner", None, self._not_found(content_id), content_id)
            return {"success": True, "owner": record.owner}

    def fetch_details(self, invoker_id: str, content_id: int) -> Result:
        """Return the full record projection.

        The caller needs an explicit grant or current ownership.
        """
        with self._lock:
            record = self._find(content_id)
            if record is None:
                return self._reject(
                    "fetch_details", invoker_id, self._not_found(content_id), content_id
                )
            if not (
                self.permissions.has_grant(record.id, invoker_id)
                or record.owner == invoker_id
            ):
                error = permission_error(
                    f"{invoker_id} may not read content {record.id}",
                    code=ErrorCode.ACCESS_FORBIDDEN,
                    content_id=record.id,
                    invoker=invoker_id,
                )
                return self._reject("fetch_details", invoker_id, error, content_id)
            return {"success": True, "record": record.to_dict()}

    def fetch_metrics(self) -> Result:
        """Return the sequence counter value and the root authority.

        total_entries is the highest id ever assigned, not the number of
        live records.
        """
        with self._lock:
            return {
                "success": True,
                "total_entries": self._sequence.value,
                "root_authority": self._root_authority,
            }

    # ------------------------------------------------------------------
    # Method dispatch
    # ------------------------------------------------------------------

    def _handlers(self) -> dict[str, Callable[..., Result]]:
        return {
            "create_record": self.create_record,
            "transfer_ownership": self.transfer_ownership,
            "update_metadata": self.update_metadata,
            "delete_record": self.delete_record,
            "analyze_access": self.analyze_access,
            "lookup_owner": self.lookup_owner,
            "fetch_details": self.fetch_details,
            "fetch_metrics": self.fetch_metrics,
        }

    def invoke(
        self,
        method_name: str,
        args: list[Any] | dict[str, Any] | None,
        invoker_id: str,
    ) -> Result:
        """Call a registry method by name with positional or named args.

        Args are checked against the method's interface schema first;
        schema failures report MISSING_ARGUMENT, INVALID_ARGUMENT,
        INVALID_TYPE or UNKNOWN_METHOD. Field limits are then enforced by
        the method itself.
        """
        check = validate_invocation(method_name, args, self._validation_mode)
        if not check.proceed:
            error = validation_error(
                check.error_message,
                code=check.code or ErrorCode.INVALID_ARGUMENT,
                method=method_name,
            )
            return self._reject(method_name, invoker_id, error)

        handler = self._handlers()[method_name]
        kwargs = check.args or {}
        if method_name in _INVOKER_METHODS:
            return handler(invoker_id, **kwargs)
        return handler(**kwargs)

    def list_methods(self) -> list[dict[str, str]]:
        """List available methods"""
        return [
            {"name": tool["name"], "description": tool["description"]}
            for tool in REGISTRY_TOOLS
        ]

    def get_interface(self) -> dict[str, Any]:
        """Interface schema for all methods (MCP-compatible format)."""
        return {
            "id": "content_registry",
            "description": "Content metadata registry with ownership and read grants",
            "tools": REGISTRY_TOOLS,
        }

    # ------------------------------------------------------------------
    # State export / restore
    # ------------------------------------------------------------------

    def export_state(self) -> dict[str, Any]:
        """Snapshot of the three persisted resources (orphaned grants included)."""
        with self._lock:
            return {
                "root_authority": self._root_authority,
                "sequence": self._sequence.value,
                "records": self.records.list_all(),
                "grants": [list(entry) for entry in self.permissions.entries()],
            }

    def restore_state(self, state: dict[str, Any]) -> None:
        """Replace all registry state with a previously exported snapshot.

        The snapshot is fully validated before anything is replaced.

        Raises:
            ValueError: If the snapshot is malformed or violates a record
                constraint, or its sequence is below a record id.
        """
        try:
            records = [ContentRecord.from_dict(data) for data in state.get("records", [])]
            sequence = int(state.get("sequence", 0))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed registry snapshot: {e!r}") from e
        counter = SequenceCounter(sequence)
        seen: set[int] = set()
        for record in records:
            error = validate_metadata(record.title, record.size, record.summary, record.labels)
            if error is not None:
                raise ValueError(f"Record {record.id} in snapshot is invalid: {error['error']}")
            if record.id <= 0 or record.id in seen:
                raise ValueError(f"Record id {record.id} in snapshot is invalid or duplicated")
            if record.id > sequence:
                raise ValueError(
                    f"Snapshot sequence {sequence} is below record id {record.id}"
                )
            seen.add(record.id)

        raw_grants = state.get("grants", [])
        if not isinstance(raw_grants, (list, tuple)):
            raise ValueError(f"Snapshot grants must be a list, got {type(raw_grants).__name__}")
        grants: list[tuple[int, str, bool]] = []
        for entry in raw_grants:
            if not isinstance(entry, (list, tuple)) or len(entry) != 3:
                raise ValueError(f"Grant entry {entry!r} must be [content_id, user_id, flag]")
            content_id, user_id, allowed = entry
            if not _is_content_id(content_id) or not isinstance(allowed, bool):
                raise ValueError(f"Grant entry {entry!r} has invalid types")
            grants.append((content_id, str(user_id), allowed))

        snapshot_authority = state.get("root_authority")
        if snapshot_authority is not None and snapshot_authority != self._root_authority:
            logger.warning(
                f"Snapshot root authority {snapshot_authority!r} differs from "
                f"configured {self._root_authority!r}; keeping configured value"
            )

        with self._lock:
            self.records.clear()
            for record in records:
                self.records.insert(record)
            self.permissions.clear()
            for content_id, user_id, allowed in grants:
                self.permissions.set_entry(content_id, user_id, allowed)
            self._sequence = counter

        logger.info(f"Restored {len(records)} records, sequence at {sequence}")
