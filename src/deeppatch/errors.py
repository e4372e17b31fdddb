"""
Exceptions raised by deeppatch.

Only whole-container reconciliation raises on a type mismatch; property and
boxed reconciliation resolve mismatches by installing a replacement.
"""

from __future__ import annotations

import typing as _typing

if _typing.TYPE_CHECKING:
    import deeppatch.kinds as kinds


class ReconcileError(Exception):
    """Base class for all deeppatch errors."""

    pass


class IncompatibleTypeError(ReconcileError, TypeError):
    """Raised when a snapshot's top-level shape cannot populate the target."""

    def __init__(
        self,
        tracked_kind: kinds.TrackedKind,
        snapshot_kind: kinds.SnapshotKind,
    ) -> None:
        self.tracked_kind = tracked_kind
        self.snapshot_kind = snapshot_kind
        super().__init__(
            f"Cannot reconcile a {snapshot_kind.value!r} snapshot "
            f"into a {tracked_kind.value!r} container"
        )


class ExtenderError(ReconcileError, ValueError):
    """Raised for malformed Extender templates or usage."""

    pass
