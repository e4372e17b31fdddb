"""
Replacement policies: reuse, replace, or pass a value through.

At every node the reconciler asks a policy what to do with the existing
tracked value given the incoming snapshot value:

- REUSE: keep the tracked container and reconcile its members
- PASS_THROUGH: assign the snapshot value verbatim, no recursion
- Install(kind): assign a fresh empty container of that kind (or one built
  from an Extender) and reconcile its members

Built-in policies take four arguments. Custom policies take a fifth, the
built-in policy in effect for the call, so they can delegate to it:

    def keep_lists(tracked_kind, snapshot_kind, tracked, snapshot, default):
        if tracked_kind is kinds.TrackedKind.ARRAY:
            return policy.REUSE
        return default(tracked_kind, snapshot_kind, tracked, snapshot)
"""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing

import deeppatch.errors as errors
import deeppatch.extender as extender_mod
import deeppatch.kinds as kinds


class Decision:
    """Base class of replacement decisions."""

    __slots__ = ()


@_dataclasses.dataclass(frozen=True)
class Reuse(Decision):
    """Keep the existing tracked container and reconcile into it."""


@_dataclasses.dataclass(frozen=True)
class PassThrough(Decision):
    """Assign the snapshot value as-is and stop."""


@_dataclasses.dataclass(frozen=True)
class Install(Decision):
    """
    Assign a fresh container, then reconcile into it.

    Attributes:
        kind: Snapshot shape the new container must accept.
        extender: Template for EXTENDED_PLAIN_OBJECT installs.
    """

    kind: kinds.SnapshotKind
    extender: extender_mod.Extender | None = None

    def __post_init__(self) -> None:
        if self.kind is kinds.SnapshotKind.OTHER:
            raise ValueError("Cannot install a container for an OTHER snapshot")
        if self.kind is kinds.SnapshotKind.EXTENDED_PLAIN_OBJECT:
            if not isinstance(self.extender, extender_mod.Extender):
                raise errors.ExtenderError(
                    f"Extended install requires an Extender, got {type(self.extender).__name__}"
                )
        elif self.extender is not None:
            raise ValueError(f"An extender only applies to extended installs, not {self.kind.value!r}")


REUSE = Reuse()
PASS_THROUGH = PassThrough()


class Policy(_typing.Protocol):
    """A built-in policy."""

    def __call__(
        self,
        tracked_kind: kinds.TrackedKind,
        snapshot_kind: kinds.SnapshotKind,
        tracked_value: _typing.Any,
        snapshot_value: _typing.Any,
    ) -> Decision: ...


class CustomPolicy(_typing.Protocol):
    """A caller-supplied policy that receives the built-in policy to delegate to."""

    def __call__(
        self,
        tracked_kind: kinds.TrackedKind,
        snapshot_kind: kinds.SnapshotKind,
        tracked_value: _typing.Any,
        snapshot_value: _typing.Any,
        default_policy: Policy,
    ) -> Decision: ...


def install_for(snapshot_kind: kinds.SnapshotKind, snapshot_value: _typing.Any) -> Decision:
    """Return the decision that installs a fresh container for a snapshot kind."""
    if snapshot_kind is kinds.SnapshotKind.OTHER:
        return PASS_THROUGH
    if snapshot_kind is kinds.SnapshotKind.EXTENDED_PLAIN_OBJECT:
        return Install(snapshot_kind, snapshot_value[extender_mod.EXTEND])
    return Install(snapshot_kind)


def default_policy(
    tracked_kind: kinds.TrackedKind,
    snapshot_kind: kinds.SnapshotKind,
    tracked_value: _typing.Any,
    snapshot_value: _typing.Any,
) -> Decision:
    """Reuse compatible containers, otherwise install one matching the snapshot."""
    if kinds.is_compatible(tracked_kind, snapshot_kind, tracked_value, snapshot_value):
        return REUSE
    return install_for(snapshot_kind, snapshot_value)


def object_to_map_policy(
    tracked_kind: kinds.TrackedKind,
    snapshot_kind: kinds.SnapshotKind,
    tracked_value: _typing.Any,
    snapshot_value: _typing.Any,
) -> Decision:
    """Like default_policy, but plain dicts populate tracked maps."""
    if snapshot_kind is kinds.SnapshotKind.PLAIN_OBJECT:
        snapshot_kind = kinds.SnapshotKind.MAP
    return default_policy(tracked_kind, snapshot_kind, tracked_value, snapshot_value)
