"""
Reconciler: mutate tracked containers in place to match a snapshot.

Conceptually each slot (a property of a container, or a box) goes through
four steps:

1. Assign the new value directly if it is a scalar.
2. Ask the policy whether the current tracked value can be reused.
3. If not, assign an empty compatible container (or one built from an
   Extender), then re-read what actually landed in the slot.
4. Recursively remove stale members and add/update present ones.

Installing an *empty* container before recursing is what lets existing
sub-containers survive: members are reconciled one by one instead of the
container system converting the whole snapshot at once.

Thread safety: NOT thread-safe. A reconcile call on a target must not
interleave with any other mutation of the same tree.
"""

from __future__ import annotations

import collections.abc as _abc
import logging as _logging
import typing as _typing

import deeppatch.errors as errors
import deeppatch.extender as extender_mod
import deeppatch.kinds as kinds
import deeppatch.observable as observable
import deeppatch.policy as policy_mod

_logger = _logging.getLogger(__name__)


class _PropertySlot:
    """A keyed member of a tracked container."""

    __slots__ = ("target", "key")

    def __init__(self, target: _typing.Any, key: _typing.Any) -> None:
        self.target = target
        self.key = key

    def read(self) -> _typing.Any:
        return observable.get(self.target, self.key)

    def write(self, value: _typing.Any) -> None:
        observable.set(self.target, self.key, value)

    def __repr__(self) -> str:
        return f"[{self.key!r}]"


class _BoxSlot:
    """The value of a tracked box."""

    __slots__ = ("box",)

    def __init__(self, box: _typing.Any) -> None:
        self.box = box

    def read(self) -> _typing.Any:
        return self.box.get()

    def write(self, value: _typing.Any) -> None:
        self.box.set(value)

    def __repr__(self) -> str:
        return "<box>"


class _Decide:
    """Calls a custom policy with the built-in policy passed explicitly."""

    __slots__ = ("custom", "default")

    def __init__(
        self,
        custom: policy_mod.CustomPolicy | None,
        default: policy_mod.Policy,
    ) -> None:
        self.custom = custom
        self.default = default

    def __call__(
        self,
        tracked_kind: kinds.TrackedKind,
        snapshot_kind: kinds.SnapshotKind,
        tracked_value: _typing.Any,
        snapshot_value: _typing.Any,
    ) -> policy_mod.Decision:
        if self.custom is None:
            decision = self.default(tracked_kind, snapshot_kind, tracked_value, snapshot_value)
        else:
            decision = self.custom(
                tracked_kind, snapshot_kind, tracked_value, snapshot_value, self.default
            )
        if not isinstance(decision, policy_mod.Decision):
            raise TypeError(f"Replacement policy returned {decision!r}, expected a Decision")
        return decision


def _fresh_container(decision: policy_mod.Install) -> _typing.Any:
    if decision.kind is kinds.SnapshotKind.EXTENDED_PLAIN_OBJECT:
        assert decision.extender is not None
        return observable.create_object_from_template(decision.extender)
    if decision.kind is kinds.SnapshotKind.ARRAY:
        return observable.ObservableList()
    if decision.kind is kinds.SnapshotKind.MAP:
        return observable.ObservableMap()
    return observable.ObservableObject()


def _snapshot_has(snapshot_kind: kinds.SnapshotKind, snapshot: _typing.Any, key: _typing.Any) -> bool:
    if snapshot_kind is kinds.SnapshotKind.ARRAY:
        return isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(snapshot)
    if snapshot_kind is kinds.SnapshotKind.MAP:
        return key in snapshot
    return key is not extender_mod.EXTEND and key in snapshot


def _snapshot_members(
    snapshot_kind: kinds.SnapshotKind,
    snapshot: _typing.Any,
) -> _abc.Iterator[tuple[_typing.Any, _typing.Any]]:
    if snapshot_kind is kinds.SnapshotKind.ARRAY:
        return enumerate(snapshot)
    return ((key, value) for key, value in snapshot.items() if key is not extender_mod.EXTEND)


class Reconciler:
    """
    Reconciles tracked containers against plain snapshots.

    A Reconciler holds no state besides its built-in policy, so one instance
    can be shared freely (within a single thread).

    Example:
        >>> state = observable.observable({"user": {"name": "ada"}})
        >>> user = state["user"]
        >>> _ = Reconciler().reconcile(state, {"user": {"name": "grace"}})
        >>> state["user"] is user
        True
    """

    def __init__(self, default_policy: policy_mod.Policy = policy_mod.default_policy) -> None:
        """
        Args:
            default_policy: Built-in policy used when no custom policy is
                given, and passed to custom policies for delegation.
        """
        self.default_policy = default_policy

    def _decider(self, policy: policy_mod.CustomPolicy | None) -> _Decide:
        return _Decide(policy, self.default_policy)

    def reconcile(
        self,
        target: _typing.Any,
        snapshot: _typing.Any,
        policy: policy_mod.CustomPolicy | None = None,
    ) -> _typing.Any:
        """
        Reconcile a whole tracked container against a snapshot.

        Objects and maps are interchangeable at this level, since the target
        itself is never replaced.

        Returns:
            The target.

        Raises:
            IncompatibleTypeError: If the snapshot's shape cannot populate
                the target (e.g. a list into an object).
        """
        tracked_kind = kinds.classify_tracked(target)
        snapshot_kind = kinds.classify_snapshot(snapshot)
        if not kinds.accepts_snapshot(tracked_kind, snapshot_kind, target, snapshot):
            raise errors.IncompatibleTypeError(tracked_kind, snapshot_kind)
        self._merge_members(tracked_kind, snapshot_kind, target, snapshot, self._decider(policy))
        return target

    def reconcile_property(
        self,
        target: _typing.Any,
        key: _typing.Any,
        value: _typing.Any,
        policy: policy_mod.CustomPolicy | None = None,
    ) -> _typing.Any:
        """
        Reconcile one member of a tracked container.

        Never raises for type mismatches; the policy decides whether the
        current member is reused or replaced.

        Returns:
            The target.
        """
        self._reconcile_slot(_PropertySlot(target, key), value, self._decider(policy))
        return target

    def reconcile_boxed(
        self,
        box: _typing.Any,
        value: _typing.Any,
        policy: policy_mod.CustomPolicy | None = None,
    ) -> _typing.Any:
        """
        Reconcile the value of a tracked box.

        Returns:
            The box.
        """
        self._reconcile_slot(_BoxSlot(box), value, self._decider(policy))
        return box

    def _reconcile_slot(
        self,
        slot: _PropertySlot | _BoxSlot,
        new_value: _typing.Any,
        decide: _Decide,
    ) -> None:
        current = slot.read()
        if new_value is current:
            return
        if observable.is_scalar(new_value):
            slot.write(new_value)
            return

        tracked_kind = kinds.classify_tracked(current)
        snapshot_kind = kinds.classify_snapshot(new_value)
        decision = decide(tracked_kind, snapshot_kind, current, new_value)

        if isinstance(decision, policy_mod.PassThrough):
            slot.write(new_value)
            return
        if isinstance(decision, policy_mod.Install):
            _logger.debug("Installing fresh %s container at %r", decision.kind.value, slot)
            slot.write(_fresh_container(decision))
            # The container system may wrap or replace what we assigned.
            current = slot.read()
            tracked_kind = kinds.classify_tracked(current)

        if tracked_kind is kinds.TrackedKind.OTHER or snapshot_kind is kinds.SnapshotKind.OTHER:
            _logger.debug(
                "Cannot merge %s snapshot into %s value at %r; assigning as-is",
                snapshot_kind.value,
                tracked_kind.value,
                slot,
            )
            slot.write(new_value)
            return

        self._merge_members(tracked_kind, snapshot_kind, current, new_value, decide)

    def _merge_members(
        self,
        tracked_kind: kinds.TrackedKind,
        snapshot_kind: kinds.SnapshotKind,
        target: _typing.Any,
        snapshot: _typing.Any,
        decide: _Decide,
    ) -> None:
        # All removals happen before any addition, so a key present on both
        # sides is never removed and re-added.
        if tracked_kind is kinds.TrackedKind.ARRAY and snapshot_kind is kinds.SnapshotKind.ARRAY:
            if len(target) > len(snapshot):
                observable.set_length(target, len(snapshot))
        else:
            stale = [
                key
                for key in observable.keys(target)
                if not _snapshot_has(snapshot_kind, snapshot, key)
            ]
            if tracked_kind is kinds.TrackedKind.ARRAY:
                stale.reverse()
            for key in stale:
                observable.remove(target, key)

        for key, value in _snapshot_members(snapshot_kind, snapshot):
            self._reconcile_slot(_PropertySlot(target, key), value, decide)
