"""
Classification of tracked and snapshot values.

Each value is classified once into a closed set of kinds, and the kinds are
threaded through the reconciler instead of re-testing predicates:

- TrackedKind: the shape of an existing tracked value
- SnapshotKind: the shape of an incoming plain value

A tracked kind and a snapshot kind are compatible when they denote the same
container shape. ``OTHER`` is never compatible with anything.
"""

from __future__ import annotations

import collections.abc as _abc
import enum as _enum
import typing as _typing

import deeppatch.extender as extender
import deeppatch.observable as observable


class TrackedKind(_enum.Enum):
    """Shape of an already-tracked value."""

    OTHER = "other"
    """Not a reconcilable container (scalars, boxes, foreign objects)."""

    OBJECT = "object"
    ARRAY = "array"
    MAP = "map"

    EXTENDED_OBJECT = "extended_object"
    """A tracked object built from an Extender."""


class SnapshotKind(_enum.Enum):
    """Shape of an incoming plain value."""

    OTHER = "other"
    """Scalars, None, tracked values and unrecognized objects; never recursed into."""

    PLAIN_OBJECT = "plain_object"
    ARRAY = "array"
    MAP = "map"

    EXTENDED_PLAIN_OBJECT = "extended_plain_object"
    """A plain dict carrying an Extender under the EXTEND key."""

    @property
    def tracked_counterpart(self) -> TrackedKind:
        """The tracked kind this snapshot kind is compatible with."""
        return _COUNTERPARTS[self]


_COUNTERPARTS: dict[SnapshotKind, TrackedKind] = {
    SnapshotKind.OTHER: TrackedKind.OTHER,
    SnapshotKind.PLAIN_OBJECT: TrackedKind.OBJECT,
    SnapshotKind.ARRAY: TrackedKind.ARRAY,
    SnapshotKind.MAP: TrackedKind.MAP,
    SnapshotKind.EXTENDED_PLAIN_OBJECT: TrackedKind.EXTENDED_OBJECT,
}


def is_plain_object(value: _typing.Any) -> bool:
    """
    Check for a plain record.

    Only an exact ``dict`` counts. Subclasses (OrderedDict, defaultdict,
    user classes) are treated like class instances, not plain data.
    """
    return type(value) is dict


def is_scalar(value: _typing.Any) -> bool:
    """Check for a primitive that is assigned without consulting a policy."""
    return observable.is_scalar(value)


def classify_tracked(value: _typing.Any) -> TrackedKind:
    if observable.is_observable_object(value):
        if value.extender is not None:
            return TrackedKind.EXTENDED_OBJECT
        return TrackedKind.OBJECT
    if observable.is_observable_list(value):
        return TrackedKind.ARRAY
    if observable.is_observable_map(value):
        return TrackedKind.MAP
    return TrackedKind.OTHER


def classify_snapshot(value: _typing.Any) -> SnapshotKind:
    if observable.is_observable(value):
        return SnapshotKind.OTHER
    if is_plain_object(value):
        if extender.EXTEND in value:
            return SnapshotKind.EXTENDED_PLAIN_OBJECT
        return SnapshotKind.PLAIN_OBJECT
    if isinstance(value, list):
        return SnapshotKind.ARRAY
    if isinstance(value, _abc.Mapping) and not isinstance(value, extender.Extender):
        return SnapshotKind.MAP
    return SnapshotKind.OTHER


def is_compatible(
    tracked_kind: TrackedKind,
    snapshot_kind: SnapshotKind,
    tracked_value: _typing.Any,
    snapshot_value: _typing.Any,
) -> bool:
    """
    Check whether a tracked value can be reused for a snapshot value.

    Extended objects are only compatible with snapshots tagged with the
    identical Extender.
    """
    if snapshot_kind is SnapshotKind.OTHER:
        return False
    if snapshot_kind.tracked_counterpart is not tracked_kind:
        return False
    if snapshot_kind is SnapshotKind.EXTENDED_PLAIN_OBJECT:
        return bool(tracked_value.extender is snapshot_value[extender.EXTEND])
    return True


def accepts_snapshot(
    tracked_kind: TrackedKind,
    snapshot_kind: SnapshotKind,
    tracked_value: _typing.Any,
    snapshot_value: _typing.Any,
) -> bool:
    """
    Check whether a whole container can be populated from a snapshot.

    The container itself is never replaced here, so plain objects and maps
    are interchangeable. Extended objects still require a snapshot tagged
    with the same Extender.
    """
    if snapshot_kind is SnapshotKind.EXTENDED_PLAIN_OBJECT:
        return is_compatible(tracked_kind, snapshot_kind, tracked_value, snapshot_value)
    if tracked_kind is TrackedKind.MAP:
        tracked_kind = TrackedKind.OBJECT
    if snapshot_kind is SnapshotKind.MAP:
        snapshot_kind = SnapshotKind.PLAIN_OBJECT
    return is_compatible(tracked_kind, snapshot_kind, tracked_value, snapshot_value)
