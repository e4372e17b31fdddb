"""
Public entry points.

Each reconcile function comes in two flavours: the default one, which keeps
plain dicts as tracked objects, and an ``_as_map`` one, which turns plain
dicts in the snapshot into tracked maps.

Example:
    >>> import deeppatch
    >>> state = deeppatch.observable.observable({"items": [1, 2, 3]})
    >>> deeppatch.reconcile(state, {"items": [1, 2]})
    ObservableObject({'items': ObservableList([1, 2])})
"""

from __future__ import annotations

import typing as _typing

import deeppatch.extender as extender_mod
import deeppatch.observable as observable
import deeppatch.policy as policy_mod
import deeppatch.reconciler as reconciler

_default = reconciler.Reconciler(policy_mod.default_policy)
_as_map = reconciler.Reconciler(policy_mod.object_to_map_policy)


def reconcile(
    target: _typing.Any,
    snapshot: _typing.Any,
    policy: policy_mod.CustomPolicy | None = None,
) -> _typing.Any:
    """Reconcile a whole tracked container. See Reconciler.reconcile."""
    return _default.reconcile(target, snapshot, policy)


def reconcile_property(
    target: _typing.Any,
    key: _typing.Any,
    value: _typing.Any,
    policy: policy_mod.CustomPolicy | None = None,
) -> _typing.Any:
    """Reconcile one member of a tracked container."""
    return _default.reconcile_property(target, key, value, policy)


def reconcile_boxed(
    box: observable.ObservableBox,
    value: _typing.Any,
    policy: policy_mod.CustomPolicy | None = None,
) -> observable.ObservableBox:
    """Reconcile the value of a tracked box."""
    return _default.reconcile_boxed(box, value, policy)  # type: ignore[no-any-return]


def reconcile_as_map(
    target: _typing.Any,
    snapshot: _typing.Any,
    policy: policy_mod.CustomPolicy | None = None,
) -> _typing.Any:
    """Like reconcile, but plain dicts below the target become tracked maps."""
    return _as_map.reconcile(target, snapshot, policy)


def reconcile_property_as_map(
    target: _typing.Any,
    key: _typing.Any,
    value: _typing.Any,
    policy: policy_mod.CustomPolicy | None = None,
) -> _typing.Any:
    return _as_map.reconcile_property(target, key, value, policy)


def reconcile_boxed_as_map(
    box: observable.ObservableBox,
    value: _typing.Any,
    policy: policy_mod.CustomPolicy | None = None,
) -> observable.ObservableBox:
    return _as_map.reconcile_boxed(box, value, policy)  # type: ignore[no-any-return]


def make_extender(template: _typing.Any) -> extender_mod.Extender:
    """Freeze a template of default members. See extender.make_extender."""
    return extender_mod.make_extender(template)


def is_extender_of(extender: extender_mod.Extender, value: _typing.Any) -> bool:
    """Check whether a tracked object was built from the given Extender."""
    return observable.is_observable_object(value) and value.extender is extender
