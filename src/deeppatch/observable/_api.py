"""
Keyed access primitives and type predicates over tracked containers.

These give objects, maps and lists one uniform surface (get / set / remove /
keys), which is all the reconciler needs to mutate a container.
"""

from __future__ import annotations

import typing as _typing

import deeppatch.observable._containers as _containers
import deeppatch.observable._events as _events

ObservableObject = _containers.ObservableObject
ObservableList = _containers.ObservableList
ObservableMap = _containers.ObservableMap
ObservableBox = _containers.ObservableBox
MISSING = _containers.MISSING


def is_observable(value: _typing.Any) -> bool:
    """Check whether a value is any tracked container or box."""
    return isinstance(value, _events.Observable)


def is_observable_object(value: _typing.Any) -> bool:
    return isinstance(value, ObservableObject)


def is_observable_list(value: _typing.Any) -> bool:
    return isinstance(value, ObservableList)


def is_observable_map(value: _typing.Any) -> bool:
    return isinstance(value, ObservableMap)


def is_observable_box(value: _typing.Any) -> bool:
    return isinstance(value, ObservableBox)


def _require_keyed(container: _typing.Any) -> None:
    if not isinstance(container, (ObservableObject, ObservableMap, ObservableList)):
        raise TypeError(f"{type(container).__name__} is not a tracked container")


def _require_index(key: _typing.Any) -> int:
    if isinstance(key, bool) or not isinstance(key, int):
        raise TypeError(f"List indices must be integers, got {type(key).__name__}")
    if key < 0:
        raise IndexError(f"Negative list index: {key}")
    return key


def get(container: _typing.Any, key: _typing.Any, default: _typing.Any = MISSING) -> _typing.Any:
    """
    Read a member.

    Returns:
        The member value, or default (MISSING unless given) when the key
        is absent or the index is out of range.
    """
    _require_keyed(container)
    if isinstance(container, ObservableList):
        if isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(container):
            return container[key]
        return default
    try:
        return container[key]
    except KeyError:
        return default


def set(container: _typing.Any, key: _typing.Any, value: _typing.Any) -> None:  # noqa: A001
    """
    Write a member.

    For lists, writing at the current length appends, and writing past it
    pads the gap with None first.
    """
    _require_keyed(container)
    if isinstance(container, ObservableList):
        index = _require_index(key)
        if index < len(container):
            container[index] = value
            return
        if index > len(container):
            container.set_length(index)
        container.append(value)
        return
    container[key] = value


def remove(container: _typing.Any, key: _typing.Any) -> None:
    """Remove a member; absent keys are ignored."""
    _require_keyed(container)
    if isinstance(container, ObservableList):
        if isinstance(key, int) and not isinstance(key, bool) and 0 <= key < len(container):
            del container[key]
        return
    if key in container:
        del container[key]


def keys(container: _typing.Any) -> list[_typing.Any]:
    """
    Return the enumerable keys of a container as a stable list.

    List keys are indices. Derived members of extended objects are excluded.
    """
    _require_keyed(container)
    if isinstance(container, ObservableList):
        return list(range(len(container)))
    return list(container)


def set_length(container: _typing.Any, length: int) -> None:
    """Truncate or pad a tracked list in a single splice."""
    if not isinstance(container, ObservableList):
        raise TypeError(f"{type(container).__name__} is not a tracked list")
    container.set_length(length)
