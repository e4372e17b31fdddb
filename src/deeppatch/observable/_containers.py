"""
Tracked containers: objects, lists, maps and boxes.

All writes go through the deep enhancer ``observable()``, so plain dicts and
lists stored into a tracked container become tracked containers themselves.
Writing a value identical to the current one is a no-op and emits no change.

Thread safety: NOT thread-safe. Callers that share containers between
threads must serialize all access, including reads during a reconcile.
"""

from __future__ import annotations

import collections.abc as _abc
import math as _math
import numbers as _numbers
import types as _types
import typing as _typing

import deeppatch.errors as errors
import deeppatch.extender as extender_mod
import deeppatch.observable._events as _events


class _MissingType:
    """Sentinel for an absent key or out-of-range index."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: _typing.Any = _MissingType()

SCALAR_TYPES: tuple[type, ...] = (str, bytes, bool, _numbers.Number)


def is_scalar(value: _typing.Any) -> bool:
    """Check whether a value is a primitive that is always assigned directly."""
    return isinstance(value, SCALAR_TYPES)


def _same(old: _typing.Any, new: _typing.Any) -> bool:
    """Identity for containers, typed equality for scalars (NaN equals NaN)."""
    if old is new:
        return True
    if type(old) is not type(new) or not is_scalar(new):
        return False
    if isinstance(new, float) and _math.isnan(old) and _math.isnan(new):
        return True
    return bool(old == new)


# =============================================================================
# ObservableObject
# =============================================================================


class ObservableObject(_events.Observable, _abc.MutableMapping[_typing.Any, _typing.Any]):
    """
    A tracked record.

    Members are read and written with item syntax; public names are also
    reachable as attributes. An object built from an Extender additionally
    exposes the extender's derived members, which are not enumerated.

    Example:
        >>> obj = ObservableObject({"name": "ada"})
        >>> obj.name
        'ada'
        >>> obj["name"] = "grace"
    """

    def __init__(
        self,
        values: _abc.Mapping[_typing.Any, _typing.Any] | None = None,
        *,
        extender: extender_mod.Extender | None = None,
    ) -> None:
        self._listeners: list[_events.Listener] = []
        self._extender = extender
        self._derived: dict[str, _typing.Any] = {}
        members: dict[_typing.Any, _typing.Any] = {}
        if extender is not None:
            self._derived = extender.derived_members()
            members.update(extender.default_members())
        if values is not None:
            members.update((k, v) for k, v in values.items() if k is not extender_mod.EXTEND)
        self._values: dict[_typing.Any, _typing.Any] = {
            key: observable(value) for key, value in members.items()
        }

    @property
    def extender(self) -> extender_mod.Extender | None:
        """The Extender this object was built from, if any."""
        return self._extender

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        if key in self._values:
            return self._values[key]
        member = self._derived.get(key) if isinstance(key, str) else None
        if isinstance(member, property) and member.fget is not None:
            return member.fget(self)
        if isinstance(member, _types.FunctionType):
            return _types.MethodType(member, self)
        raise KeyError(key)

    def __setitem__(self, key: _typing.Any, value: _typing.Any) -> None:
        member = self._derived.get(key) if isinstance(key, str) else None
        if member is not None:
            if isinstance(member, property) and member.fset is not None:
                member.fset(self, value)
                return
            raise TypeError(f"{key!r} is a read-only derived member")

        new = observable(value)
        if key in self._values:
            old = self._values[key]
            if _same(old, new):
                return
            self._values[key] = new
            self._notify(_events.Change(self, _events.ChangeType.UPDATE, key, old, new))
        else:
            self._values[key] = new
            self._notify(_events.Change(self, _events.ChangeType.ADD, key, None, new))

    def __delitem__(self, key: _typing.Any) -> None:
        old = self._values.pop(key)
        self._notify(_events.Change(self, _events.ChangeType.REMOVE, key, old, None))

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __getattr__(self, name: str) -> _typing.Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: _typing.Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
        else:
            self[name] = value

    def __delattr__(self, name: str) -> None:
        if name.startswith("_"):
            object.__delattr__(self, name)
            return
        try:
            del self[name]
        except KeyError:
            raise AttributeError(name) from None

    def __repr__(self) -> str:
        if self._extender is not None:
            return f"ObservableObject({self._values!r}, extender={self._extender!r})"
        return f"ObservableObject({self._values!r})"


# =============================================================================
# ObservableList
# =============================================================================


class ObservableList(_events.Observable, _abc.MutableSequence[_typing.Any]):
    """
    A tracked list.

    Index assignment emits UPDATE; insertions, deletions and length changes
    emit a single SPLICE each.
    """

    def __init__(self, items: _abc.Iterable[_typing.Any] | None = None) -> None:
        self._listeners: list[_events.Listener] = []
        self._items: list[_typing.Any] = [observable(item) for item in items or ()]

    def _index(self, index: int) -> int:
        if index < 0:
            index += len(self._items)
        if not 0 <= index < len(self._items):
            raise IndexError("list index out of range")
        return index

    @_typing.overload
    def __getitem__(self, index: int) -> _typing.Any: ...

    @_typing.overload
    def __getitem__(self, index: slice) -> list[_typing.Any]: ...

    def __getitem__(self, index: int | slice) -> _typing.Any:
        if isinstance(index, slice):
            return self._items[index]
        return self._items[index]

    def __setitem__(self, index: int, value: _typing.Any) -> None:  # type: ignore[override]
        if isinstance(index, slice):
            raise TypeError("ObservableList does not support slice assignment")
        index = self._index(index)
        old = self._items[index]
        new = observable(value)
        if _same(old, new):
            return
        self._items[index] = new
        self._notify(_events.Change(self, _events.ChangeType.UPDATE, index, old, new))

    def __delitem__(self, index: int | slice) -> None:
        if isinstance(index, slice):
            start, stop, step = index.indices(len(self._items))
            if step != 1:
                for position in sorted(range(start, stop, step), reverse=True):
                    del self[position]
                return
            removed = tuple(self._items[start:stop])
            if not removed:
                return
            del self._items[start:stop]
            self._notify(_events.Change(self, _events.ChangeType.SPLICE, start, removed=removed))
            return
        index = self._index(index)
        old = self._items.pop(index)
        self._notify(_events.Change(self, _events.ChangeType.SPLICE, index, removed=(old,)))

    def __len__(self) -> int:
        return len(self._items)

    def insert(self, index: int, value: _typing.Any) -> None:
        """Insert a value before index, like list.insert."""
        length = len(self._items)
        if index < 0:
            index = max(0, index + length)
        index = min(index, length)
        new = observable(value)
        self._items.insert(index, new)
        self._notify(_events.Change(self, _events.ChangeType.SPLICE, index, added=(new,)))

    def set_length(self, length: int) -> None:
        """
        Truncate or pad the list in a single splice.

        Padding uses None.

        Raises:
            ValueError: If length is negative.
        """
        if length < 0:
            raise ValueError(f"Invalid list length: {length}")
        current = len(self._items)
        if length < current:
            removed = tuple(self._items[length:])
            del self._items[length:]
            self._notify(_events.Change(self, _events.ChangeType.SPLICE, length, removed=removed))
        elif length > current:
            added = (None,) * (length - current)
            self._items.extend(added)
            self._notify(_events.Change(self, _events.ChangeType.SPLICE, current, added=added))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (str, bytes)):
            return NotImplemented
        if isinstance(other, _abc.Sequence):
            return list(self) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ObservableList({self._items!r})"


# =============================================================================
# ObservableMap
# =============================================================================


class ObservableMap(_events.Observable, _abc.MutableMapping[_typing.Any, _typing.Any]):
    """A tracked mapping with arbitrary hashable keys."""

    def __init__(self, values: _abc.Mapping[_typing.Any, _typing.Any] | None = None) -> None:
        self._listeners: list[_events.Listener] = []
        self._values: dict[_typing.Any, _typing.Any] = {}
        if values is not None:
            self._values = {key: observable(value) for key, value in values.items()}

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        return self._values[key]

    def __setitem__(self, key: _typing.Any, value: _typing.Any) -> None:
        new = observable(value)
        if key in self._values:
            old = self._values[key]
            if _same(old, new):
                return
            self._values[key] = new
            self._notify(_events.Change(self, _events.ChangeType.UPDATE, key, old, new))
        else:
            self._values[key] = new
            self._notify(_events.Change(self, _events.ChangeType.ADD, key, None, new))

    def __delitem__(self, key: _typing.Any) -> None:
        old = self._values.pop(key)
        self._notify(_events.Change(self, _events.ChangeType.REMOVE, key, old, None))

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __repr__(self) -> str:
        return f"ObservableMap({self._values!r})"


# =============================================================================
# ObservableBox
# =============================================================================


class ObservableBox(_events.Observable):
    """A tracked single value."""

    def __init__(self, value: _typing.Any = None) -> None:
        self._listeners: list[_events.Listener] = []
        self._value = observable(value)

    def get(self) -> _typing.Any:
        """Return the boxed value."""
        return self._value

    def set(self, value: _typing.Any) -> None:
        """Replace the boxed value."""
        new = observable(value)
        old = self._value
        if _same(old, new):
            return
        self._value = new
        self._notify(_events.Change(self, _events.ChangeType.UPDATE, None, old, new))

    @property
    def value(self) -> _typing.Any:
        return self.get()

    @value.setter
    def value(self, value: _typing.Any) -> None:
        self.set(value)

    def __repr__(self) -> str:
        return f"ObservableBox({self._value!r})"


# =============================================================================
# Construction
# =============================================================================


def create_object_from_template(
    extender: extender_mod.Extender,
    overrides: _abc.Mapping[_typing.Any, _typing.Any] | None = None,
) -> ObservableObject:
    """
    Build a tracked object from an Extender, then layer overrides on top.

    Raises:
        ExtenderError: If extender is not an Extender.
    """
    if not isinstance(extender, extender_mod.Extender):
        raise errors.ExtenderError(
            f"Expected an Extender, got {type(extender).__name__}; use make_extender()"
        )
    return ObservableObject(overrides, extender=extender)


def observable(value: _typing.Any) -> _typing.Any:
    """
    Deep enhancer: turn plain containers into tracked ones.

    - dict → ObservableObject (templated when it carries EXTEND)
    - list → ObservableList
    - any other Mapping → ObservableMap
    - tracked values, Extenders and everything else are returned as-is
    """
    if isinstance(value, (_events.Observable, extender_mod.Extender)):
        return value
    if type(value) is dict:
        if extender_mod.EXTEND in value:
            return create_object_from_template(value[extender_mod.EXTEND], value)
        return ObservableObject(value)
    if isinstance(value, list):
        return ObservableList(value)
    if isinstance(value, _abc.Mapping):
        return ObservableMap(value)
    return value


def to_plain(value: _typing.Any) -> _typing.Any:
    """Deep-convert tracked containers back to dicts and lists."""
    if isinstance(value, (ObservableObject, ObservableMap)):
        return {key: to_plain(item) for key, item in value._values.items()}
    if isinstance(value, ObservableList):
        return [to_plain(item) for item in value._items]
    if isinstance(value, ObservableBox):
        return to_plain(value.get())
    return value
