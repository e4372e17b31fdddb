"""
Change notification for tracked containers.

Every mutation of a tracked container produces one ``Change`` record, which
is delivered to the container's own observers and then to process-wide spies.

Example:
    >>> obj = ObservableObject({"a": 1})
    >>> dispose = obj.observe(print)
    >>> obj["a"] = 2
    Change(type=<ChangeType.UPDATE: 'update'>, key='a', ...)
    >>> dispose()
"""

from __future__ import annotations

import contextlib as _contextlib
import dataclasses as _dataclasses
import enum as _enum
import typing as _typing


class ChangeType(_enum.Enum):
    """Kind of mutation applied to a tracked container."""

    ADD = "add"
    """A new key was added to an object or map."""

    UPDATE = "update"
    """An existing key or index (or a box) received a new value."""

    REMOVE = "remove"
    """A key was removed from an object or map."""

    SPLICE = "splice"
    """Items were inserted into and/or removed from a list."""


@_dataclasses.dataclass(frozen=True)
class Change:
    """
    A single mutation of a tracked container.

    Attributes:
        container: The container that was mutated.
        type: What kind of mutation happened.
        key: Key (objects, maps), index (lists), or None (boxes).
        old_value: Previous value for UPDATE/REMOVE, None otherwise.
        new_value: New value for ADD/UPDATE, None otherwise.
        added: Items inserted by a SPLICE.
        removed: Items removed by a SPLICE.
    """

    container: _typing.Any = _dataclasses.field(repr=False)
    type: ChangeType
    key: _typing.Any = None
    old_value: _typing.Any = None
    new_value: _typing.Any = None
    added: tuple[_typing.Any, ...] = ()
    removed: tuple[_typing.Any, ...] = ()


Listener: _typing.TypeAlias = _typing.Callable[[Change], None]

_spies: list[Listener] = []


def spy(listener: Listener) -> _typing.Callable[[], None]:
    """
    Register a listener for changes of every tracked container.

    Returns:
        A function that unregisters the listener.
    """
    _spies.append(listener)

    def dispose() -> None:
        if listener in _spies:
            _spies.remove(listener)

    return dispose


@_contextlib.contextmanager
def record_changes() -> _typing.Iterator[list[Change]]:
    """
    Collect every change made while the context is active.

    Example:
        >>> with record_changes() as changes:
        ...     obj["a"] = 1
        >>> [c.type for c in changes]
        [<ChangeType.ADD: 'add'>]
    """
    changes: list[Change] = []
    dispose = spy(changes.append)
    try:
        yield changes
    finally:
        dispose()


class Observable:
    """Mixin providing per-container observers."""

    __slots__ = ()

    _listeners: list[Listener]

    def observe(self, listener: Listener) -> _typing.Callable[[], None]:
        """
        Register a listener for changes of this container only.

        Returns:
            A function that unregisters the listener.
        """
        self._listeners.append(listener)

        def dispose() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return dispose

    def _notify(self, change: Change) -> None:
        for listener in list(self._listeners):
            listener(change)
        for listener in list(_spies):
            listener(change)
