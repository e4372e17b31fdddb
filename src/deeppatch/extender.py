"""
Extenders: frozen templates of default members for tracked objects.

An extender is attached to a plain snapshot dict under the reserved ``EXTEND``
key. When the container system builds a tracked object from such a dict, it
first lays down the extender's members and then the snapshot's own members,
and remembers the extender on the resulting object.

Members of the template come in two flavours:

- Derived members (``property`` objects and plain functions) become computed
  accessors and bound methods. They are not enumerable, so reconciliation
  never removes them.
- Any other value is a default. Defaults are deep copied into every new
  object and are ordinary enumerable members afterwards.

Example:
    >>> Person = make_extender({
    ...     "full_name": property(lambda self: f"{self['first']} {self['last']}"),
    ... })
    >>> snapshot = Person.tag(first="Ada", last="Lovelace")
    >>> EXTEND in snapshot
    True
"""

from __future__ import annotations

import collections.abc as _abc
import copy as _copy
import types as _types
import typing as _typing

import deeppatch.errors as errors


class _ExtendKey:
    """
    Reserved dict key carrying an Extender reference in a snapshot.

    This is a singleton. Use the EXTEND constant, not the class.
    """

    _instance: _ExtendKey | None = None

    def __new__(cls) -> _ExtendKey:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EXTEND"

    def __reduce__(self) -> tuple[_typing.Callable[[], _ExtendKey], tuple[()]]:
        """Support pickling by returning the singleton factory."""
        return (_get_extend_singleton, ())


def _get_extend_singleton() -> _ExtendKey:
    """Return the EXTEND singleton. Used by pickle."""
    return EXTEND


EXTEND = _ExtendKey()


def is_derived(member: _typing.Any) -> bool:
    """Check whether a template member is a computed accessor or method."""
    return isinstance(member, (property, _types.FunctionType))


class Extender(_abc.Mapping[str, _typing.Any]):
    """
    Read-only template of members for tracked objects.

    Extenders compare and hash by identity: two extenders built from equal
    templates are still different extenders, and objects built from one are
    not compatible with snapshots tagged with the other.
    """

    __slots__ = ("_data",)

    def __init__(self, template: _abc.Mapping[str, _typing.Any]) -> None:
        """
        Freeze a template.

        Args:
            template: The members to freeze. The mapping is copied, so later
                      changes to it do not leak into the extender.
        """
        self._data: dict[str, _typing.Any] = dict(template)

    def __getitem__(self, key: str) -> _typing.Any:
        return self._data[key]

    def __iter__(self) -> _typing.Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Extender({sorted(self._data)!r})"

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def derived_members(self) -> dict[str, _typing.Any]:
        """Return the computed accessors and methods of the template."""
        return {name: member for name, member in self._data.items() if is_derived(member)}

    def default_members(self) -> dict[str, _typing.Any]:
        """Return fresh deep copies of the template's default values."""
        return {
            name: _copy.deepcopy(member)
            for name, member in self._data.items()
            if not is_derived(member)
        }

    def tag(
        self,
        members: _abc.Mapping[_typing.Any, _typing.Any] | None = None,
        /,
        **kwargs: _typing.Any,
    ) -> dict[_typing.Any, _typing.Any]:
        """
        Build a snapshot dict that carries this extender.

        Args:
            members: Initial members of the snapshot.
            **kwargs: Additional members.

        Returns:
            A plain dict with ``EXTEND`` set to this extender.
        """
        snapshot: dict[_typing.Any, _typing.Any] = {EXTEND: self}
        if members is not None:
            snapshot.update(members)
        snapshot.update(kwargs)
        return snapshot


def make_extender(template: _typing.Any) -> Extender:
    """
    Freeze a template into an Extender.

    Passing an existing Extender returns it unchanged, so its identity (and
    the compatibility of objects built from it) is preserved.

    Raises:
        ExtenderError: If the template is not a mapping, or carries an
            ``EXTEND`` key itself.
    """
    if isinstance(template, Extender):
        return template
    if not isinstance(template, _abc.Mapping):
        raise errors.ExtenderError(
            f"Extender template must be a mapping, got {type(template).__name__}"
        )
    if EXTEND in template:
        raise errors.ExtenderError("Extender template cannot itself carry an extender")
    for name in template:
        if not isinstance(name, str):
            raise errors.ExtenderError(f"Extender member names must be strings, got {name!r}")
    return Extender(template)


def snapshot_extender(value: _typing.Any) -> Extender | None:
    """Return the Extender carried by a plain snapshot dict, if any."""
    if type(value) is dict:
        carried = value.get(EXTEND)
        if isinstance(carried, Extender):
            return carried
    return None
