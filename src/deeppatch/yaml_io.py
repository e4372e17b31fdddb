"""
YAML loader and dumper for snapshot documents.

Plain YAML mappings load as dicts, which reconcile as records. The custom
``!map`` tag loads a mapping as a SnapshotMap instead, which reconciles as a
map (and may have non-string keys).

Example:
    >>> data = load('''
    ... user: {name: ada}
    ... scores: !map {1: 10, 2: 20}
    ... ''')
    >>> type(data["scores"]).__name__
    'SnapshotMap'
"""

from __future__ import annotations

import collections.abc as _abc
import json as _json
import pathlib as _pathlib
import typing as _typing

import yaml as _yaml

import deeppatch.observable as observable


class SnapshotMap(_abc.Mapping[_typing.Any, _typing.Any]):
    """
    Read-only map-shaped snapshot value.

    Not a dict, so it classifies as a map rather than a plain record.
    """

    __slots__ = ("_data",)

    def __init__(self, data: _abc.Mapping[_typing.Any, _typing.Any] | None = None) -> None:
        self._data: dict[_typing.Any, _typing.Any] = dict(data) if data is not None else {}

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        return self._data[key]

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"SnapshotMap({self._data!r})"


def _map_constructor(
    loader: _yaml.SafeLoader,
    node: _yaml.Node,
) -> SnapshotMap:
    """
    Construct a SnapshotMap from a !map tag.

        scores: !map
          1: 10
          2: 20
    """
    if not isinstance(node, _yaml.MappingNode):
        raise _yaml.constructor.ConstructorError(
            None, None, f"!map expects a mapping, found {node.id}", node.start_mark
        )
    loader.flatten_mapping(node)
    pairs = loader.construct_pairs(node, deep=True)
    for (key, _), (key_node, _) in zip(pairs, node.value):
        if not isinstance(key, _abc.Hashable):
            raise _yaml.constructor.ConstructorError(
                "while constructing a !map",
                node.start_mark,
                f"found unhashable key of type {type(key).__name__}",
                key_node.start_mark,
            )
    return SnapshotMap(dict(pairs))


class SnapshotLoader(_yaml.SafeLoader):
    """SafeLoader with the `!map` tag."""

    pass


SnapshotLoader.add_constructor("!map", _map_constructor)


def load(stream: _typing.Any) -> _typing.Any:
    """
    Load a snapshot document. JSON documents load too (YAML is a superset).

    Args:
        stream: YAML content (string, bytes, or file-like object).
    """
    return _yaml.load(stream, Loader=SnapshotLoader)  # noqa: S506 - SafeLoader subclass


def load_path(path: _pathlib.Path | str) -> _typing.Any:
    """Load a snapshot document from a file."""
    return load(_pathlib.Path(path).read_text(encoding="utf-8"))


def to_plain_data(value: _typing.Any) -> _typing.Any:
    """Deep-convert tracked containers and snapshot maps to dicts and lists."""
    value = observable.to_plain(value)
    if isinstance(value, _abc.Mapping):
        return {key: to_plain_data(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_plain_data(item) for item in value]
    return value


def dump(value: _typing.Any, fmt: str = "yaml") -> str:
    """
    Serialize a (possibly tracked) document.

    Args:
        value: Document to serialize.
        fmt: "yaml" or "json".

    Raises:
        ValueError: If fmt is unknown.
    """
    plain = to_plain_data(value)
    if fmt == "json":
        return _json.dumps(plain, indent=2, default=str) + "\n"
    if fmt == "yaml":
        return str(_yaml.safe_dump(plain, sort_keys=False, default_flow_style=False))
    raise ValueError(f"Unknown output format: {fmt!r}")
