"""Tests for snapshot document loading and dumping."""

import json as _json
import pathlib as _pathlib

import pytest as _pytest
import yaml as _yaml

import deeppatch.kinds as kinds
import deeppatch.observable as observable
import deeppatch.yaml_io as yaml_io


class TestLoad:
    """Tests for load and the !map tag."""

    def test_plain_mapping_is_dict(self) -> None:
        data = yaml_io.load("a: {b: 1}")

        assert type(data["a"]) is dict

    def test_map_tag(self) -> None:
        """!map produces a map-shaped snapshot value."""
        data = yaml_io.load("scores: !map {1: 10, 2: 20}")

        assert isinstance(data["scores"], yaml_io.SnapshotMap)
        assert kinds.classify_snapshot(data["scores"]) is kinds.SnapshotKind.MAP
        assert dict(data["scores"]) == {1: 10, 2: 20}

    def test_map_tag_requires_mapping(self) -> None:
        with _pytest.raises(_yaml.YAMLError):
            yaml_io.load("scores: !map [1, 2]")

    def test_map_tag_rejects_unhashable_keys(self) -> None:
        """A sequence key is reported as a YAML error, not a TypeError."""
        with _pytest.raises(_yaml.constructor.ConstructorError, match="unhashable"):
            yaml_io.load("a: !map {[1, 2]: x}")

    def test_json_document(self) -> None:
        assert yaml_io.load('{"a": [1, null]}') == {"a": [1, None]}

    def test_load_path(self, tmp_path: _pathlib.Path) -> None:
        path = tmp_path / "doc.yaml"
        path.write_text("- 1\n- 2\n")

        assert yaml_io.load_path(path) == [1, 2]

    def test_unsafe_tags_rejected(self) -> None:
        """Arbitrary Python objects cannot be constructed."""
        with _pytest.raises(_yaml.YAMLError):
            yaml_io.load("!!python/object/apply:os.system ['true']")


class TestDump:
    """Tests for dump."""

    def test_yaml_of_tracked(self) -> None:
        tracked = observable.observable({"b": 1, "a": [1, 2]})

        assert _yaml.safe_load(yaml_io.dump(tracked)) == {"b": 1, "a": [1, 2]}

    def test_json(self) -> None:
        tracked = observable.observable({"m": yaml_io.SnapshotMap({"k": "v"})})

        assert _json.loads(yaml_io.dump(tracked, "json")) == {"m": {"k": "v"}}

    def test_unknown_format(self) -> None:
        with _pytest.raises(ValueError):
            yaml_io.dump({}, "toml")
