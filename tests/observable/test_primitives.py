"""Tests for keyed access primitives and predicates."""

import pytest as _pytest

import deeppatch.observable as observable


class TestGet:
    """Tests for observable.get."""

    def test_object_member(self) -> None:
        """Returns members of objects and maps."""
        obj = observable.observable({"a": 1})

        assert observable.get(obj, "a") == 1

    def test_missing_member_returns_sentinel(self) -> None:
        """Absent keys return MISSING, not None."""
        obj = observable.observable({"a": None})

        assert observable.get(obj, "a") is None
        assert observable.get(obj, "b") is observable.MISSING
        assert observable.get(obj, "b", 0) == 0

    def test_list_out_of_range(self) -> None:
        """Out-of-range and non-integer indices return MISSING."""
        lst = observable.ObservableList([1])

        assert observable.get(lst, 0) == 1
        assert observable.get(lst, 1) is observable.MISSING
        assert observable.get(lst, "0") is observable.MISSING

    def test_rejects_untracked(self) -> None:
        """Plain dicts are not tracked containers."""
        with _pytest.raises(TypeError):
            observable.get({"a": 1}, "a")


class TestSet:
    """Tests for observable.set."""

    def test_append_at_length(self) -> None:
        """Setting index == length appends."""
        lst = observable.ObservableList([1])

        observable.set(lst, 1, 2)

        assert lst == [1, 2]

    def test_pad_past_length(self) -> None:
        """Setting past the end pads with None."""
        lst = observable.ObservableList()

        observable.set(lst, 2, "x")

        assert lst == [None, None, "x"]

    def test_list_index_must_be_int(self) -> None:
        """String indices are rejected for lists."""
        with _pytest.raises(TypeError):
            observable.set(observable.ObservableList(), "0", 1)

    def test_map_any_key(self) -> None:
        """Maps accept arbitrary hashable keys."""
        m = observable.ObservableMap()

        observable.set(m, (1, 2), "pair")

        assert m[(1, 2)] == "pair"


class TestRemoveAndKeys:
    """Tests for observable.remove and observable.keys."""

    def test_remove_ignores_absent(self) -> None:
        """Removing an absent key is a no-op."""
        obj = observable.observable({"a": 1})

        observable.remove(obj, "b")
        observable.remove(obj, "a")

        assert dict(obj) == {}

    def test_list_keys_are_indices(self) -> None:
        """List keys are 0..len-1."""
        assert observable.keys(observable.ObservableList(["a", "b"])) == [0, 1]

    def test_keys_is_a_copy(self) -> None:
        """Keys can be iterated while removing."""
        obj = observable.observable({"a": 1, "b": 2})

        for key in observable.keys(obj):
            observable.remove(obj, key)

        assert len(obj) == 0

    def test_set_length_requires_list(self) -> None:
        """set_length only applies to lists."""
        with _pytest.raises(TypeError):
            observable.set_length(observable.ObservableObject(), 0)


class TestPredicates:
    """Tests for the type predicates."""

    def test_predicates(self) -> None:
        """Each predicate matches exactly its own container type."""
        obj = observable.ObservableObject()
        lst = observable.ObservableList()
        m = observable.ObservableMap()
        box = observable.ObservableBox()

        assert observable.is_observable_object(obj) and not observable.is_observable_object(m)
        assert observable.is_observable_list(lst) and not observable.is_observable_list([])
        assert observable.is_observable_map(m) and not observable.is_observable_map(obj)
        assert observable.is_observable_box(box)
        assert all(observable.is_observable(v) for v in (obj, lst, m, box))
        assert not observable.is_observable({})

    def test_is_scalar(self) -> None:
        """Strings, bytes, numbers and bools are scalars; None is not."""
        assert all(observable.is_scalar(v) for v in ("s", b"b", 1, 1.5, True, 2j))
        assert not observable.is_scalar(None)
        assert not observable.is_scalar((1,))
