"""Tests for replacement policies and decisions."""

import types as _types

import pytest as _pytest

import deeppatch.errors as errors
import deeppatch.extender as extender
import deeppatch.kinds as kinds
import deeppatch.observable as observable
import deeppatch.policy as policy

TK = kinds.TrackedKind
SK = kinds.SnapshotKind


def _decide(fn: policy.Policy, tracked: object, snapshot: object) -> policy.Decision:
    return fn(kinds.classify_tracked(tracked), kinds.classify_snapshot(snapshot), tracked, snapshot)


class TestInstall:
    """Tests for Install validation."""

    def test_other_rejected(self) -> None:
        """OTHER has no container to install."""
        with _pytest.raises(ValueError):
            policy.Install(SK.OTHER)

    def test_extended_requires_extender(self) -> None:
        """An extended install must carry an Extender."""
        with _pytest.raises(errors.ExtenderError):
            policy.Install(SK.EXTENDED_PLAIN_OBJECT, {"a": 1})  # type: ignore[arg-type]

    def test_extender_only_for_extended(self) -> None:
        """A plain install cannot carry an Extender."""
        with _pytest.raises(ValueError):
            policy.Install(SK.PLAIN_OBJECT, extender.make_extender({}))


class TestDefaultPolicy:
    """Tests for default_policy."""

    def test_reuse_compatible(self) -> None:
        """Compatible tracked values are reused."""
        assert _decide(policy.default_policy, observable.ObservableObject(), {}) is policy.REUSE
        assert _decide(policy.default_policy, observable.ObservableList(), []) is policy.REUSE

    @_pytest.mark.parametrize(
        ("snapshot", "kind"),
        [
            ({}, SK.PLAIN_OBJECT),
            ([], SK.ARRAY),
        ],
    )
    def test_install_matching_snapshot(self, snapshot: object, kind: kinds.SnapshotKind) -> None:
        """Incompatible tracked values get a container of the snapshot's kind."""
        assert _decide(policy.default_policy, 5, snapshot) == policy.Install(kind)

    def test_install_map(self) -> None:
        """Map snapshots install a map over an object."""
        decision = _decide(
            policy.default_policy, observable.ObservableObject(), _types.MappingProxyType({})
        )

        assert decision == policy.Install(SK.MAP)

    @_pytest.mark.parametrize("snapshot", [None, (1, 2), object(), observable.ObservableObject()])
    def test_pass_through_other(self, snapshot: object) -> None:
        """OTHER snapshots are passed through."""
        assert _decide(policy.default_policy, observable.ObservableObject(), snapshot) is policy.PASS_THROUGH

    def test_install_extended(self) -> None:
        """Tagged snapshots install an object from their Extender."""
        e1 = extender.make_extender({})
        e2 = extender.make_extender({})
        tracked = observable.create_object_from_template(e1)

        assert _decide(policy.default_policy, tracked, e1.tag()) is policy.REUSE
        assert _decide(policy.default_policy, tracked, e2.tag()) == policy.Install(
            SK.EXTENDED_PLAIN_OBJECT, e2
        )


class TestObjectToMapPolicy:
    """Tests for object_to_map_policy."""

    def test_plain_dict_installs_map(self) -> None:
        """Plain dicts replace tracked objects with maps."""
        decision = _decide(policy.object_to_map_policy, observable.ObservableObject(), {})

        assert decision == policy.Install(SK.MAP)

    def test_plain_dict_reuses_map(self) -> None:
        """Plain dicts reuse tracked maps."""
        assert _decide(policy.object_to_map_policy, observable.ObservableMap(), {}) is policy.REUSE

    def test_lists_unaffected(self) -> None:
        """Non-record snapshots behave like the default policy."""
        assert _decide(policy.object_to_map_policy, observable.ObservableList(), []) is policy.REUSE
