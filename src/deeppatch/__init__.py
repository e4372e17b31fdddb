"""
deeppatch - structural reconciliation for tracked tree data.

Mutates a tracked container in place so that its content equals a plain
snapshot, reusing every sub-container whose shape still fits so that its
identity and observers survive.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("deeppatch")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from deeppatch import observable  # noqa: E402
from deeppatch.api import (  # noqa: E402
    is_extender_of,
    make_extender,
    reconcile,
    reconcile_as_map,
    reconcile_boxed,
    reconcile_boxed_as_map,
    reconcile_property,
    reconcile_property_as_map,
)
from deeppatch.errors import ExtenderError, IncompatibleTypeError, ReconcileError  # noqa: E402
from deeppatch.extender import EXTEND, Extender  # noqa: E402
from deeppatch.kinds import SnapshotKind, TrackedKind  # noqa: E402
from deeppatch.policy import (  # noqa: E402
    PASS_THROUGH,
    REUSE,
    Decision,
    Install,
    PassThrough,
    Reuse,
    default_policy,
    object_to_map_policy,
)
from deeppatch.reconciler import Reconciler  # noqa: E402

__all__ = [
    "EXTEND",
    "PASS_THROUGH",
    "REUSE",
    "Decision",
    "Extender",
    "ExtenderError",
    "IncompatibleTypeError",
    "Install",
    "PassThrough",
    "ReconcileError",
    "Reconciler",
    "Reuse",
    "SnapshotKind",
    "TrackedKind",
    "__version__",
    "__version_info__",
    "default_policy",
    "is_extender_of",
    "make_extender",
    "object_to_map_policy",
    "observable",
    "reconcile",
    "reconcile_as_map",
    "reconcile_boxed",
    "reconcile_boxed_as_map",
    "reconcile_property",
    "reconcile_property_as_map",
]
