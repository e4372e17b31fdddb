"""
Tracked containers for deeppatch.

A small reactive container system: objects, lists, maps and boxes whose
mutations are reported to observers, plus the keyed primitives and type
predicates the reconciler consumes.

Example:
    >>> import deeppatch.observable as observable
    >>> state = observable.observable({"todos": [{"title": "write"}]})
    >>> with observable.record_changes() as changes:
    ...     observable.set(state["todos"][0], "done", True)
    >>> changes[0].type
    <ChangeType.ADD: 'add'>
"""

from deeppatch.observable._api import (
    get,
    is_observable,
    is_observable_box,
    is_observable_list,
    is_observable_map,
    is_observable_object,
    keys,
    remove,
    set,
    set_length,
)
from deeppatch.observable._containers import (
    MISSING,
    ObservableBox,
    ObservableList,
    ObservableMap,
    ObservableObject,
    create_object_from_template,
    is_scalar,
    observable,
    to_plain,
)
from deeppatch.observable._events import (
    Change,
    ChangeType,
    Observable,
    record_changes,
    spy,
)

__all__ = [
    "MISSING",
    "Change",
    "ChangeType",
    "Observable",
    "ObservableBox",
    "ObservableList",
    "ObservableMap",
    "ObservableObject",
    "create_object_from_template",
    "get",
    "is_observable",
    "is_observable_box",
    "is_observable_list",
    "is_observable_map",
    "is_observable_object",
    "is_scalar",
    "keys",
    "observable",
    "record_changes",
    "remove",
    "set",
    "set_length",
    "spy",
    "to_plain",
]
