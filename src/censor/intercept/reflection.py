# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Default reflective adapters for the interception ports."""

from __future__ import annotations

import inspect
import types
from collections.abc import Iterator
from typing import Any

from censor.intercept.ports import Constructor, DescriptorInfo, Instance, Target
from censor.kernel.exceptions import InvalidTargetException

_SCALAR_TYPES: tuple[type, ...] = (
    type(None),
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    range,
    type(Ellipsis),
    type(NotImplemented),
)

# Marks the per-target subclasses created to carry intercepted accessors.
SYNTHETIC_CLASS_ATTR = "__censor_synthetic__"


def is_scalar(value: Any) -> bool:
    """Immutable scalars have no members that could be intercepted."""
    return isinstance(value, _SCALAR_TYPES)


def is_synthetic_class(cls: type) -> bool:
    return bool(cls.__dict__.get(SYNTHETIC_CLASS_ATTR, False))


class ReflectiveTargetClassifier:
    """Classifies with ``isinstance``/``inspect``.

    Classes and plain or builtin functions are constructors; scalars are
    rejected; every other object is an instance.
    """

    def classify(self, value: Any) -> Target:
        if is_scalar(value):
            raise InvalidTargetException(
                f"Can't install censor on {type(value).__name__}",
                context={"type": type(value).__name__},
            )
        if isinstance(value, type) or inspect.isfunction(value) or inspect.isbuiltin(value):
            return Constructor(value)
        return Instance(value)


class ReflectiveDescriptorLookup:
    """Walks the instance namespace, then each class of the MRO.

    Level 0 is the instance's own ``__dict__``; level *n* is the *n*-th
    class of ``type(target).__mro__``. ``object`` ends the walk, and
    classes created by censor itself are skipped without counting.
    """

    def find(self, target: Any, name: str, max_depth: int) -> DescriptorInfo | None:
        for depth, owner, namespace in self._levels(target):
            if depth > max_depth:
                return None
            if name not in namespace:
                continue
            if owner is None:
                return self._instance_value(target, name, depth)
            return self._class_attribute(target, name, owner, namespace[name], depth)
        return None

    @staticmethod
    def _levels(target: Any) -> Iterator[tuple[int, type | None, Any]]:
        depth = 0
        own = own_namespace(target)
        if own is not None:
            yield depth, None, own
        for cls in type(target).__mro__:
            if cls is object:
                return
            if is_synthetic_class(cls):
                continue
            depth += 1
            yield depth, cls, cls.__dict__

    @staticmethod
    def _instance_value(target: Any, name: str, depth: int) -> DescriptorInfo:
        own = own_namespace(target)

        def getter() -> Any:
            return own[name]

        def setter(value: Any) -> None:
            own[name] = value

        return DescriptorInfo(getter=getter, setter=setter, owner=None, depth=depth)

    @staticmethod
    def _class_attribute(target: Any, name: str, owner: type, attr: Any, depth: int) -> DescriptorInfo:
        objtype = type(target)
        own = own_namespace(target)

        if hasattr(type(attr), "__get__"):

            def getter() -> Any:
                return attr.__get__(target, objtype)

            read_only = isinstance(attr, property) and attr.fset is None
            if hasattr(type(attr), "__set__") and not read_only:

                def setter(value: Any) -> None:
                    attr.__set__(target, value)

                return DescriptorInfo(getter=getter, setter=setter, owner=owner, depth=depth)
            return DescriptorInfo(getter=getter, setter=None, owner=owner, depth=depth)

        # Plain class attribute: reads fall back to the class, writes land on the instance.
        def class_value_getter() -> Any:
            if own is not None and name in own:
                return own[name]
            return owner.__dict__[name]

        if own is None:
            return DescriptorInfo(getter=class_value_getter, setter=None, owner=owner, depth=depth)

        def instance_setter(value: Any) -> None:
            own[name] = value

        return DescriptorInfo(getter=class_value_getter, setter=instance_setter, owner=owner, depth=depth)


def own_namespace(target: Any) -> dict[str, Any] | None:
    """The target's writable instance dict, if it has one."""
    namespace = getattr(target, "__dict__", None)
    return namespace if isinstance(namespace, dict) else None


def shadow_class(target: Any) -> type:
    """Return the per-target subclass carrying intercepted accessors.

    Created on first use and assigned to ``target.__class__``; the
    target keeps passing ``isinstance`` checks against its original type.
    Raises ``TypeError`` when the target's class cannot be reassigned.
    """
    cls = type(target)
    if is_synthetic_class(cls):
        return cls

    def body(ns: dict[str, Any]) -> None:
        ns[SYNTHETIC_CLASS_ATTR] = True
        ns["__module__"] = cls.__module__
        ns["__qualname__"] = cls.__qualname__
        ns["__slots__"] = ()

    synthetic = types.new_class(cls.__name__, (cls,), exec_body=body)
    target.__class__ = synthetic
    return synthetic
