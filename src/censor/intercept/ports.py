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
"""Ports consumed by the interception engines.

The engines never probe targets themselves. Classifying a value as an
instance or a constructor, and locating an attribute's accessors, are
capabilities supplied through these protocols so hosts with unusual
object models can plug in their own introspection.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, Union, runtime_checkable


@dataclass(frozen=True)
class Instance:
    """An already-constructed object."""

    ref: Any


@dataclass(frozen=True)
class Constructor:
    """A class or factory producing new objects."""

    ctor: Callable[..., Any]


Target = Union[Instance, Constructor]


@dataclass(frozen=True)
class DescriptorInfo:
    """Accessors discovered for one attribute of one target.

    Attributes:
        getter: Zero-argument callable reading the original value.
        setter: One-argument callable writing through the original path,
            or ``None`` when the attribute is read-only.
        owner: The class that declares the attribute, ``None`` when it
            lives in the instance's own namespace.
        depth: Level at which it was found (0 = instance namespace).
    """

    getter: Callable[[], Any] | None
    setter: Callable[[Any], None] | None
    owner: type | None
    depth: int


@runtime_checkable
class TargetClassifier(Protocol):
    """Resolves a value into an Instance or a Constructor."""

    def classify(self, value: Any) -> Target: ...


@runtime_checkable
class DescriptorLookup(Protocol):
    """Bounded search for an attribute's accessors across a type hierarchy."""

    def find(self, target: Any, name: str, max_depth: int) -> DescriptorInfo | None: ...
