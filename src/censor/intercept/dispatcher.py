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
"""Entry point: pick the engine matching the value being censored."""

from __future__ import annotations

from typing import Any

from censor.intercept.engine import CensorObject
from censor.intercept.ports import Constructor, Instance, TargetClassifier
from censor.intercept.reflection import ReflectiveTargetClassifier
from censor.intercept.template import CensorClass
from censor.kernel.exceptions import InvalidTargetException

default_classifier: TargetClassifier = ReflectiveTargetClassifier()


def censor(
    value: Any,
    *config: Any,
    classifier: TargetClassifier | None = None,
    **options: Any,
) -> CensorObject | CensorClass:
    """Return the engine for *value*.

    Objects get a :class:`CensorObject`, classes and factory functions a
    :class:`CensorClass`. Extra arguments go to the engine's initializer.

    Raises:
        InvalidTargetException: *value* is a scalar such as ``None``,
            a number or a string.

    Example::

        censor(client).when_call("send", audit).on("close", on_close)
    """
    match (classifier or default_classifier).classify(value):
        case Constructor(ctor):
            return CensorClass(ctor, *config, **options)
        case Instance(ref):
            return CensorObject(ref, *config, **options)
        case other:
            raise InvalidTargetException(
                f"Classifier returned {type(other).__name__}, expected Instance or Constructor",
                context={"type": type(other).__name__},
            )
