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
"""CensorClass: records interception for a constructor and replays it on every new instance."""

from __future__ import annotations

import functools
import inspect
import logging
import sys
from collections.abc import Callable, Mapping, MutableMapping
from typing import Any

from censor.core.properties import CensorProperties, default_properties
from censor.intercept.engine import CensorObject, _check_name
from censor.intercept.types import AttrHandles, Handle, as_handle
from censor.kernel.exceptions import TypeMismatchException

logger = logging.getLogger(__name__)

# Default for ``implement_on``: the module that defines the constructor.
DEFINING_MODULE: Any = object()


class CensorClass:
    """Reusable set of registrations applied to every future instance.

    ``when_call``, ``when_attr`` and ``on`` only record; nothing is
    wrapped until an instance exists. :meth:`gen_func` builds the
    replacement constructor that creates an instance and replays the
    recorded handles onto it through a :class:`CensorObject`.

    Args:
        cls: The class (or factory function) to replace.
        access_name: Name the constructor is bound under, when it differs
            from ``cls.__name__``.
        implement_on: Module, object or mutable mapping that receives the
            replacement constructor on creation. Defaults to the module
            defining *cls*; ``None`` leaves the substitution to the caller.
        properties: Engine settings passed to every replayed engine.
    """

    def __init__(
        self,
        cls: Callable[..., Any],
        access_name: str | None = None,
        implement_on: Any = DEFINING_MODULE,
        properties: CensorProperties | None = None,
    ) -> None:
        if not (isinstance(cls, type) or inspect.isfunction(cls) or inspect.isbuiltin(cls)):
            raise TypeMismatchException.expected("censor constructor", cls, "class or function")
        if access_name is not None:
            _check_name(access_name, "access name")
        self.cls = cls
        self.name: str = access_name if access_name is not None else cls.__name__
        self.properties = properties if properties is not None else default_properties()
        self._call_handles: dict[str, Handle] = {}
        self._attr_handles: dict[str, AttrHandles] = {}
        self._event_handles: dict[str, Handle] = {}

        if implement_on is not None:
            self.implement(None if implement_on is DEFINING_MODULE else implement_on)

    def __repr__(self) -> str:
        return f"CensorClass({self.name})"

    def when_call(self, name: str, handle: Handle | Callable[..., Any]) -> CensorClass:
        _check_name(name)
        self._call_handles[name] = as_handle(handle)
        return self

    def when_attr(self, name: str, handles: AttrHandles | Mapping[str, Any]) -> CensorClass:
        _check_name(name)
        self._attr_handles[name] = AttrHandles.of(handles)
        return self

    def on(self, event: str, handle: Handle | Callable[..., Any]) -> CensorClass:
        _check_name(event, "event")
        self._event_handles[event] = as_handle(handle)
        return self

    def apply(self, obj: Any) -> CensorClass:
        """Replay every recorded handle onto *obj*.

        Calls first, then attributes, then events.
        """
        engine = CensorObject(obj, self.properties)
        for name, handle in self._call_handles.items():
            engine.when_call(name, handle)
        for name, handles in self._attr_handles.items():
            engine.when_attr(name, handles)
        for event, handle in self._event_handles.items():
            engine.on(event, handle)
        logger.debug(
            "Replayed %s onto %s (calls=%d, attrs=%d, events=%d)",
            self.name,
            type(obj).__name__,
            len(self._call_handles),
            len(self._attr_handles),
            len(self._event_handles),
        )
        return self

    def gen_func(self) -> Callable[..., Any]:
        """Build the replacement constructor.

        Handles recorded after this call still apply to instances created
        later, since the registry is read at construction time.

        Example::

            template = censor(WebSocket, None, None)
            template.when_call("send", log_send)
            WebSocket = template.gen_func()
        """
        template = self

        @functools.wraps(self.cls, updated=())
        def construct(*args: Any, **kwargs: Any) -> Any:
            instance = template.cls(*args, **kwargs)
            template.apply(instance)
            return instance

        return construct

    def implement(self, target: Any = None) -> Callable[..., Any]:
        """Bind :meth:`gen_func` under :attr:`name` on *target*.

        *target* defaults to the module defining the constructor.
        """
        if target is None:
            target = sys.modules[self.cls.__module__]
        func = self.gen_func()
        if isinstance(target, MutableMapping):
            target[self.name] = func
        else:
            setattr(target, self.name, func)
        logger.debug("Installed replacement constructor %s on %r", self.name, target)
        return func
