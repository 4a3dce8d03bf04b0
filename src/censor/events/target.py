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
"""EventTarget: a host object exposing both event delivery channels.

Delivery of an event runs the single-listener slot (``on<event>``) first,
then every registered listener in registration order.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from censor.core.properties import CensorProperties, default_properties

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


@dataclass
class _Registration:
    listener: Listener
    once: bool = False


class EventTarget:
    """Minimal event host.

    Usage::

        button = EventTarget()
        button.onclick = lambda event: print("slot", event)
        button.add_event_listener("click", lambda event: print("listener", event))
        button.dispatch_event("click", {"x": 1})

    Slots are named ``<slot_prefix><type>``. The prefix is
    ``censor.slot_prefix`` from *properties*, matching the slot CensorObject
    hooks, unless a subclass sets ``slot_prefix`` itself.
    """

    slot_prefix: str | None = None

    def __init__(self, properties: CensorProperties | None = None) -> None:
        self._registrations: dict[str, list[_Registration]] = {}
        if self.slot_prefix is None:
            self.slot_prefix = (properties if properties is not None else default_properties()).slot_prefix

    def add_event_listener(self, type: str, listener: Listener | None, once: bool = False) -> None:
        """Register *listener* for *type*; the same listener is only added once."""
        if listener is None:
            return
        bucket = self._registrations.setdefault(type, [])
        if any(reg.listener == listener for reg in bucket):
            return
        bucket.append(_Registration(listener, once))

    def remove_event_listener(self, type: str, listener: Listener | None) -> None:
        bucket = self._registrations.get(type, [])
        for index, reg in enumerate(bucket):
            if reg.listener == listener:
                del bucket[index]
                return

    def listeners(self, type: str) -> list[Listener]:
        """Registered listeners of *type*, slot excluded."""
        return [reg.listener for reg in self._registrations.get(type, [])]

    def _targets(self, type: str) -> list[Listener]:
        targets: list[Listener] = []
        slot = getattr(self, f"{self.slot_prefix}{type}", None)
        if callable(slot):
            targets.append(slot)
        bucket = self._registrations.get(type, [])
        for reg in list(bucket):
            if reg.once:
                bucket.remove(reg)
            targets.append(reg.listener)
        return targets

    def dispatch_event(self, type: str, *args: Any, **kwargs: Any) -> list[Any]:
        """Deliver *type* synchronously; returns each listener's result."""
        targets = self._targets(type)
        logger.debug("Dispatching %s to %d listener(s)", type, len(targets))
        return [listener(*args, **kwargs) for listener in targets]

    async def dispatch_event_async(self, type: str, *args: Any, **kwargs: Any) -> list[Any]:
        """Deliver *type*, awaiting listeners that return awaitables."""
        targets = self._targets(type)
        logger.debug("Dispatching %s to %d listener(s)", type, len(targets))
        results: list[Any] = []
        for listener in targets:
            result = listener(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            results.append(result)
        return results
