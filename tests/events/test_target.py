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
"""Tests for the EventTarget host."""

import pytest

from censor.core.properties import CensorProperties
from censor.events.target import EventTarget
from censor.intercept.engine import CensorObject


class TestEventTarget:
    def test_slot_runs_before_listeners(self):
        target = EventTarget()
        order: list[str] = []
        target.add_event_listener("click", lambda e: order.append("listener"))
        target.onclick = lambda e: order.append("slot")

        target.dispatch_event("click", {})

        assert order == ["slot", "listener"]

    def test_listeners_in_registration_order(self):
        target = EventTarget()
        first = lambda e: "first"  # noqa: E731
        second = lambda e: "second"  # noqa: E731
        target.add_event_listener("click", first)
        target.add_event_listener("click", second)

        assert target.dispatch_event("click", None) == ["first", "second"]
        assert target.listeners("click") == [first, second]

    def test_duplicate_listener_ignored(self):
        target = EventTarget()
        listener = lambda e: e  # noqa: E731
        target.add_event_listener("click", listener)
        target.add_event_listener("click", listener)
        assert target.listeners("click") == [listener]

    def test_none_listener_ignored(self):
        target = EventTarget()
        target.add_event_listener("click", None)
        assert target.listeners("click") == []

    def test_remove_listener(self):
        target = EventTarget()
        listener = lambda e: e  # noqa: E731
        target.add_event_listener("click", listener)
        target.remove_event_listener("click", listener)
        target.remove_event_listener("click", listener)
        assert target.dispatch_event("click", 1) == []

    def test_once_listener_runs_once(self):
        target = EventTarget()
        calls: list[int] = []
        target.add_event_listener("ready", calls.append, once=True)

        target.dispatch_event("ready", 1)
        target.dispatch_event("ready", 2)

        assert calls == [1]

    def test_non_callable_slot_skipped(self):
        target = EventTarget()
        target.onclick = None
        assert target.dispatch_event("click") == []

    def test_kwargs_forwarded(self):
        target = EventTarget()
        target.onmove = lambda x, *, y: (x, y)
        assert target.dispatch_event("move", 1, y=2) == [(1, 2)]

    def test_custom_slot_prefix(self):
        class Emitter(EventTarget):
            slot_prefix = "handle_"

        emitter = Emitter()
        emitter.handle_data = lambda d: d * 2
        assert emitter.dispatch_event("data", 3) == [6]

    def test_default_prefix_from_properties(self):
        assert EventTarget().slot_prefix == "on"

    def test_configured_prefix_matches_engine(self):
        props = CensorProperties(slot_prefix="handle_")
        target = EventTarget(props)
        seen: list = []
        CensorObject(target, props).on("data", lambda ctx, d: seen.append(d) or ctx.pass_())
        target.handle_data = lambda d: d * 2

        assert target.dispatch_event("data", 3) == [6]
        assert seen == [3]

    @pytest.mark.asyncio
    async def test_async_dispatch_awaits_coroutines(self):
        target = EventTarget()

        async def listener(value):
            return value + 1

        target.add_event_listener("tick", listener)
        target.ontick = lambda value: value * 10

        assert await target.dispatch_event_async("tick", 4) == [40, 5]
