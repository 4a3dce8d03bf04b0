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
"""Tests for CensorObject.when_attr: accessor interception."""

from __future__ import annotations

import pytest

from censor.core.properties import CensorProperties
from censor.intercept.engine import CensorObject
from censor.intercept.ports import DescriptorInfo
from censor.intercept.types import Context
from censor.kernel.exceptions import (
    LookupExhaustedException,
    TypeMismatchException,
    UnregisteredOriginalException,
)


class Counted:
    """Property whose accessors count their invocations."""

    def __init__(self) -> None:
        self._value = 0
        self.gets = 0
        self.sets = 0

    @property
    def value(self) -> int:
        self.gets += 1
        return self._value

    @value.setter
    def value(self, new: int) -> None:
        self.sets += 1
        self._value = new

    @property
    def readonly(self) -> str:
        return "fixed"


class Deep(Counted):
    pass


class Deeper(Deep):
    pass


def identity_get(ctx: Context):
    return ctx.pass_()


def identity_set(ctx: Context, value):
    ctx.pass_()


class TestRoundTrip:
    def test_identity_handles_round_trip(self) -> None:
        obj = Counted()
        CensorObject(obj).when_attr("value", {"get": identity_get, "set": identity_set})

        obj.value = 5
        assert obj.sets == 1
        assert obj.value == 5
        assert obj.gets == 1

    def test_get_handle_transforms(self) -> None:
        obj = Counted()
        obj.value = 3
        CensorObject(obj).when_attr("value", {"get": lambda ctx: ctx.pass_() * 10})
        assert obj.value == 30

    def test_set_handle_modifies_value(self) -> None:
        obj = Counted()
        CensorObject(obj).when_attr("value", {"set": lambda ctx, v: ctx.next(v + 1)})
        obj.value = 1
        assert obj._value == 2

    def test_set_handle_suppresses_write(self) -> None:
        obj = Counted()
        CensorObject(obj).when_attr("value", {"set": lambda ctx, v: None})
        obj.value = 9
        assert obj._value == 0
        assert obj.sets == 0

    def test_missing_handle_passes_through(self) -> None:
        obj = Counted()
        CensorObject(obj).when_attr("value", {"get": identity_get})
        obj.value = 4
        assert obj.value == 4
        assert obj.sets == 1

    def test_set_context_carries_value(self) -> None:
        seen: list[Context] = []
        obj = Counted()
        engine = CensorObject(obj).when_attr("value", {"set": lambda ctx, v: seen.append(ctx)})
        obj.value = 8
        assert seen[0].args == (8,)
        assert seen[0].name == "value"
        assert seen[0].parent is engine

    def test_fresh_context_per_access(self) -> None:
        seen: list[Context] = []
        obj = Counted()
        CensorObject(obj).when_attr("value", {"get": lambda ctx: seen.append(ctx) or ctx.pass_()})
        _ = obj.value
        _ = obj.value
        assert seen[0] is not seen[1]


class TestTargets:
    def test_instance_data_attribute(self) -> None:
        class Plain:
            def __init__(self):
                self.name = "a"

        obj = Plain()
        CensorObject(obj).when_attr("name", {"get": lambda ctx: ctx.pass_().upper()})
        assert obj.name == "A"
        obj.name = "b"
        assert obj.name == "B"
        assert vars(obj)["name"] == "b"

    def test_inherited_property(self) -> None:
        obj = Deeper()
        CensorObject(obj).when_attr("value", {"get": lambda ctx: -1})
        assert obj.value == -1

    def test_other_instances_untouched(self) -> None:
        obj, other = Counted(), Counted()
        CensorObject(obj).when_attr("value", {"get": lambda ctx: -1})
        assert other.value == 0
        assert type(other) is Counted

    def test_isinstance_preserved(self) -> None:
        obj = Counted()
        CensorObject(obj).when_attr("value", {"get": identity_get})
        assert isinstance(obj, Counted)

    def test_two_attributes_share_shadow_class(self) -> None:
        obj = Counted()
        engine = CensorObject(obj)
        engine.when_attr("value", {"get": lambda ctx: 1})
        synthetic = type(obj)
        engine.when_attr("readonly", {"get": lambda ctx: "patched"})
        assert type(obj) is synthetic
        assert (obj.value, obj.readonly) == (1, "patched")

    def test_reintercept_keeps_first_original(self) -> None:
        obj = Counted()
        obj.value = 2
        engine = CensorObject(obj)
        engine.when_attr("value", {"get": lambda ctx: 100})
        engine.when_attr("value", {"get": lambda ctx: ctx.pass_()})
        assert obj.value == 2


class TestAccessors:
    def test_get_attr_and_set_attr(self) -> None:
        obj = Counted()
        engine = CensorObject(obj).when_attr("value", {"get": lambda ctx: -1, "set": lambda ctx, v: None})
        engine.set_attr("value", 6)
        assert engine.get_attr("value") == 6
        assert obj.value == -1

    def test_read_only_property_pass_through_set_fails(self) -> None:
        obj = Counted()
        CensorObject(obj).when_attr("readonly", {"set": identity_set})
        with pytest.raises(UnregisteredOriginalException, match="_CENSOR_set_readonly"):
            obj.readonly = "x"

    def test_read_only_property_can_be_emulated(self) -> None:
        stored: dict[str, str] = {}
        obj = Counted()
        CensorObject(obj).when_attr(
            "readonly",
            {"get": lambda ctx: stored.get("v", ctx.pass_()), "set": lambda ctx, v: stored.update(v=v)},
        )
        assert obj.readonly == "fixed"
        obj.readonly = "new"
        assert obj.readonly == "new"

    def test_get_attr_without_capture(self) -> None:
        with pytest.raises(UnregisteredOriginalException):
            CensorObject(Counted()).get_attr("value")


class TestLookup:
    def test_missing_attribute_raises(self) -> None:
        with pytest.raises(LookupExhaustedException, match="'nope'"):
            CensorObject(Counted()).when_attr("nope", {"get": identity_get})

    def test_depth_bound_from_properties(self) -> None:
        engine = CensorObject(Deeper(), CensorProperties(max_depth=1))
        with pytest.raises(LookupExhaustedException) as info:
            engine.when_attr("value", {"get": identity_get})
        assert info.value.context["max_depth"] == 1

    def test_injected_lookup(self) -> None:
        calls: list[tuple] = []
        store = {"v": 1}

        class FakeLookup:
            def find(self, target, name, max_depth):
                calls.append((name, max_depth))
                return DescriptorInfo(
                    getter=lambda: store["v"],
                    setter=lambda value: store.update(v=value),
                    owner=None,
                    depth=0,
                )

        obj = Counted()
        CensorObject(obj, lookup=FakeLookup()).when_attr("virtual", {"get": lambda ctx: ctx.pass_() + 1})
        assert obj.virtual == 2
        obj.virtual = 10
        assert store["v"] == 10
        assert calls == [("virtual", 10)]


class TestValidation:
    def test_handles_must_be_mapping(self) -> None:
        with pytest.raises(TypeMismatchException):
            CensorObject(Counted()).when_attr("value", identity_get)  # type: ignore[arg-type]

    def test_async_set_handle_rejected(self) -> None:
        async def setter(ctx, value):
            ctx.pass_()

        with pytest.raises(TypeMismatchException, match="synchronous"):
            CensorObject(Counted()).when_attr("value", {"set": setter})

    def test_builtin_target_cannot_host_accessor(self) -> None:
        import types

        ns = types.SimpleNamespace(value=1)
        with pytest.raises(TypeMismatchException, match="Cannot install accessor"):
            CensorObject(ns).when_attr("value", {"get": identity_get})
