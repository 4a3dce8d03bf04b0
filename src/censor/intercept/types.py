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
"""Interception core types: Context, handle variants and AttrHandles."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from censor.kernel.exceptions import TypeMismatchException


@dataclass(frozen=True)
class Context:
    """What a handle receives for one interception dispatch.

    A new Context is built for every call, attribute access and event
    delivery, so a handle that suspends never sees its fields change.

    Attributes:
        name: The member, attribute or event name being intercepted.
        parent: The engine that installed the interception.
        args: Positional arguments of this dispatch.
        kwargs: Keyword arguments of this dispatch.
        callback: Pass-through to the original behavior.
    """

    name: str
    parent: Any
    callback: Callable[..., Any]
    args: tuple = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def next(self, *args: Any, **kwargs: Any) -> Any:
        """Run the original with modified arguments and return its result."""
        return self.callback(*args, **kwargs)

    def pass_(self) -> Any:
        """Run the original with the arguments this dispatch received."""
        return self.next(*self.args, **self.kwargs)


@dataclass(frozen=True)
class SyncHandle:
    """A handle whose result is returned to the caller as-is."""

    fn: Callable[..., Any]

    is_async = False

    def __call__(self, ctx: Context, *args: Any, **kwargs: Any) -> Any:
        return self.fn(ctx, *args, **kwargs)


@dataclass(frozen=True)
class AsyncHandle:
    """A handle that must be awaited; wrappers built from it are coroutines."""

    fn: Callable[..., Any]

    is_async = True

    async def __call__(self, ctx: Context, *args: Any, **kwargs: Any) -> Any:
        return await self.fn(ctx, *args, **kwargs)


Handle = Union[SyncHandle, AsyncHandle]


def as_handle(handle: Any, what: str = "handle") -> Handle:
    """Resolve *handle* to one of the two handle variants.

    Explicit variants are kept as they are. A bare coroutine function
    becomes an AsyncHandle, any other callable a SyncHandle.
    """
    if isinstance(handle, (SyncHandle, AsyncHandle)):
        return handle
    if not callable(handle):
        raise TypeMismatchException.expected(what, handle, "callable")
    if inspect.iscoroutinefunction(handle):
        return AsyncHandle(handle)
    return SyncHandle(handle)


@dataclass(frozen=True)
class AttrHandles:
    """Optional get and set handles for one attribute."""

    get: Handle | None = None
    set: Handle | None = None

    @classmethod
    def of(cls, handles: AttrHandles | Mapping[str, Any]) -> AttrHandles:
        """Normalize an AttrHandles or a ``{"get": ..., "set": ...}`` mapping."""
        if isinstance(handles, AttrHandles):
            raw_get, raw_set = handles.get, handles.set
        elif isinstance(handles, Mapping):
            unknown = set(handles) - {"get", "set"}
            if unknown:
                raise TypeMismatchException(
                    f"attribute handles: unexpected keys {sorted(unknown)}",
                    context={"keys": sorted(unknown)},
                )
            raw_get, raw_set = handles.get("get"), handles.get("set")
        else:
            raise TypeMismatchException.expected("attribute handles", handles, "AttrHandles or mapping")
        return cls(
            get=as_handle(raw_get, "get handle") if raw_get is not None else None,
            set=as_handle(raw_set, "set handle") if raw_set is not None else None,
        )
