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
"""CensorObject: installs call, attribute and event interception on one live object."""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from censor.core.properties import CensorProperties, default_properties
from censor.intercept.archive import ShadowArchive, TargetRecord, default_archive, shadow_key
from censor.intercept.ports import DescriptorLookup
from censor.intercept.reflection import ReflectiveDescriptorLookup, is_scalar, shadow_class
from censor.intercept.types import AttrHandles, Context, Handle, as_handle
from censor.kernel.exceptions import (
    LookupExhaustedException,
    TypeMismatchException,
    UnregisteredOriginalException,
)

logger = logging.getLogger(__name__)

# Set on every substitute listener built by ``on()``.
_SUBSTITUTE_EVENT_ATTR = "__censor_event__"

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _check_name(value: Any, what: str = "name") -> None:
    if not isinstance(value, str):
        raise TypeMismatchException.expected(what, value, "str")


class CensorObject:
    """Rewrites members of one already-constructed object in place.

    Every ``when_*``/``on`` call mutates the target immediately and returns
    the engine so registrations chain::

        censor(client).when_call("send", audit).on("close", on_close)

    Originals are captured once per member in a :class:`ShadowArchive`;
    re-registering a member installs a new wrapper but keeps the first
    captured original, so every handle's ``pass_()`` reaches the real
    member, never an earlier wrapper.
    """

    def __init__(
        self,
        target: Any,
        properties: CensorProperties | None = None,
        *,
        lookup: DescriptorLookup | None = None,
        archive: ShadowArchive | None = None,
    ) -> None:
        if is_scalar(target):
            raise TypeMismatchException.expected("censor target", target, "object")
        self.object = target
        self.properties = properties if properties is not None else default_properties()
        self._lookup: DescriptorLookup = lookup if lookup is not None else ReflectiveDescriptorLookup()
        self._archive = archive if archive is not None else default_archive
        # Holds the record alive for as long as this engine (and its wrappers) live.
        self._record: TargetRecord = self._archive.record(target)

    def __repr__(self) -> str:
        return f"CensorObject({type(self.object).__name__})"

    # ------------------------------------------------------------------
    # Direct access to archived originals
    # ------------------------------------------------------------------

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Call the archived original of method *name*."""
        return self._original("call", name)(*args, **kwargs)

    def get_attr(self, name: str) -> Any:
        """Read attribute *name* through its archived original getter."""
        return self._original("get", name)()

    def set_attr(self, name: str, value: Any) -> None:
        """Write attribute *name* through its archived original setter."""
        self._original("set", name)(value)

    def _original(self, kind: Any, name: str) -> Callable[..., Any]:
        entry = self._archive.lookup(self.object, kind, name)
        if entry is None or entry.original is None:
            key = shadow_key(name, kind)
            raise UnregisteredOriginalException(
                f"No original archived under {key} for {type(self.object).__name__}",
                context={"key": key, "name": name, "kind": kind},
            )
        return entry.original

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    def when_call(self, name: str, handle: Handle | Callable[..., Any]) -> CensorObject:
        """Route calls of method *name* through *handle*.

        The handle is invoked as ``handle(ctx, *args, **kwargs)`` and its
        return value becomes the call's result. An async handle makes the
        installed wrapper a coroutine function.
        """
        _check_name(name)
        member = getattr(self.object, name, None)
        if not callable(member):
            raise TypeMismatchException.expected(f"member {name!r}", member, "callable")
        resolved = as_handle(handle)

        entry = self._archive.capture(self.object, "call", name, member)
        wrapper = self._build_call_wrapper(name, resolved, member)
        installed: Any = wrapper
        if isinstance(self.object, type) and isinstance(
            inspect.getattr_static(self.object, name, None), (staticmethod, classmethod)
        ):
            # Already bound (or unbound) by the class; keep the binding unchanged.
            installed = staticmethod(wrapper)
        try:
            self._install_member(name, installed, wrapper)
        except (AttributeError, TypeError) as exc:
            raise TypeMismatchException(
                f"Cannot replace member {name!r} on {type(self.object).__name__}",
                context={"name": name},
            ) from exc
        entry.wrapper = wrapper

        logger.debug("Call interception installed: %s.%s (async=%s)", type(self.object).__name__, name, resolved.is_async)
        return self

    def _install_member(self, name: str, installed: Any, wrapper: Callable[..., Any]) -> None:
        try:
            setattr(self.object, name, installed)
        except AttributeError:
            if isinstance(self.object, type):
                raise
            # No instance dict (``__slots__``): the per-target subclass carries
            # the wrapper, unbound since it already closes over the bound original.
            setattr(shadow_class(self.object), name, staticmethod(wrapper))

    def _build_call_wrapper(self, name: str, handle: Handle, member: Any) -> Callable[..., Any]:
        callback = functools.partial(self.call, name)

        if handle.is_async:

            @functools.wraps(member)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                ctx = Context(name=name, parent=self, callback=callback, args=args, kwargs=kwargs)
                return await handle(ctx, *args, **kwargs)

            return async_wrapper

        @functools.wraps(member)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            ctx = Context(name=name, parent=self, callback=callback, args=args, kwargs=kwargs)
            return handle(ctx, *args, **kwargs)

        return wrapper

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def when_attr(self, name: str, handles: AttrHandles | Mapping[str, Any]) -> CensorObject:
        """Route reads and writes of attribute *name* through *handles*.

        *handles* may hold a ``get`` handle called as ``get(ctx)`` and a
        ``set`` handle called as ``set(ctx, value)``. A missing handle
        passes straight through to the original accessor.

        Raises:
            LookupExhaustedException: *name* was not found within
                ``properties.max_depth`` levels.
        """
        _check_name(name)
        resolved = AttrHandles.of(handles)
        if resolved.set is not None and resolved.set.is_async:
            raise TypeMismatchException(
                f"set handle for {name!r} must be synchronous",
                context={"name": name},
            )

        max_depth = self.properties.max_depth
        info = self._lookup.find(self.object, name, max_depth)
        if info is None:
            raise LookupExhaustedException(
                f"No attribute {name!r} within {max_depth} levels of {type(self.object).__name__}",
                context={"name": name, "max_depth": max_depth},
            )
        self._archive.capture(self.object, "get", name, info.getter)
        self._archive.capture(self.object, "set", name, info.setter)

        accessor = self._build_accessor(name, resolved)
        try:
            setattr(shadow_class(self.object), name, accessor)
        except TypeError as exc:
            raise TypeMismatchException(
                f"Cannot install accessor {name!r} on {type(self.object).__name__}",
                context={"name": name},
            ) from exc

        logger.debug(
            "Attribute interception installed: %s.%s (get=%s, set=%s, depth=%d)",
            type(self.object).__name__,
            name,
            resolved.get is not None,
            resolved.set is not None,
            info.depth,
        )
        return self

    def _build_accessor(self, name: str, handles: AttrHandles) -> property:
        read = functools.partial(self.get_attr, name)
        write = functools.partial(self.set_attr, name)

        def fget(_target: Any) -> Any:
            if handles.get is None:
                return read()
            return handles.get(Context(name=name, parent=self, callback=read))

        def fset(_target: Any, value: Any) -> None:
            if handles.set is None:
                write(value)
                return
            handles.set(Context(name=name, parent=self, callback=write, args=(value,)), value)

        return property(fget, fset, doc=f"Intercepted attribute {name!r}.")

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, event: str, handle: Handle | Callable[..., Any]) -> CensorObject:
        """Run *handle* before every listener of *event*.

        Both delivery channels are covered: the single-listener slot
        (``on<event>`` by default) and the listener registration method
        (``add_event_listener`` by default). The handle is invoked as
        ``handle(ctx, *event_args)`` with the listener as ``ctx.callback``.
        Registering *event* again replaces its handle for every listener,
        including ones attached earlier.
        """
        _check_name(event, "event")
        resolved = as_handle(handle)
        record = self._archive.record(self.object)
        record.events[event] = resolved

        slot_hooked = self._hook_event_slot(event)
        registration_hooked = self._hook_registration(record)
        if not (slot_hooked or registration_hooked):
            raise TypeMismatchException(
                f"{type(self.object).__name__} exposes no channel for event {event!r}",
                context={"event": event},
            )

        logger.debug(
            "Event interception installed: %s.%s (slot=%s, registration=%s)",
            type(self.object).__name__,
            event,
            slot_hooked,
            registration_hooked,
        )
        return self

    def _hook_event_slot(self, event: str) -> bool:
        slot = f"{self.properties.slot_prefix}{event}"
        previous = getattr(self.object, slot, None)
        if self._lookup.find(self.object, slot, self.properties.max_depth) is None:
            try:
                setattr(self.object, slot, None)
            except (AttributeError, TypeError):
                logger.debug("No %s slot on %s", slot, type(self.object).__name__)
                return False

        def slot_setter(ctx: Context, listener: Any) -> Any:
            if listener is None:
                return ctx.next(None)
            if not callable(listener):
                raise TypeMismatchException.expected(f"{slot} listener", listener, "callable")
            return ctx.next(self._substitute(event, listener))

        self.when_attr(slot, {"set": slot_setter})
        # Reattach whatever listener was there so it is wrapped too.
        setattr(self.object, slot, getattr(previous, "__wrapped__", previous) if _is_substitute(previous) else previous)
        return True

    def _hook_registration(self, record: TargetRecord) -> bool:
        register = self.properties.register_method
        unregister = self.properties.unregister_method

        if not record.registration_hooked and callable(getattr(self.object, register, None)):
            self.when_call(register, self._intercept_registration)
            record.registration_hooked = True
        if not record.unregistration_hooked and callable(getattr(self.object, unregister, None)):
            self.when_call(unregister, self._intercept_unregistration)
            record.unregistration_hooked = True
        return record.registration_hooked

    def _listener_call(self, ctx: Context) -> tuple[Any, Any, Callable[[Any], Any]] | None:
        """Find the event and listener of a (un)registration call.

        Arguments are bound against the archived method, so they may be
        given by position or by keyword. Returns ``None`` when the call
        does not bind; the original then reports the error itself.
        """
        try:
            signature = inspect.signature(self._original("call", ctx.name))
        except (TypeError, ValueError):
            signature = None
        if signature is None:
            if len(ctx.args) < 2:
                return None
            listener_param = None
            event, listener = ctx.args[0], ctx.args[1]
        else:
            params = list(signature.parameters.values())[:2]
            if len(params) < 2 or any(p.kind not in _POSITIONAL for p in params):
                return None
            try:
                bound = signature.bind(*ctx.args, **ctx.kwargs)
            except TypeError:
                return None
            event_param, listener_param = params[0].name, params[1].name
            if event_param not in bound.arguments or listener_param not in bound.arguments:
                return None
            event, listener = bound.arguments[event_param], bound.arguments[listener_param]

        def forward(replacement: Any) -> Any:
            if listener_param is not None and listener_param in ctx.kwargs:
                return ctx.next(*ctx.args, **{**ctx.kwargs, listener_param: replacement})
            args = list(ctx.args)
            args[1] = replacement
            return ctx.next(*args, **ctx.kwargs)

        return event, listener, forward

    def _intercept_registration(self, ctx: Context, *args: Any, **kwargs: Any) -> Any:
        record = self._archive.record(self.object)
        found = self._listener_call(ctx)
        if found is None:
            return ctx.pass_()
        event, listener, forward = found
        if not isinstance(event, str) or event not in record.events or not callable(listener):
            return ctx.pass_()
        key = (event, listener)
        try:
            substitute = record.substitutes.get(key)
            if substitute is None:
                substitute = self._substitute(event, listener)
                record.substitutes[key] = substitute
        except TypeError:
            # Unhashable listener: cannot be matched on removal.
            substitute = self._substitute(event, listener)
        return forward(substitute)

    def _intercept_unregistration(self, ctx: Context, *args: Any, **kwargs: Any) -> Any:
        record = self._archive.record(self.object)
        found = self._listener_call(ctx)
        if found is None:
            return ctx.pass_()
        event, listener, forward = found
        try:
            substitute = record.substitutes.pop((event, listener), None)
        except TypeError:
            substitute = None
        if substitute is None:
            return ctx.pass_()
        return forward(substitute)

    def _substitute(self, event: str, listener: Callable[..., Any]) -> Callable[..., Any]:
        """Wrap *listener* so the event's current handle runs first."""
        record = self._archive.record(self.object)

        def deliver(args: tuple, kwargs: dict[str, Any]) -> Any:
            ctx = Context(name=event, parent=self, callback=listener, args=args, kwargs=kwargs)
            return record.events[event](ctx, *args, **kwargs)

        if record.events[event].is_async:

            async def async_substitute(*args: Any, **kwargs: Any) -> Any:
                result = deliver(args, kwargs)
                if inspect.isawaitable(result):
                    result = await result
                return result

            substitute: Callable[..., Any] = async_substitute
        else:

            def sync_substitute(*args: Any, **kwargs: Any) -> Any:
                return deliver(args, kwargs)

            substitute = sync_substitute

        substitute.__wrapped__ = listener  # type: ignore[attr-defined]
        setattr(substitute, _SUBSTITUTE_EVENT_ATTR, event)
        return substitute


def _is_substitute(value: Any) -> bool:
    return callable(value) and hasattr(value, _SUBSTITUTE_EVENT_ATTR)
