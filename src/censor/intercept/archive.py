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
"""ShadowArchive: out-of-band store of captured originals.

Originals are kept in an identity-keyed side table rather than on the
target, so nothing is smuggled onto objects owned by other code. Entries
are still addressable by their reserved shadow keys (``_CENSOR_<name>``,
``_CENSOR_get_<name>``, ``_CENSOR_set_<name>``) for inspection.
"""

from __future__ import annotations

import logging
import weakref
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

from censor.intercept.types import Handle

logger = logging.getLogger(__name__)

SHADOW_PREFIX = "_CENSOR_"

Kind = Literal["call", "get", "set"]


def shadow_key(name: str, kind: Kind) -> str:
    """Reserved key an original is archived under."""
    if kind == "call":
        return f"{SHADOW_PREFIX}{name}"
    return f"{SHADOW_PREFIX}{kind}_{name}"


@dataclass
class ArchiveEntry:
    """One captured original and the wrapper currently installed over it.

    ``original`` is ``None`` when the member had no behavior of that kind
    (e.g. the setter of a read-only property).
    """

    original: Callable[..., Any] | None
    wrapper: Any = None


@dataclass
class TargetRecord:
    """Everything censor tracks for a single target."""

    originals: dict[tuple[Kind, str], ArchiveEntry] = field(default_factory=dict)
    events: dict[str, Handle] = field(default_factory=dict)
    substitutes: dict[tuple[str, Any], Callable[..., Any]] = field(default_factory=dict)
    registration_hooked: bool = False
    unregistration_hooked: bool = False


class ShadowArchive:
    """Identity-keyed table of :class:`TargetRecord` objects.

    The table holds records weakly. Engines and the wrappers they install
    keep a record alive, so a record lives exactly as long as something
    intercepted on its target does, and vanishes with the target.
    """

    def __init__(self) -> None:
        self._records: weakref.WeakValueDictionary[int, TargetRecord] = weakref.WeakValueDictionary()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, target: Any) -> bool:
        return id(target) in self._records

    def record(self, target: Any) -> TargetRecord:
        """Return the record for *target*, creating it on first use."""
        record = self._records.get(id(target))
        if record is None:
            record = TargetRecord()
            self._records[id(target)] = record
        return record

    def capture(self, target: Any, kind: Kind, name: str, original: Callable[..., Any] | None) -> ArchiveEntry:
        """Archive *original* unless something was already captured.

        The first capture for ``(target, kind, name)`` wins; later calls
        return the existing entry untouched.
        """
        originals = self.record(target).originals
        entry = originals.get((kind, name))
        if entry is None:
            entry = ArchiveEntry(original=original)
            originals[(kind, name)] = entry
            logger.debug("Captured original %s on %s", shadow_key(name, kind), type(target).__name__)
        return entry

    def lookup(self, target: Any, kind: Kind, name: str) -> ArchiveEntry | None:
        record = self._records.get(id(target))
        if record is None:
            return None
        return record.originals.get((kind, name))

    def keys(self, target: Any) -> list[str]:
        """Shadow keys archived for *target*, in capture order."""
        record = self._records.get(id(target))
        if record is None:
            return []
        return [shadow_key(name, kind) for kind, name in record.originals]

    def discard(self, target: Any) -> None:
        """Forget everything archived for *target*.

        Installed wrappers stay in place; pass-through from them raises
        UnregisteredOriginalException afterwards.
        """
        record = self._records.pop(id(target), None)
        if record is not None:
            record.originals.clear()


default_archive = ShadowArchive()
