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
"""censor: attach handles around calls, attribute access and events of live objects.

Example::

    from censor import censor

    async def audit(ctx, request):
        response = await ctx.pass_()
        log.info("sent", status=response.status_code)
        return response

    censor(client).when_call("send", audit).on("close", lambda ctx, *a: ctx.pass_())
"""

from censor.core import CensorProperties, Config, config_properties
from censor.events import EventTarget
from censor.intercept import (
    AsyncHandle,
    AttrHandles,
    CensorClass,
    CensorObject,
    Context,
    ShadowArchive,
    SyncHandle,
    censor,
    default_archive,
)
from censor.kernel import (
    CensorException,
    InvalidTargetException,
    LookupExhaustedException,
    TypeMismatchException,
    UnregisteredOriginalException,
)

__all__ = [
    # Engines
    "censor",
    "CensorObject",
    "CensorClass",
    # Handles
    "Context",
    "SyncHandle",
    "AsyncHandle",
    "AttrHandles",
    # Archive
    "ShadowArchive",
    "default_archive",
    # Host
    "EventTarget",
    # Configuration
    "Config",
    "CensorProperties",
    "config_properties",
    # Errors
    "CensorException",
    "TypeMismatchException",
    "InvalidTargetException",
    "LookupExhaustedException",
    "UnregisteredOriginalException",
]
