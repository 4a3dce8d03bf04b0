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
"""Interception engines: per-object, per-class, and the dispatcher choosing between them."""

from censor.intercept.archive import SHADOW_PREFIX, ArchiveEntry, ShadowArchive, default_archive, shadow_key
from censor.intercept.dispatcher import censor
from censor.intercept.engine import CensorObject
from censor.intercept.ports import Constructor, DescriptorInfo, DescriptorLookup, Instance, TargetClassifier
from censor.intercept.reflection import ReflectiveDescriptorLookup, ReflectiveTargetClassifier
from censor.intercept.template import CensorClass
from censor.intercept.types import AsyncHandle, AttrHandles, Context, SyncHandle, as_handle

__all__ = [
    "SHADOW_PREFIX",
    "ArchiveEntry",
    "AsyncHandle",
    "AttrHandles",
    "CensorClass",
    "CensorObject",
    "Constructor",
    "Context",
    "DescriptorInfo",
    "DescriptorLookup",
    "Instance",
    "ReflectiveDescriptorLookup",
    "ReflectiveTargetClassifier",
    "ShadowArchive",
    "SyncHandle",
    "TargetClassifier",
    "as_handle",
    "censor",
    "default_archive",
    "shadow_key",
]
